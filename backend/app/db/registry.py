# Every model module is imported here so that AbstractSQLModel.metadata knows
# about all tables (alembic autogenerate and test schema creation rely on it).
from app.api.users.models import Users
from app.api.campaigns.models import Campaigns
from app.api.donations.models import Donations
from app.api.volunteers.models import Volunteers

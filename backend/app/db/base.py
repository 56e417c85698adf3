from sqlalchemy.orm import declarative_base

AbstractSQLModel = declarative_base()

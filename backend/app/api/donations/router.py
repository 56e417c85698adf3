from datetime import datetime
from typing import List
from fastapi import APIRouter, BackgroundTasks, status

from app.api.donations import service
from app.api.donations.background_tasks import send_donation_receipt
from app.api.donations.schemas import (
    DonationCreate,
    DonationCreateResponse,
    DonationResponse,
)
from app.core.auth.dependencies import AdminAuth, DependsAuth
from app.core.email.dependencies import MailerDep
from app.db.core import SessionDep

router = APIRouter(prefix="/donations")


@router.post("", status_code=status.HTTP_201_CREATED, summary="Make a donation")
async def create_donation(
    body: DonationCreate,
    session: SessionDep,
    mailer: MailerDep,
    background_tasks: BackgroundTasks,
    user: DependsAuth,
) -> DonationCreateResponse:
    result = await service.record_donation(session, user, **body.model_dump())
    donation = await service.get_donation(session, result.value.id)
    transaction_id = service.transaction_id(donation)
    background_tasks.add_task(
        send_donation_receipt,
        mailer,
        donation.email,
        donation.name,
        donation.amount,
        donation.type.value,
        transaction_id,
        donation.campaign.title if donation.campaign else None,
    )
    return DonationCreateResponse.model_validate(
        {**DonationResponse.model_validate(donation).model_dump(), "transaction_id": transaction_id}
    )


@router.get("/my", summary="List own donations")
async def list_my_donations(
    session: SessionDep,
    user: DependsAuth,
    start_date: datetime | None = None,
    end_date: datetime | None = None,
) -> List[DonationResponse]:
    return await service.list_user_donations(session, user.id, start_date, end_date)


@router.get("", summary="List all donations")
async def list_donations(session: SessionDep, admin: AdminAuth) -> List[DonationResponse]:
    return await service.list_donations(session)

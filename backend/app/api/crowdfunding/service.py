"""
Crowdfunding applications: campaign rows with ``type=crowdfunding`` that go
through submit, organizer email verification and admin review.
"""

import logging
from datetime import timedelta
from typing import List

from fastapi import UploadFile
from jwt.exceptions import ExpiredSignatureError, InvalidTokenError
from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.campaigns import service as campaign_service
from app.api.campaigns.models import CampaignStatus, CampaignTypes, Campaigns
from app.api.crowdfunding.schemas import VerificationTokenData
from app.api.users.models import Users
from app.config import settings
from app.core.auth.jwt import create_access_token, decode_jwt_token
from app.core.storage.files import LocalFileStorage
from app.core.validations.exceptions import NotFoundError, RequestValidationError

logger = logging.getLogger(__name__)

VERIFY_TOKEN_TYPE = "cf_email_verify"
NOT_FOUND_MESSAGE = "Crowdfunding application not found"


def get_document_storage() -> LocalFileStorage:
    return LocalFileStorage(
        root=settings.UPLOAD_DIR,
        upload_to="crowdfunding",
        max_files=settings.MAX_UPLOAD_FILES,
        max_size=settings.MAX_UPLOAD_SIZE,
    )


def _crowdfunding():
    return select(Campaigns).where(Campaigns.type == CampaignTypes.crowdfunding)


async def list_approved(session: AsyncSession) -> List[Campaigns]:
    query = _crowdfunding().where(Campaigns.status == CampaignStatus.approved)
    return list(await session.scalars(query.order_by(Campaigns.created_at.desc())))


async def get_approved(session: AsyncSession, campaign_id: int) -> Campaigns:
    campaign = await session.scalar(
        _crowdfunding().where(
            Campaigns.id == campaign_id, Campaigns.status == CampaignStatus.approved
        )
    )
    if not campaign:
        raise NotFoundError(NOT_FOUND_MESSAGE)
    return campaign


async def list_by_organizer(session: AsyncSession, organizer_id: int) -> List[Campaigns]:
    query = _crowdfunding().where(Campaigns.organizer_id == organizer_id)
    return list(await session.scalars(query.order_by(Campaigns.created_at.desc())))


async def list_all(session: AsyncSession) -> List[Campaigns]:
    return list(await session.scalars(_crowdfunding().order_by(Campaigns.created_at.desc())))


async def get_owned(session: AsyncSession, campaign_id: int, organizer_id: int) -> Campaigns:
    campaign = await session.scalar(
        _crowdfunding().where(
            Campaigns.id == campaign_id, Campaigns.organizer_id == organizer_id
        )
    )
    if not campaign:
        raise NotFoundError(NOT_FOUND_MESSAGE)
    return campaign


async def submit_application(
    session: AsyncSession,
    storage: LocalFileStorage,
    organizer: Users,
    documents: List[UploadFile],
    **fields,
) -> Campaigns:
    """
    Validate every document, store them and create a pending application.

    Nothing is written to disk unless all documents pass, and stored files are
    removed again if the row cannot be created.
    """
    pending = await storage.validate(documents or [])
    if not pending:
        raise RequestValidationError("At least one document is required")

    paths = storage.save(pending)
    try:
        campaign = Campaigns(
            **{key: value for key, value in fields.items() if value is not None},
            type=CampaignTypes.crowdfunding,
            status=CampaignStatus.pending,
            organizer_id=organizer.id,
            documents=paths,
            email_verified=False,
        )
        session.add(campaign)
        await session.commit()
    except Exception:
        await session.rollback()
        storage.delete(paths)
        raise
    logger.info(f"Crowdfunding application {campaign.id} submitted by user {organizer.id}")
    return await campaign_service.get_campaign_or_404(session, campaign.id)


def create_verification_token(campaign: Campaigns) -> str:
    return create_access_token(
        {
            "token_type": VERIFY_TOKEN_TYPE,
            "campaign_id": campaign.id,
            "user_id": campaign.organizer_id,
        },
        expires_delta=timedelta(hours=settings.VERIFICATION_TOKEN_EXPIRE_HOURS),
    )


def verification_link(token: str) -> str:
    return f"{settings.api_public_url}/api/crowdfunding/verify-email?token={token}"


async def verify_email(session: AsyncSession, token: str | None) -> Campaigns:
    if not token:
        raise RequestValidationError("Verification token is missing")
    try:
        token_data = VerificationTokenData(**decode_jwt_token(token))
    except ExpiredSignatureError:
        raise RequestValidationError("Verification link has expired")
    except (InvalidTokenError, ValidationError):
        raise RequestValidationError("Verification link is invalid")
    if token_data.token_type != VERIFY_TOKEN_TYPE:
        raise RequestValidationError("Verification link is invalid")

    campaign = await get_owned(session, token_data.campaign_id, token_data.user_id)
    if not campaign.email_verified:
        campaign.email_verified = True
        await session.commit()
        logger.info(f"Crowdfunding application {campaign.id} email verified")
    return campaign


async def prepare_resend(session: AsyncSession, campaign_id: int, user: Users) -> Campaigns:
    campaign = await get_owned(session, campaign_id, user.id)
    if campaign.email_verified:
        raise RequestValidationError("Email already verified")
    return campaign


async def create_crowdfunding(session: AsyncSession, **fields) -> Campaigns:
    return await campaign_service.create_campaign(
        session, **fields, type=CampaignTypes.crowdfunding
    )


async def update_crowdfunding(session: AsyncSession, campaign_id: int, fields: dict) -> Campaigns:
    return await campaign_service.update_campaign(
        session, campaign_id, fields, CampaignTypes.crowdfunding, NOT_FOUND_MESSAGE
    )


async def delete_crowdfunding(
    session: AsyncSession, storage: LocalFileStorage, campaign_id: int
) -> None:
    campaign = await campaign_service.get_campaign_or_404(
        session, campaign_id, CampaignTypes.crowdfunding, NOT_FOUND_MESSAGE
    )
    documents = list(campaign.documents or [])
    await campaign_service.delete_campaign(
        session, campaign_id, CampaignTypes.crowdfunding, NOT_FOUND_MESSAGE
    )
    storage.delete(documents)


async def approve(session: AsyncSession, campaign_id: int) -> Campaigns:
    campaign = await campaign_service.get_campaign_or_404(
        session, campaign_id, CampaignTypes.crowdfunding, NOT_FOUND_MESSAGE
    )
    if campaign.status == CampaignStatus.approved:
        return campaign
    if campaign.status == CampaignStatus.rejected:
        raise RequestValidationError("Application has already been rejected")
    if settings.REQUIRE_EMAIL_VERIFIED_FOR_APPROVAL and not campaign.email_verified:
        raise RequestValidationError("Organizer email is not verified")

    campaign.status = CampaignStatus.approved
    campaign.rejection_reason = None
    await session.commit()
    logger.info(f"Crowdfunding application {campaign.id} approved")
    return campaign


async def reject(session: AsyncSession, campaign_id: int, reason: str | None = None) -> Campaigns:
    campaign = await campaign_service.get_campaign_or_404(
        session, campaign_id, CampaignTypes.crowdfunding, NOT_FOUND_MESSAGE
    )
    if campaign.status == CampaignStatus.rejected:
        return campaign
    if campaign.status == CampaignStatus.approved:
        raise RequestValidationError("Application has already been approved")

    campaign.status = CampaignStatus.rejected
    campaign.rejection_reason = reason or "Rejected"
    await session.commit()
    logger.info(f"Crowdfunding application {campaign.id} rejected")
    return campaign

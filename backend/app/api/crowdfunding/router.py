import logging
from datetime import datetime
from typing import Annotated, List

from fastapi import APIRouter, BackgroundTasks, Depends, File, Form, Request, UploadFile, status
from fastapi.templating import Jinja2Templates

from app.api.campaigns.schemas import CampaignDetailResponse, CampaignListResponse, CampaignUpdate
from app.api.crowdfunding import service
from app.api.crowdfunding.background_tasks import send_verification_email
from app.api.crowdfunding.schemas import CrowdfundingCreate, RejectRequest
from app.config import settings
from app.core.auth.dependencies import AdminAuth, DependsAuth
from app.core.email.dependencies import MailerDep
from app.core.rate_limit import upload_limit
from app.core.response.base_model import MessageResponse
from app.core.storage.files import LocalFileStorage
from app.db.core import SessionDep
from app.response import CustomHTTPException

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/crowdfunding")
templates = Jinja2Templates(directory=settings.TEMPLATES_DIR)

StorageDep = Annotated[LocalFileStorage, Depends(service.get_document_storage)]


def queue_verification_email(background_tasks: BackgroundTasks, mailer, campaign, user) -> None:
    token = service.create_verification_token(campaign)
    background_tasks.add_task(
        send_verification_email,
        mailer,
        user.email,
        user.name,
        campaign.title,
        service.verification_link(token),
    )


@router.get("", summary="List approved crowdfunding campaigns")
async def list_crowdfunding(session: SessionDep) -> List[CampaignListResponse]:
    return await service.list_approved(session)


@router.post("/apply", status_code=status.HTTP_201_CREATED, summary="Apply for crowdfunding")
@upload_limit
async def apply(
    request: Request,
    session: SessionDep,
    storage: StorageDep,
    mailer: MailerDep,
    background_tasks: BackgroundTasks,
    user: DependsAuth,
    title: Annotated[str, Form(min_length=1, max_length=200)],
    description: Annotated[str, Form(min_length=1)],
    target_amount: Annotated[float, Form(gt=0)],
    start_date: Annotated[datetime | None, Form()] = None,
    end_date: Annotated[datetime | None, Form()] = None,
    category: Annotated[str | None, Form()] = None,
    image_url: Annotated[str | None, Form()] = None,
    documents: Annotated[List[UploadFile] | None, File()] = None,
) -> CampaignDetailResponse:
    campaign = await service.submit_application(
        session,
        storage,
        user,
        documents or [],
        title=title,
        description=description,
        target_amount=target_amount,
        start_date=start_date,
        end_date=end_date,
        category=category,
        image_url=image_url,
    )
    queue_verification_email(background_tasks, mailer, campaign, user)
    return campaign


@router.get("/verify-email", summary="Confirm the organizer's email", include_in_schema=False)
async def verify_email(request: Request, session: SessionDep, token: str | None = None):
    redirect_url = f"{settings.FRONTEND_URL.rstrip('/')}/crowdfunding/apply"
    try:
        campaign = await service.verify_email(session, token)
    except CustomHTTPException as e:
        return templates.TemplateResponse(
            request,
            "crowdfunding/verification_failed.html",
            {"app_name": settings.APP_NAME, "message": e.message, "redirect_url": redirect_url},
            status_code=e.status_code,
        )
    return templates.TemplateResponse(
        request,
        "crowdfunding/verified.html",
        {"app_name": settings.APP_NAME, "title": campaign.title, "redirect_url": redirect_url},
    )


@router.get("/my", summary="List own applications")
async def list_my_applications(session: SessionDep, user: DependsAuth) -> List[CampaignDetailResponse]:
    return await service.list_by_organizer(session, user.id)


@router.get("/all", summary="List every application")
async def list_all_applications(session: SessionDep, admin: AdminAuth) -> List[CampaignDetailResponse]:
    return await service.list_all(session)


@router.post("/{campaign_id}/resend-verification", summary="Send a fresh verification link")
async def resend_verification(
    campaign_id: int,
    session: SessionDep,
    mailer: MailerDep,
    background_tasks: BackgroundTasks,
    user: DependsAuth,
) -> MessageResponse:
    campaign = await service.prepare_resend(session, campaign_id, user)
    queue_verification_email(background_tasks, mailer, campaign, user)
    return MessageResponse(message="Verification email sent")


@router.post("", status_code=status.HTTP_201_CREATED, summary="Create a crowdfunding campaign")
async def create_crowdfunding(
    body: CrowdfundingCreate, session: SessionDep, admin: AdminAuth
) -> CampaignDetailResponse:
    return await service.create_crowdfunding(session, **body.model_dump())


@router.put("/{campaign_id}/approve", summary="Approve an application")
async def approve_application(
    campaign_id: int, session: SessionDep, admin: AdminAuth
) -> CampaignDetailResponse:
    return await service.approve(session, campaign_id)


@router.put("/{campaign_id}/reject", summary="Reject an application")
async def reject_application(
    campaign_id: int,
    session: SessionDep,
    admin: AdminAuth,
    body: RejectRequest | None = None,
) -> CampaignDetailResponse:
    return await service.reject(session, campaign_id, body.reason if body else None)


@router.put("/{campaign_id}", summary="Update a crowdfunding campaign")
async def update_crowdfunding(
    campaign_id: int, body: CampaignUpdate, session: SessionDep, admin: AdminAuth
) -> CampaignDetailResponse:
    return await service.update_crowdfunding(
        session, campaign_id, body.model_dump(exclude_unset=True)
    )


@router.delete("/{campaign_id}", summary="Delete a crowdfunding campaign")
async def delete_crowdfunding(
    campaign_id: int, session: SessionDep, storage: StorageDep, admin: AdminAuth
) -> MessageResponse:
    await service.delete_crowdfunding(session, storage, campaign_id)
    return MessageResponse(message="Crowdfunding campaign deleted successfully")


@router.get("/{campaign_id}", summary="Get an approved crowdfunding campaign")
async def get_crowdfunding(campaign_id: int, session: SessionDep) -> CampaignDetailResponse:
    return await service.get_approved(session, campaign_id)

from typing import List
from fastapi import APIRouter, status

from app.api.campaigns import service
from app.api.campaigns.schemas import (
    CampaignCreate,
    CampaignDetailResponse,
    CampaignListResponse,
    CampaignUpdate,
)
from app.core.auth.dependencies import AdminAuth
from app.core.response.base_model import MessageResponse
from app.db.core import SessionDep

router = APIRouter(prefix="/campaigns")


@router.get("", summary="List campaigns")
async def list_campaigns(session: SessionDep) -> List[CampaignListResponse]:
    """Crowdfunding records only show up here once approved."""
    return await service.list_public_campaigns(session)


@router.get("/{campaign_id}", summary="Get a campaign")
async def get_campaign(campaign_id: int, session: SessionDep) -> CampaignDetailResponse:
    return await service.get_public_campaign(session, campaign_id)


@router.post("", status_code=status.HTTP_201_CREATED, summary="Create a campaign")
async def create_campaign(
    body: CampaignCreate, session: SessionDep, admin: AdminAuth
) -> CampaignDetailResponse:
    return await service.create_campaign(session, **body.model_dump())


@router.put("/{campaign_id}", summary="Update a campaign")
async def update_campaign(
    campaign_id: int, body: CampaignUpdate, session: SessionDep, admin: AdminAuth
) -> CampaignDetailResponse:
    return await service.update_campaign(
        session, campaign_id, body.model_dump(exclude_unset=True)
    )


@router.delete("/{campaign_id}", summary="Delete a campaign")
async def delete_campaign(
    campaign_id: int, session: SessionDep, admin: AdminAuth
) -> MessageResponse:
    await service.delete_campaign(session, campaign_id)
    return MessageResponse(message="Campaign deleted successfully")

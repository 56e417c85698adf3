from fastapi import APIRouter
from app.api.auth.router import router as auth_router
from app.api.users.router import router as user_router
from app.api.campaigns.router import router as campaigns_router
from app.api.crowdfunding.router import router as crowdfunding_router
from app.api.donations.router import router as donations_router
from app.api.volunteers.router import router as volunteers_router

api_router = APIRouter(
    prefix="/api",
    responses={404: {"description": "Not found"}},
)

api_router.include_router(router=auth_router, tags=["auth"])
api_router.include_router(router=user_router, tags=["users"])
api_router.include_router(router=campaigns_router, tags=["campaigns"])
api_router.include_router(router=crowdfunding_router, tags=["crowdfunding"])
api_router.include_router(router=donations_router, tags=["donations"])
api_router.include_router(router=volunteers_router, tags=["volunteers"])

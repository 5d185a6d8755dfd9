"""Application API routes: public submission, admin listing and review."""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, status
from pydantic import Field

from leaderboard.models import MAX_TOTAL_WIN, async_session_factory
from leaderboard.services import applications as application_service
from leaderboard.services.review import review_application
from web.api.utils import CamelModel
from web.auth import AdminPrincipal, require_admin

router = APIRouter(prefix="/api/applications", tags=["applications"])


class ApplicationCreate(CamelModel):
    name: str
    email: str
    phone_number: str
    nickname: str
    account_name: str
    total_win: int = Field(ge=0, le=MAX_TOTAL_WIN)
    proof_url: Optional[str] = None


class ApplicationResponse(CamelModel):
    id: str
    name: str
    email: str
    phone_number: str
    nickname: str
    account_name: str
    total_win: int
    proof_url: str
    status: str
    created_at: datetime


class ApplicationReview(CamelModel):
    status: str  # approved | rejected


@router.post("", response_model=ApplicationResponse, status_code=status.HTTP_201_CREATED)
async def submit_application(body: ApplicationCreate):
    """Submit a claim of winnings for review (public)."""
    async with async_session_factory() as session:
        application = await application_service.submit_application(
            session,
            name=body.name,
            email=body.email,
            phone_number=body.phone_number,
            nickname=body.nickname,
            account_name=body.account_name,
            total_win=body.total_win,
            proof_url=body.proof_url,
        )
        return ApplicationResponse.model_validate(application)


@router.get("", response_model=list[ApplicationResponse])
async def list_applications(admin: AdminPrincipal = Depends(require_admin)):
    """All applications, newest first (admin only)."""
    async with async_session_factory() as session:
        applications = await application_service.list_applications(session)
        return [ApplicationResponse.model_validate(a) for a in applications]


@router.patch("/{application_id}", response_model=ApplicationResponse)
async def update_application_status(
    application_id: str, body: ApplicationReview, admin: AdminPrincipal = Depends(require_admin)
):
    """Approve or reject a pending application (admin only). Approval creates or raises the player."""
    async with async_session_factory() as session:
        application = await review_application(session, application_id, body.status)
        return ApplicationResponse.model_validate(application)

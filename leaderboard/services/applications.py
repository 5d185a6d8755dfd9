"""Public submission and admin listing of applications."""
from __future__ import annotations

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from leaderboard.errors import InvalidArgument
from leaderboard.models import Application, ApplicationStatus
from leaderboard.services.players import validate_total_win

REQUIRED_FIELDS = ("name", "email", "phone_number", "nickname", "account_name")


async def submit_application(
    session: AsyncSession,
    *,
    name: str,
    email: str,
    phone_number: str,
    nickname: str,
    account_name: str,
    total_win: int,
    proof_url: Optional[str] = None,
) -> Application:
    """Store a new pending application. Text fields are trimmed; blank ones are rejected."""
    values = {
        "name": name,
        "email": email,
        "phone_number": phone_number,
        "nickname": nickname,
        "account_name": account_name,
    }
    values = {key: (value or "").strip() for key, value in values.items()}
    missing = [key for key in REQUIRED_FIELDS if not values[key]]
    if missing:
        raise InvalidArgument(f"Required fields are missing: {', '.join(missing)}")
    validate_total_win(total_win)
    application = Application(
        **values,
        total_win=total_win,
        proof_url=(proof_url or "").strip(),
        status=ApplicationStatus.PENDING,
    )
    session.add(application)
    await session.commit()
    await session.refresh(application)
    return application


async def list_applications(session: AsyncSession) -> list[Application]:
    """All applications, newest first."""
    result = await session.execute(
        select(Application).order_by(Application.created_at.desc(), Application.id)
    )
    return list(result.scalars().all())

"""Application model: a self-submitted claim of winnings awaiting review."""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import BigInteger, CheckConstraint, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from leaderboard.models.base import Base, new_id, utcnow


class ApplicationStatus:
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

    ALL = (PENDING, APPROVED, REJECTED)


class Application(Base):
    """Submitted claim. ``nickname`` becomes the Player name once approved."""

    __tablename__ = "applications"
    __table_args__ = (
        CheckConstraint("total_win >= 0", name="ck_applications_total_win_non_negative"),
        CheckConstraint(
            "status IN ({})".format(", ".join(f"'{s}'" for s in ApplicationStatus.ALL)),
            name="ck_applications_status",
        ),
    )

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(128), nullable=False)  # Legal name
    email: Mapped[str] = mapped_column(String(254), nullable=False)
    phone_number: Mapped[str] = mapped_column(String(32), nullable=False)
    nickname: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    account_name: Mapped[str] = mapped_column(String(128), nullable=False)  # In-game account
    total_win: Mapped[int] = mapped_column(BigInteger, nullable=False)
    proof_url: Mapped[str] = mapped_column(String(1024), nullable=False, default="")
    status: Mapped[str] = mapped_column(String(16), nullable=False, default=ApplicationStatus.PENDING)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow, index=True)

"""Player model."""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import BigInteger, CheckConstraint, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from leaderboard.models.base import Base, new_id, utcnow

# Largest amount a BIGINT column holds
MAX_TOTAL_WIN = 2**63 - 1


def _fold_name(context) -> str:
    return context.get_current_parameters()["name"].casefold()


class Player(Base):
    """Ranked entry on the leaderboard. ``name`` is what approved applications match on."""

    __tablename__ = "players"
    __table_args__ = (CheckConstraint("total_win >= 0", name="ck_players_total_win_non_negative"),)

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(128), unique=True, nullable=False, index=True)
    # Unicode case-folded name for search; the database's lower() only folds ASCII
    name_folded: Mapped[str] = mapped_column(String(256), nullable=False, default=_fold_name, index=True)
    total_win: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    avatar: Mapped[str] = mapped_column(String(512), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow, index=True)

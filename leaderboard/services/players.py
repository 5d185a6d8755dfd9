"""Leaderboard queries and direct player administration."""
from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from leaderboard.errors import Conflict, InvalidArgument, NotFound
from leaderboard.models import MAX_TOTAL_WIN, Player
from leaderboard.models.base import utcnow
from leaderboard.services.avatar import default_avatar

WEEKLY = "weekly"
MONTHLY = "monthly"
WINDOWS = (WEEKLY, MONTHLY)

DEFAULT_TOP_LIMIT = 10

SAMPLE_PLAYERS = [
    ("Champion123", 50_000_000),
    ("LuckyWinner", 35_000_000),
    ("GoldHunter", 25_000_000),
    ("FortuneMaster", 20_000_000),
    ("LuckyDragon", 15_000_000),
]


def window_start(window: str, now: Optional[datetime] = None) -> datetime:
    """Midnight of the Sunday starting the current week, or of the 1st of the current month."""
    if window not in WINDOWS:
        raise InvalidArgument(f"Unknown window {window!r}")
    now = now or utcnow()
    midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
    if window == WEEKLY:
        # weekday(): Monday=0 .. Sunday=6
        return midnight - timedelta(days=(midnight.weekday() + 1) % 7)
    return midnight.replace(day=1)


def _ranked():
    return select(Player).order_by(Player.total_win.desc(), Player.created_at, Player.id)


async def list_players(session: AsyncSession, window: Optional[str] = None) -> list[Player]:
    """All players by total_win descending, optionally only those created in the current week/month."""
    query = _ranked()
    if window is not None:
        query = query.where(Player.created_at >= window_start(window))
    result = await session.execute(query)
    return list(result.scalars().all())


async def list_top(session: AsyncSession, limit: int = DEFAULT_TOP_LIMIT) -> list[Player]:
    result = await session.execute(_ranked().limit(limit))
    return list(result.scalars().all())


def validate_total_win(total_win) -> int:
    """Whole amount between 0 and what the BIGINT column holds."""
    if total_win is None or total_win < 0 or total_win > MAX_TOTAL_WIN:
        raise InvalidArgument(f"totalWin must be a whole number between 0 and {MAX_TOTAL_WIN}")
    return total_win


def _escape_like(text: str) -> str:
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


async def search_players(session: AsyncSession, query: str) -> list[Player]:
    """Case-insensitive (Unicode case folding) substring match on name. Wildcards in ``query`` match literally."""
    stmt = _ranked()
    if query:
        stmt = stmt.where(Player.name_folded.like(f"%{_escape_like(query.casefold())}%", escape="\\"))
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def create_player(
    session: AsyncSession, name: str, total_win: int, avatar: Optional[str] = None
) -> Player:
    """Create a player directly (admin). Names are unique."""
    name = name.strip()
    if not name:
        raise InvalidArgument("name is required")
    validate_total_win(total_win)
    existing = await session.scalar(select(Player.id).where(Player.name == name))
    if existing is not None:
        raise Conflict(f"Player {name!r} already exists")
    player = Player(name=name, total_win=total_win, avatar=avatar or default_avatar(name))
    session.add(player)
    try:
        await session.commit()
    except IntegrityError as e:
        await session.rollback()
        raise Conflict(f"Player {name!r} already exists") from e
    await session.refresh(player)
    return player


async def set_player_total(session: AsyncSession, player_id: str, total_win: int) -> Player:
    """Overwrite a player's total (admin override, may lower it)."""
    validate_total_win(total_win)
    player = await session.get(Player, player_id)
    if not player:
        raise NotFound("Player not found")
    player.total_win = total_win
    await session.commit()
    await session.refresh(player)
    return player


async def delete_player(session: AsyncSession, player_id: str) -> None:
    player = await session.get(Player, player_id)
    if not player:
        raise NotFound("Player not found")
    await session.delete(player)
    await session.commit()


async def seed_sample_players(session: AsyncSession) -> list[Player]:
    """Replace every player with the demo set."""
    await session.execute(delete(Player))
    players = [Player(name=name, total_win=total, avatar=default_avatar(name)) for name, total in SAMPLE_PLAYERS]
    session.add_all(players)
    await session.commit()
    return players

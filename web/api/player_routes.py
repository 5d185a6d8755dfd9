"""Player API routes: public leaderboard views (read) and admin player management (write)."""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Response, status
from pydantic import Field

import config
from leaderboard.models import MAX_TOTAL_WIN, async_session_factory
from leaderboard.services import players as player_service
from web.api.utils import CamelModel, parse_limit
from web.auth import AdminPrincipal, require_admin

router = APIRouter(prefix="/api/players", tags=["players"])
sample_router = APIRouter(prefix="/api/test", tags=["sample data"])


class PlayerResponse(CamelModel):
    id: str
    name: str
    total_win: int
    avatar: str
    created_at: datetime


class PlayerCreate(CamelModel):
    name: str = Field(min_length=1, max_length=128)
    total_win: int = Field(ge=0, le=MAX_TOTAL_WIN)
    avatar: Optional[str] = None


class PlayerUpdate(CamelModel):
    total_win: int = Field(ge=0, le=MAX_TOTAL_WIN)


def _out(players) -> list[PlayerResponse]:
    return [PlayerResponse.model_validate(p) for p in players]


# --- Leaderboard (public) ---


@router.get("", response_model=list[PlayerResponse])
async def list_players():
    """All players, highest total first."""
    async with async_session_factory() as session:
        return _out(await player_service.list_players(session))


@router.get("/weekly", response_model=list[PlayerResponse])
async def list_weekly_players():
    """Players created since Sunday 00:00 UTC."""
    async with async_session_factory() as session:
        return _out(await player_service.list_players(session, player_service.WEEKLY))


@router.get("/monthly", response_model=list[PlayerResponse])
async def list_monthly_players():
    """Players created since the 1st of this month."""
    async with async_session_factory() as session:
        return _out(await player_service.list_players(session, player_service.MONTHLY))


@router.get("/top", response_model=list[PlayerResponse])
async def list_top_players(limit: Optional[str] = None):
    """Top N players (default 10)."""
    async with async_session_factory() as session:
        return _out(await player_service.list_top(session, parse_limit(limit)))


@router.get("/search", response_model=list[PlayerResponse])
async def search_players(q: str = ""):
    """Players whose name contains ``q``, ignoring case."""
    async with async_session_factory() as session:
        return _out(await player_service.search_players(session, q.strip()))


# --- Admin ---


@router.post("", response_model=PlayerResponse, status_code=status.HTTP_201_CREATED)
async def create_player(body: PlayerCreate, admin: AdminPrincipal = Depends(require_admin)):
    """Add a player directly (admin only)."""
    async with async_session_factory() as session:
        player = await player_service.create_player(session, body.name, body.total_win, body.avatar)
        return PlayerResponse.model_validate(player)


@router.patch("/{player_id}", response_model=PlayerResponse)
async def update_player(player_id: str, body: PlayerUpdate, admin: AdminPrincipal = Depends(require_admin)):
    """Set a player's total (admin only)."""
    async with async_session_factory() as session:
        player = await player_service.set_player_total(session, player_id, body.total_win)
        return PlayerResponse.model_validate(player)


@router.delete("/{player_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_player(player_id: str, admin: AdminPrincipal = Depends(require_admin)):
    """Remove a player (admin only)."""
    async with async_session_factory() as session:
        await player_service.delete_player(session, player_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@sample_router.post("/create-sample-players", status_code=status.HTTP_201_CREATED)
async def create_sample_players(admin: AdminPrincipal = Depends(require_admin)):
    """Replace all players with demo data. Only available when ENABLE_SAMPLE_DATA is set."""
    if not config.ENABLE_SAMPLE_DATA:
        raise HTTPException(404, "Not found")
    async with async_session_factory() as session:
        players = await player_service.seed_sample_players(session)
    return {"message": "Sample players created", "count": len(players)}

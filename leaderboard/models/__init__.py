"""Database models."""
from leaderboard.models.base import Base, async_session_factory, init_db
from leaderboard.models.player import MAX_TOTAL_WIN, Player
from leaderboard.models.application import Application, ApplicationStatus

__all__ = [
    "Base",
    "Player",
    "MAX_TOTAL_WIN",
    "Application",
    "ApplicationStatus",
    "async_session_factory",
    "init_db",
]

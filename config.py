"""Configuration for the leaderboard service."""
from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def _parse_origins(value: str) -> list[str]:
    if not value:
        return []
    return [x.strip() for x in value.split(",") if x.strip()]


# Database
DATABASE_URL = os.getenv(
    "DATABASE_URL",
    f"sqlite+aiosqlite:///{Path(__file__).parent / 'leaderboard.db'}",
)
DATABASE_ECHO = _parse_bool(os.getenv("DATABASE_ECHO", ""))

# Web auth (JWT secret, single admin credential)
JWT_SECRET = os.getenv("JWT_SECRET", "change-me-in-production-use-long-random-string")
JWT_ALGORITHM = "HS256"
JWT_EXPIRE_HOURS = int(os.getenv("JWT_EXPIRE_HOURS", "24"))
ADMIN_USERNAME = os.getenv("ADMIN_USERNAME", "admin")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "")  # Plain value, compared in constant time
ADMIN_PASSWORD_HASH = os.getenv("ADMIN_PASSWORD_HASH", "")  # bcrypt hash; wins over ADMIN_PASSWORD when set

# HTTP
CORS_ORIGINS = _parse_origins(os.getenv("CORS_ORIGINS", "*"))
API_HOST = os.getenv("API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("API_PORT", "8000"))

# Players
AVATAR_BASE_URL = os.getenv("AVATAR_BASE_URL", "https://api.dicebear.com/6.x/personas/svg")
ENABLE_SAMPLE_DATA = _parse_bool(os.getenv("ENABLE_SAMPLE_DATA", ""))  # Exposes /api/test/create-sample-players

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

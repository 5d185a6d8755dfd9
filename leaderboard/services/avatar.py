"""Default avatar URIs for players."""
from __future__ import annotations

from urllib.parse import urlencode

import config


def default_avatar(name: str) -> str:
    """Deterministic avatar URI seeded by the player name."""
    return f"{config.AVATAR_BASE_URL}?{urlencode({'seed': name})}"

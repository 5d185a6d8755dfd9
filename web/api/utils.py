"""Shared API utilities."""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from leaderboard.services.players import DEFAULT_TOP_LIMIT


class CamelModel(BaseModel):
    """JSON uses camelCase keys (totalWin, createdAt); snake_case is accepted on input too."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


def parse_limit(value: Optional[str]) -> int:
    """Positive integer from a query string, else the default top-N size."""
    try:
        limit = int(value) if value is not None else 0
    except ValueError:
        return DEFAULT_TOP_LIMIT
    return limit if limit > 0 else DEFAULT_TOP_LIMIT

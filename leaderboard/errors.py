"""Error taxonomy shared by the services and the HTTP layer."""
from __future__ import annotations


class LeaderboardError(Exception):
    """Base error. ``status_code`` is the HTTP status the API answers with."""

    status_code = 500

    def __init__(self, message: str = "Unexpected error"):
        super().__init__(message)
        self.message = message


class Unauthorized(LeaderboardError):
    status_code = 401


class InvalidArgument(LeaderboardError):
    status_code = 400


class NotFound(LeaderboardError):
    status_code = 404


class Conflict(LeaderboardError):
    status_code = 409


class Internal(LeaderboardError):
    """Storage unavailable or an unexpected failure. Detail is not shown to clients."""

    status_code = 500


class ReviewFailed(Internal):
    """The review transaction was rolled back. Re-running the same review is safe."""

    def __init__(self, application_id: str, message: str = "Review could not be completed, please retry"):
        super().__init__(message)
        self.application_id = application_id

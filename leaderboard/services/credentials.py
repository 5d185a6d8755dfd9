"""Admin credential verification.

The API never checks passwords itself; it asks a ``CredentialVerifier``. The
default verifier knows the single configured admin. Configure
``ADMIN_PASSWORD_HASH`` (see ``hash_password``) to avoid keeping the plain
password in the environment.
"""
from __future__ import annotations

import hashlib
import hmac
import logging
from typing import Optional, Protocol

from passlib.context import CryptContext

import config
from leaderboard.errors import Unauthorized

logger = logging.getLogger("leaderboard.auth")

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def _prepare_password(password: str) -> str:
    """Bcrypt has a 72-byte limit. Pre-hash longer passwords with SHA256."""
    encoded = password.encode("utf-8")
    if len(encoded) > 72:
        return hashlib.sha256(encoded).hexdigest()
    return password


def hash_password(password: str) -> str:
    return pwd_context.hash(_prepare_password(password))


def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(_prepare_password(plain), hashed)


class CredentialVerifier(Protocol):
    def verify(self, username: str, password: str) -> str:
        """Return the authenticated principal name or raise Unauthorized."""
        ...


class ConfiguredAdminVerifier:
    """Single admin whose username and password (or bcrypt hash) come from configuration."""

    def __init__(self, username: str, password: str = "", password_hash: str = ""):
        self.username = username
        self.password = password
        self.password_hash = password_hash

    def _password_matches(self, password: str) -> bool:
        if self.password_hash:
            return verify_password(password, self.password_hash)
        if self.password:
            return hmac.compare_digest(password.encode("utf-8"), self.password.encode("utf-8"))
        return False  # No admin password configured: nobody can log in

    def verify(self, username: str, password: str) -> str:
        user_ok = hmac.compare_digest(username.encode("utf-8"), self.username.encode("utf-8"))
        # Always check the password so timing does not reveal a valid username
        password_ok = self._password_matches(password)
        if not (user_ok and password_ok):
            logger.warning("Failed admin login for username %r", username)
            raise Unauthorized("Invalid username or password")
        return self.username


_verifier: Optional[CredentialVerifier] = None


def get_credential_verifier() -> CredentialVerifier:
    """FastAPI dependency returning the configured verifier (override in tests via dependency_overrides)."""
    global _verifier
    if _verifier is None:
        _verifier = ConfiguredAdminVerifier(
            config.ADMIN_USERNAME,
            password=config.ADMIN_PASSWORD,
            password_hash=config.ADMIN_PASSWORD_HASH,
        )
    return _verifier

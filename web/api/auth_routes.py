"""Auth API routes: login and current admin."""
from __future__ import annotations

from fastapi import APIRouter, Depends

from leaderboard.services.credentials import CredentialVerifier, get_credential_verifier
from web.api.utils import CamelModel
from web.auth import AdminPrincipal, create_access_token, require_admin

router = APIRouter(prefix="/api/auth", tags=["auth"])


class LoginRequest(CamelModel):
    username: str
    password: str


class LoginResponse(CamelModel):
    token: str
    token_type: str = "bearer"
    username: str


class PrincipalResponse(CamelModel):
    username: str


@router.post("/login", response_model=LoginResponse)
async def login(body: LoginRequest, verifier: CredentialVerifier = Depends(get_credential_verifier)):
    """Check the admin credentials and return a 24h JWT."""
    username = verifier.verify(body.username, body.password)
    return LoginResponse(token=create_access_token(username), username=username)


@router.get("/me", response_model=PrincipalResponse)
async def get_me(admin: AdminPrincipal = Depends(require_admin)):
    """Get current authenticated admin. Lets the UI check a stored token is still valid."""
    return PrincipalResponse(username=admin.username)

"""Admin Auth Routes — username/password login for the admin console.

Invariants:
    - Credentials compared in constant time; wrong username or password → 401
      "Invalid credentials" (no hint which one was wrong)
    - Issued token carries role=admin and expires after admin_token_ttl_hours
"""

import logging
import secrets
from datetime import timedelta

from fastapi import APIRouter, Depends

from app.api.responses import success
from app.api.routing import ShapedRoute
from app.config import Settings, get_settings
from app.core.domain_types import UserRole
from app.core.errors import UnauthenticatedError
from app.infrastructure.identity_provider import issue_token
from app.schemas.admin import AdminLoginRequest, AdminLoginResponse

logger = logging.getLogger(__name__)
router = APIRouter(
    prefix="/api/admin/auth", tags=["admin"], route_class=ShapedRoute,
)


def _matches(given: str, expected: str) -> bool:
    return secrets.compare_digest(given.encode(), expected.encode())


@router.post("/login", summary="Log in")
async def admin_login(
    body: AdminLoginRequest, settings: Settings = Depends(get_settings),
):
    username_ok = _matches(body.username, settings.admin_username)
    password_ok = _matches(body.password, settings.admin_password)
    if not (username_ok and password_ok):
        logger.warning("Admin login rejected", extra={"operation": "admin_login"})
        raise UnauthenticatedError("Invalid credentials")

    token, expires_at = issue_token(
        f"admin:{body.username}",
        UserRole.ADMIN,
        settings,
        timedelta(hours=settings.admin_token_ttl_hours),
        extra_claims={"username": body.username},
    )
    logger.info("Admin logged in", extra={"user_id": f"admin:{body.username}"})
    return success(AdminLoginResponse(
        token=token,
        username=body.username,
        role=UserRole.ADMIN.value,
        expires_at=expires_at,
    ))

"""Identity Provider — verification and issuance of signed identity tokens (PyJWT).

Invariants:
    - decode_token never raises for bad credentials: expired, malformed or
      wrongly-signed tokens all yield None
    - Tokens without "sub" or "exp" are rejected
    - Role resolution order: "role" claim, metadata.role, public_metadata.role;
      unknown or missing roles resolve to customer

Design Decisions:
    - Local HMAC verification with a shared secret: no network hop per request
    - issue_token exists for the admin console login only; customer sessions are
      issued by the external provider
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

from app.config import Settings
from app.core.domain_types import AuthenticatedIdentity, UserRole

logger = logging.getLogger(__name__)


def decode_token(token: str, settings: Settings) -> dict[str, Any] | None:
    """Verify signature and expiry, returning claims or None."""
    options = {"require": ["sub", "exp"]}
    if not settings.auth_audience:
        options["verify_aud"] = False
    try:
        return jwt.decode(
            token,
            settings.auth_jwt_secret,
            algorithms=[settings.auth_jwt_algorithm],
            audience=settings.auth_audience,
            leeway=settings.auth_leeway_seconds,
            options=options,
        )
    except jwt.PyJWTError as e:
        logger.info(f"Rejected identity token: {e.__class__.__name__}")
        return None


def _role_claim(claims: dict[str, Any]) -> Any:
    if claims.get("role"):
        return claims["role"]
    for key in ("metadata", "public_metadata"):
        nested = claims.get(key)
        if isinstance(nested, dict) and nested.get("role"):
            return nested["role"]
    return None


def identity_from_claims(claims: dict[str, Any]) -> AuthenticatedIdentity | None:
    subject = claims.get("sub")
    if not isinstance(subject, str) or not subject:
        return None
    try:
        role = UserRole(_role_claim(claims))
    except ValueError:
        role = UserRole.CUSTOMER
    return AuthenticatedIdentity(user_id=subject, role=role, claims=claims)


def issue_token(
    subject: str,
    role: UserRole,
    settings: Settings,
    ttl: timedelta,
    extra_claims: dict[str, Any] | None = None,
    now: datetime | None = None,
) -> tuple[str, datetime]:
    """Sign a token for subject; returns (token, expires_at)."""
    issued_at = now or datetime.now(timezone.utc)
    expires_at = issued_at + ttl
    payload = {
        **(extra_claims or {}),
        "sub": subject,
        "role": role.value,
        "iat": issued_at,
        "exp": expires_at,
    }
    if settings.auth_audience:
        payload["aud"] = settings.auth_audience
    token = jwt.encode(
        payload, settings.auth_jwt_secret, algorithm=settings.auth_jwt_algorithm,
    )
    return token, expires_at

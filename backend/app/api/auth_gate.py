"""Auth Gate — resolves the caller's identity and enforces roles.

Invariants:
    - resolve_identity never raises for a missing or bad credential (returns None)
    - authorize raises UnauthenticatedError (401) for None, ForbiddenError (403)
      for a role mismatch; nothing else
    - The resolved identity is stored on request.state.identity for logging
    - Protected handlers never run (and no service is called) without an identity

Design Decisions:
    - One mechanism, three shapes: dependency (require_identity / require_admin,
      the default), decorator (@authenticated) and inline (resolve_identity +
      branch in the handler)
    - Bearer header wins over the session cookie when both are present
"""

import functools
import inspect
import logging

from fastapi import Depends, Request

from app.config import Settings, get_settings
from app.core.domain_types import AuthenticatedIdentity, UserRole
from app.core.errors import ForbiddenError, UnauthenticatedError
from app.infrastructure.identity_provider import decode_token, identity_from_claims

logger = logging.getLogger(__name__)


def _credential(request: Request, settings: Settings) -> str | None:
    header = request.headers.get("authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() == "bearer" and token.strip():
        return token.strip()
    return request.cookies.get(settings.auth_session_cookie) or None


async def resolve_identity(
    request: Request, settings: Settings | None = None,
) -> AuthenticatedIdentity | None:
    """Identity carried by the request, or None."""
    settings = settings or get_settings()
    token = _credential(request, settings)
    if token is None:
        return None
    claims = decode_token(token, settings)
    identity = identity_from_claims(claims) if claims else None
    request.state.identity = identity
    return identity


def authorize(
    identity: AuthenticatedIdentity | None, role: UserRole | None = None,
) -> AuthenticatedIdentity:
    if identity is None:
        raise UnauthenticatedError()
    if role is not None and identity.role is not role:
        logger.warning(
            f"Role {identity.role.value} denied, {role.value} required",
            extra={"user_id": identity.user_id},
        )
        if role is UserRole.ADMIN:
            raise ForbiddenError("Admin access required")
        raise ForbiddenError()
    return identity


# ─── Dependency form ─────────────────────────────────────────────

async def current_identity(
    request: Request, settings: Settings = Depends(get_settings),
) -> AuthenticatedIdentity | None:
    return await resolve_identity(request, settings)


async def require_identity(
    identity: AuthenticatedIdentity | None = Depends(current_identity),
) -> AuthenticatedIdentity:
    return authorize(identity)


def require_role(role: UserRole):
    async def dependency(
        identity: AuthenticatedIdentity | None = Depends(current_identity),
    ) -> AuthenticatedIdentity:
        return authorize(identity, role)
    return dependency


require_admin = require_role(UserRole.ADMIN)


# ─── Decorator form ──────────────────────────────────────────────

def authenticated(role: UserRole | None = None):
    """Wrap a handler so it only runs for an authorized caller.

    The wrapped handler receives the identity as the `identity` keyword. The
    exposed signature drops `identity` and guarantees a `request` parameter, so
    FastAPI injects the request and never tries to resolve `identity` itself.
    """
    def decorator(func):
        signature = inspect.signature(func)
        wants_request = "request" in signature.parameters
        params = [
            p for name, p in signature.parameters.items() if name != "identity"
        ]
        if not wants_request:
            params.append(inspect.Parameter(
                "request", inspect.Parameter.KEYWORD_ONLY, annotation=Request,
            ))

        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            request = kwargs["request"] if wants_request else kwargs.pop("request")
            identity = authorize(await resolve_identity(request), role)
            return await func(*args, identity=identity, **kwargs)

        wrapper.__signature__ = signature.replace(parameters=params)
        return wrapper
    return decorator

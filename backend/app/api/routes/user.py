"""User Routes — profile sync using the inline form of the auth gate.

Invariants:
    - No credential → 401 before the user service is called
    - First call for a subject creates the local user; later calls return it
"""

import logging

from fastapi import APIRouter, Depends, Request

from app.api.auth_gate import resolve_identity
from app.api.dependencies import get_user_service
from app.api.responses import success
from app.api.routing import ShapedRoute
from app.core.errors import UnauthenticatedError
from app.core.service_protocols import UserService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/user", tags=["user"], route_class=ShapedRoute)


@router.get("/sync", summary="Sync user")
async def sync_user(
    request: Request, service: UserService = Depends(get_user_service),
):
    identity = await resolve_identity(request)
    if identity is None:
        raise UnauthenticatedError()
    profile = await service.sync_from_identity(identity)
    return success(profile, message="User synced")

"""Protected Routes — identity echo endpoints using the decorator form of the auth gate."""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Request

from app.api.auth_gate import authenticated
from app.api.dependencies import read_json_body
from app.api.responses import success
from app.api.routing import ShapedRoute
from app.core.domain_types import AuthenticatedIdentity

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/protected", tags=["auth"], route_class=ShapedRoute)


@router.get("", summary="Fetch protected data")
@authenticated()
async def read_protected(identity: AuthenticatedIdentity):
    return success(
        {"userId": identity.user_id, "role": identity.role.value},
        message="This is a protected route",
    )


@router.post("", summary="Process protected data")
@authenticated()
async def write_protected(request: Request, identity: AuthenticatedIdentity):
    body = await read_json_body(request)
    return success(
        {
            "userId": identity.user_id,
            "receivedData": body,
            "timestamp": datetime.now(timezone.utc),
        },
        message="Data processed successfully",
    )

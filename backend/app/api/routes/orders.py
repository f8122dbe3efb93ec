"""Order Routes — checkout, order history and cancellation for signed-in customers.

Invariants:
    - Every route requires an identity (401 otherwise, before the body is read)
    - Orders are always scoped to the token subject; another user's order is 404
    - An unrecognised status filter is ignored rather than rejected
    - Checkout answers 201 with the created order
"""

import logging

from fastapi import APIRouter, Depends, Query, status

from app.api.auth_gate import require_identity
from app.api.dependencies import get_order_service
from app.api.responses import success
from app.api.routing import ShapedRoute
from app.core.domain_types import AuthenticatedIdentity, OrderStatus
from app.core.request_parsing import parse_int, parse_uuid
from app.core.service_protocols import OrderService
from app.schemas.orders import OrderCancel, OrderCreate

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/orders", tags=["orders"], route_class=ShapedRoute)

MAX_PAGE_SIZE = 50


def _status_filter(raw: str | None) -> OrderStatus | None:
    try:
        return OrderStatus(raw) if raw else None
    except ValueError:
        return None


@router.get("", summary="Fetch orders")
async def list_orders(
    page: str | None = Query(None),
    limit: str | None = Query(None),
    status_filter: str | None = Query(None, alias="status"),
    identity: AuthenticatedIdentity = Depends(require_identity),
    service: OrderService = Depends(get_order_service),
):
    result = await service.list_user_orders(
        identity.user_id,
        page=parse_int(page, "page", 1, minimum=1),
        limit=parse_int(limit, "limit", 10, minimum=1, maximum=MAX_PAGE_SIZE),
        status=_status_filter(status_filter),
    )
    return success(result)


@router.post("", summary="Create order", status_code=status.HTTP_201_CREATED)
async def create_order(
    body: OrderCreate,
    identity: AuthenticatedIdentity = Depends(require_identity),
    service: OrderService = Depends(get_order_service),
):
    order = await service.create_order(identity.user_id, body)
    return success(
        order, message="Order created successfully",
        status_code=status.HTTP_201_CREATED,
    )


@router.get("/{order_id}", summary="Fetch order")
async def get_order(
    order_id: str,
    identity: AuthenticatedIdentity = Depends(require_identity),
    service: OrderService = Depends(get_order_service),
):
    order = await service.get_user_order(
        identity.user_id, parse_uuid(order_id, "order id"),
    )
    return success(order)


@router.delete("/{order_id}", summary="Cancel order")
async def cancel_order(
    order_id: str,
    body: OrderCancel | None = None,
    identity: AuthenticatedIdentity = Depends(require_identity),
    service: OrderService = Depends(get_order_service),
):
    order = await service.cancel_order(
        identity.user_id,
        parse_uuid(order_id, "order id"),
        reason=body.reason if body else None,
    )
    return success(order, message="Order cancelled successfully")

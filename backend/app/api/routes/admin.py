"""Admin Routes — dashboard statistics, analytics, invoices, catalogue stats, users and orders.

Invariants:
    - Every route requires the admin role (router-level dependency): 401 without
      a credential, 403 for other roles, and no service call in either case
    - /stats and /invoices/stats use a date range only when both bounds are given
    - /analytics accepts each bound independently
    - PATCH /orders/{id} accepts only OrderStatus values; kitchenNotes is optional
      and left unchanged when absent
"""

import logging

from fastapi import APIRouter, Depends, Query

from app.api.auth_gate import require_admin
from app.api.dependencies import (
    get_admin_service, get_invoice_service, get_menu_service, get_order_service,
)
from app.api.responses import success
from app.api.routing import ShapedRoute
from app.core.request_parsing import parse_date_range, parse_datetime, parse_uuid
from app.core.service_protocols import (
    AdminService, InvoiceService, MenuService, OrderService,
)
from app.schemas.orders import OrderStatusUpdate

logger = logging.getLogger(__name__)
router = APIRouter(
    prefix="/api/admin",
    tags=["admin"],
    route_class=ShapedRoute,
    dependencies=[Depends(require_admin)],
)


@router.get("/stats", summary="Fetch statistics")
async def dashboard_stats(
    date_from: str | None = Query(None, alias="from"),
    date_to: str | None = Query(None, alias="to"),
    service: AdminService = Depends(get_admin_service),
):
    date_range = parse_date_range(date_from, date_to)
    return success(await service.get_dashboard_stats(date_range))


@router.get("/analytics", summary="Fetch analytics")
async def order_analytics(
    date_from: str | None = Query(None, alias="dateFrom"),
    date_to: str | None = Query(None, alias="dateTo"),
    service: OrderService = Depends(get_order_service),
):
    result = await service.get_order_analytics(
        parse_datetime(date_from, "dateFrom"), parse_datetime(date_to, "dateTo"),
    )
    return success(result)


@router.get("/analytics/customers", summary="Fetch customer analytics")
async def customer_analytics(service: AdminService = Depends(get_admin_service)):
    return success(await service.get_customer_analytics())


@router.get("/invoices/stats", summary="Fetch invoice statistics")
async def invoice_statistics(
    date_from: str | None = Query(None, alias="from"),
    date_to: str | None = Query(None, alias="to"),
    service: InvoiceService = Depends(get_invoice_service),
):
    date_range = parse_date_range(date_from, date_to)
    return success(await service.get_invoice_statistics(date_range))


@router.get("/menu/statistics", summary="Fetch menu statistics")
async def menu_statistics(service: MenuService = Depends(get_menu_service)):
    return success(await service.get_menu_statistics())


@router.get("/users/{user_id}", summary="Fetch user details")
async def user_details(
    user_id: str, service: AdminService = Depends(get_admin_service),
):
    details = await service.get_user_details(parse_uuid(user_id, "user id"))
    return success(details)


@router.get("/orders/{order_id}", summary="Fetch order details")
async def order_details(
    order_id: str, service: OrderService = Depends(get_order_service),
):
    order = await service.get_order_details(parse_uuid(order_id, "order id"))
    return success(order)


@router.patch("/orders/{order_id}", summary="Update order")
async def update_order(
    order_id: str,
    body: OrderStatusUpdate,
    service: OrderService = Depends(get_order_service),
):
    order = await service.update_order_status(
        parse_uuid(order_id, "order id"), body.status, body.kitchen_notes,
    )
    return success(order, message="Order status updated successfully")

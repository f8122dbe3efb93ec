"""Route Dependencies — service providers, id generation and body parsing.

Invariants:
    - Every service a route uses comes from a provider here; tests swap them
      through app.dependency_overrides
    - read_json_body returns a JSON object or raises InvalidInputError (400)

Design Decisions:
    - Session ids from an injected generator: deterministic in tests, uuid4 in prod
"""

import logging
from typing import Any
from uuid import uuid4

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import Settings, get_settings
from app.core.domain_types import SessionIdGenerator
from app.core.errors import InvalidInputError
from app.core.service_protocols import (
    AdminService, InvoiceService, MenuService, OfferService, OrderService,
    UserService,
)
from app.infrastructure.database import get_db
from app.services.admin_service import SqlAdminService
from app.services.invoice_service import SqlInvoiceService
from app.services.menu_service import SqlMenuService
from app.services.offer_service import SqlOfferService
from app.services.order_service import SqlOrderService
from app.services.user_service import SqlUserService

logger = logging.getLogger(__name__)


def get_menu_service(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> MenuService:
    return SqlMenuService(db, search_limit=settings.search_result_limit)


def get_offer_service(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> OfferService:
    return SqlOfferService(
        db, interaction_window_hours=settings.popup_interaction_window_hours,
    )


def get_order_service(db: AsyncSession = Depends(get_db)) -> OrderService:
    return SqlOrderService(db)


def get_admin_service(db: AsyncSession = Depends(get_db)) -> AdminService:
    return SqlAdminService(db)


def get_invoice_service(db: AsyncSession = Depends(get_db)) -> InvoiceService:
    return SqlInvoiceService(db)


def get_user_service(db: AsyncSession = Depends(get_db)) -> UserService:
    return SqlUserService(db)


def new_session_id() -> str:
    return str(uuid4())


def get_session_id_generator() -> SessionIdGenerator:
    return new_session_id


async def read_json_body(request: Request) -> dict[str, Any]:
    """Parse the request body once as a JSON object."""
    try:
        body = await request.json()
    except ValueError:
        raise InvalidInputError("Invalid JSON body")
    if not isinstance(body, dict):
        raise InvalidInputError("Invalid JSON body")
    return body

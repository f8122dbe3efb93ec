"""Shaped Route — route class that turns unexpected handler faults into a 500 envelope.

Invariants:
    - RestaurantError, HTTPException and RequestValidationError pass through to
      the global handlers (their status is already decided)
    - SQLAlchemy faults are mapped like the session manager maps them:
      IntegrityError -> ConflictError (409), anything else -> DatabaseError (503)
    - Any other exception is logged with traceback and answered with
      {"error": "Failed to <summary>"} (or "Internal server error" without a summary)
    - The exception's own text never reaches the client

Design Decisions:
    - Caught inside the route rather than by the Exception handler alone: Starlette's
      ServerErrorMiddleware re-raises after responding, the route class does not
    - Database faults mapped here as well as in the session manager: a query that
      fails inside the endpoint reaches this wrapper before the get_db teardown does
    - Failure text derived from the route summary: one declaration per route,
      no per-handler try/except
"""

import logging

from fastapi import status
from fastapi.exceptions import RequestValidationError
from fastapi.routing import APIRoute
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.requests import Request

from app.api.error_handlers import request_log_context
from app.api.responses import failure
from app.core.errors import (
    GENERIC_ERROR_MESSAGE, ConflictError, DatabaseError, RestaurantError,
)

logger = logging.getLogger(__name__)


def failure_message(summary: str | None) -> str:
    if not summary:
        return GENERIC_ERROR_MESSAGE
    return f"Failed to {summary[0].lower()}{summary[1:]}"


class ShapedRoute(APIRoute):
    def get_route_handler(self):
        handler = super().get_route_handler()
        message = failure_message(self.summary)
        operation = self.name

        async def shaped_handler(request: Request):
            try:
                return await handler(request)
            except (RestaurantError, StarletteHTTPException, RequestValidationError):
                raise
            except IntegrityError as e:
                logger.warning(
                    f"DB integrity error in {operation}: {e}",
                    extra=request_log_context(request, operation=operation),
                )
                raise ConflictError("Resource already exists")
            except SQLAlchemyError as e:
                logger.error(
                    f"{e.__class__.__name__} in {operation}",
                    exc_info=True,
                    extra=request_log_context(request, operation=operation),
                )
                raise DatabaseError("Database operation failed", operation)
            except Exception as e:
                logger.error(
                    f"Unhandled {e.__class__.__name__} in {operation}",
                    exc_info=True,
                    extra=request_log_context(request, operation=operation),
                )
                return failure(message, status.HTTP_500_INTERNAL_SERVER_ERROR)

        return shaped_handler

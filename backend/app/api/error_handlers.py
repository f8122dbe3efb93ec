"""Error Handlers — global exception handlers producing the flat error envelope.

Invariants:
    - RestaurantError → its own status and to_response() body
    - RequestValidationError → 400 "Invalid request data" with field-level details
    - HTTPException → {"error": detail} with the exception's status
    - Exception (catch-all) → 500 "Internal server error", never leaks internal details
    - 401 responses carry WWW-Authenticate: Bearer

Design Decisions:
    - Four-layer handler: domain (RestaurantError), validation (Pydantic),
      framework (HTTPException), catch-all (Exception)
    - Extracted from main.py to keep its import fan-out small
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.responses import failure
from app.core.errors import GENERIC_ERROR_MESSAGE, RestaurantError

logger = logging.getLogger(__name__)

_UNAUTHORIZED_HEADERS = {"WWW-Authenticate": "Bearer"}


def request_log_context(request: Request, **extra) -> dict:
    """Log `extra` fields describing the request and its caller."""
    identity = getattr(request.state, "identity", None)
    context = {
        "path": request.url.path,
        "method": request.method,
        "user_id": identity.user_id if identity else None,
    }
    context.update(extra)
    return context


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_domain_error_handler(app)
    _register_validation_error_handler(app)
    _register_http_error_handler(app)
    _register_generic_error_handler(app)


def _register_domain_error_handler(app: FastAPI) -> None:

    @app.exception_handler(RestaurantError)
    async def restaurant_error_handler(request: Request, exc: RestaurantError):
        context = request_log_context(
            request, error_code=exc.code, status_code=exc.http_status,
            operation=exc.context.operation,
        )
        if exc.is_client_error:
            logger.warning(f"{exc.code}: {exc.message}", extra=context)
        else:
            logger.error(f"{exc.code}: {exc.message}", extra=context)
        headers = _UNAUTHORIZED_HEADERS if exc.http_status == 401 else None
        body = exc.to_response()
        return failure(
            body["error"], exc.http_status, body.get("details"), headers,
        )


def _register_validation_error_handler(app: FastAPI) -> None:

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        logger.warning(
            f"Validation error: {exc.errors()}",
            extra=request_log_context(request, error_code="VALIDATION_ERROR"),
        )
        return failure(
            "Invalid request data",
            status.HTTP_400_BAD_REQUEST,
            _validation_details(exc),
        )


def _register_http_error_handler(app: FastAPI) -> None:

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        headers = dict(exc.headers or {})
        if exc.status_code == 401:
            headers.update(_UNAUTHORIZED_HEADERS)
        return failure(str(exc.detail), exc.status_code, headers=headers or None)


def _register_generic_error_handler(app: FastAPI) -> None:

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all — never leaks internal details."""
        logger.error(
            f"Unhandled exception: {exc.__class__.__name__}",
            exc_info=True,
            extra=request_log_context(request, error_code="INTERNAL_ERROR"),
        )
        return failure(
            GENERIC_ERROR_MESSAGE, status.HTTP_500_INTERNAL_SERVER_ERROR,
        )


def _validation_details(exc: RequestValidationError) -> list[dict]:
    return [
        {
            "field": ".".join(str(loc) for loc in e["loc"]),
            "message": e["msg"],
            "type": e["type"],
        }
        for e in exc.errors()
    ]

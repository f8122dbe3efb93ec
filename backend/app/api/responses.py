"""Response Envelopes — the two JSON shapes every route returns.

Invariants:
    - Success: {"success": true, "data": <T>} plus "message" when given
    - Failure: {"error": str} plus "details" when the fault carries field details
    - Pydantic payloads serialize by alias (camelCase on the wire)
"""

from typing import Any

from fastapi import status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def success(
    data: Any = None,
    message: str | None = None,
    status_code: int = status.HTTP_200_OK,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    body: dict[str, Any] = {"success": True, "data": jsonable_encoder(data)}
    if message:
        body["message"] = message
    return JSONResponse(status_code=status_code, content=body, headers=headers)


def failure(
    error: str,
    status_code: int,
    details: list[dict[str, Any]] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    body: dict[str, Any] = {"error": error}
    if details:
        body["details"] = jsonable_encoder(details)
    return JSONResponse(status_code=status_code, content=body, headers=headers)

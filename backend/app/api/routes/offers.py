"""Offer Routes — active offers, discount evaluation, popups and interaction tracking.

Invariants:
    - /apply requires truthy offerId and orderAmount, else 400 "Missing required fields"
      before any service call
    - /apply returns the service's DiscountResult unchanged in `data`
    - /popup always answers with the session id in use in the x-session-id header;
      a fresh id is generated when neither query nor header supplies one
    - Interactions and popup exclusion for signed-in callers use the token subject,
      never a client-supplied userId

Design Decisions:
    - Bodies read via read_json_body instead of pydantic models: required-field
      checks must answer with the exact legacy message, not a validation report
"""

import logging

from fastapi import APIRouter, Depends, Header, Query, Request, status

from app.api.auth_gate import current_identity
from app.api.dependencies import (
    get_offer_service, get_session_id_generator, read_json_body,
)
from app.api.responses import success
from app.api.routing import ShapedRoute
from app.core.domain_types import (
    AuthenticatedIdentity, InteractionType, OfferType, SessionIdGenerator,
)
from app.core.errors import InvalidInputError
from app.core.request_parsing import missing_fields, parse_amount, parse_uuid
from app.core.service_protocols import OfferService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/offers", tags=["offers"], route_class=ShapedRoute)

MISSING_FIELDS_MESSAGE = "Missing required fields"


def _offer_type(raw: str | None) -> OfferType | None:
    if not raw:
        return None
    try:
        return OfferType(raw)
    except ValueError:
        raise InvalidInputError(f"Invalid offer type '{raw}'", field="type")


@router.get("", summary="Fetch offers")
async def list_offers(
    offer_type: str | None = Query(None, alias="type"),
    service: OfferService = Depends(get_offer_service),
):
    return success(await service.get_active_offers(_offer_type(offer_type)))


@router.post("/apply", summary="Apply offer")
async def apply_offer(
    request: Request, service: OfferService = Depends(get_offer_service),
):
    body = await read_json_body(request)
    if missing_fields(body, ("offerId", "orderAmount")):
        raise InvalidInputError(MISSING_FIELDS_MESSAGE)
    result = await service.apply_offer_discount(
        parse_uuid(str(body["offerId"]), "offerId"),
        parse_amount(body["orderAmount"], "orderAmount"),
    )
    return success(result)


@router.post("/interact", summary="Track offer interaction")
async def track_interaction(
    request: Request,
    x_session_id: str | None = Header(None),
    identity: AuthenticatedIdentity | None = Depends(current_identity),
    service: OfferService = Depends(get_offer_service),
):
    body = await read_json_body(request)
    if missing_fields(body, ("offerId", "interactionType")):
        raise InvalidInputError(MISSING_FIELDS_MESSAGE)
    try:
        interaction = InteractionType(body["interactionType"])
    except ValueError:
        raise InvalidInputError(
            "Invalid interaction type", field="interactionType",
        )
    order_id = body.get("orderId")
    await service.track_interaction(
        parse_uuid(str(body["offerId"]), "offerId"),
        interaction,
        user_id=identity.user_id if identity else body.get("userId"),
        session_id=body.get("sessionId") or x_session_id,
        order_id=parse_uuid(str(order_id), "orderId") if order_id else None,
    )
    return success(
        None, message="Interaction recorded", status_code=status.HTTP_201_CREATED,
    )


@router.get("/popup", summary="Fetch popup offers")
async def popup_offers(
    user_id: str | None = Query(None, alias="userId"),
    session_id: str | None = Query(None, alias="sessionId"),
    x_user_id: str | None = Header(None),
    x_session_id: str | None = Header(None),
    identity: AuthenticatedIdentity | None = Depends(current_identity),
    generate_session_id: SessionIdGenerator = Depends(get_session_id_generator),
    service: OfferService = Depends(get_offer_service),
):
    session = session_id or x_session_id or generate_session_id()
    viewer = identity.user_id if identity else (user_id or x_user_id)
    offers = await service.get_popup_offers(viewer, session)
    return success(offers, headers={"x-session-id": session})

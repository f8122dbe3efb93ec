"""Offer Routes — verifies required-field checks, pass-through results and session ids.

Tests:
    - /apply without orderAmount → 400 with the exact legacy body, no service call
    - /apply with a valid body returns the service result unchanged in data
    - /popup generates a fresh session id per call and echoes it in x-session-id
    - /interact and /popup attribute signed-in callers to the token subject
"""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

from app.core.domain_types import InteractionType, OfferType
from app.schemas.offers import DiscountResult, OfferOut


def _offer() -> OfferOut:
    now = datetime.now(timezone.utc)
    return OfferOut(
        id=uuid4(), title="Weekend Feast", description="20% off",
        type="popup", discount_type="percentage", discount_value=20,
        valid_from=now - timedelta(days=1), valid_until=now + timedelta(days=1),
    )


async def test_apply_missing_order_amount(client, offer_service):
    res = await client.post("/api/offers/apply", json={"offerId": str(uuid4())})
    assert res.status_code == 400
    assert res.json() == {"error": "Missing required fields"}
    assert offer_service.calls == []


async def test_apply_zero_order_amount_is_missing(client, offer_service):
    res = await client.post(
        "/api/offers/apply", json={"offerId": str(uuid4()), "orderAmount": 0},
    )
    assert res.status_code == 400
    assert res.json() == {"error": "Missing required fields"}


async def test_apply_returns_service_result_unchanged(client, offer_service):
    offer_id = uuid4()
    offer_service.results["apply_offer_discount"] = DiscountResult(
        is_valid=True, discount_amount=100.0, message="Offer applied successfully",
    )
    res = await client.post(
        "/api/offers/apply", json={"offerId": str(offer_id), "orderAmount": 500},
    )
    assert res.status_code == 200
    assert res.json() == {
        "success": True,
        "data": {
            "isValid": True,
            "discountAmount": 100.0,
            "message": "Offer applied successfully",
        },
    }
    assert offer_service.calls == [("apply_offer_discount", (offer_id, 500.0), {})]


async def test_apply_invalid_json(client, offer_service):
    res = await client.post(
        "/api/offers/apply", content=b"{not json",
        headers={"Content-Type": "application/json"},
    )
    assert res.status_code == 400
    assert res.json() == {"error": "Invalid JSON body"}
    assert offer_service.calls == []


async def test_apply_malformed_offer_id(client, offer_service):
    res = await client.post(
        "/api/offers/apply", json={"offerId": "abc", "orderAmount": 500},
    )
    assert res.status_code == 400
    assert offer_service.calls == []


async def test_popup_generates_distinct_session_ids(client, offer_service):
    offer_service.results["get_popup_offers"] = []
    first = await client.get("/api/offers/popup")
    second = await client.get("/api/offers/popup")

    first_id = first.headers["x-session-id"]
    second_id = second.headers["x-session-id"]
    assert first_id and second_id
    assert first_id != second_id
    assert offer_service.calls[0] == ("get_popup_offers", (None, first_id), {})
    assert offer_service.calls[1] == ("get_popup_offers", (None, second_id), {})


async def test_popup_echoes_supplied_session(client, offer_service):
    offer = _offer()
    offer_service.results["get_popup_offers"] = [offer]
    res = await client.get(
        "/api/offers/popup?userId=user_9", headers={"x-session-id": "sess-1"},
    )
    assert res.status_code == 200
    assert res.headers["x-session-id"] == "sess-1"
    assert res.json()["data"][0]["title"] == "Weekend Feast"
    assert offer_service.calls == [("get_popup_offers", ("user_9", "sess-1"), {})]


async def test_list_offers_by_type(client, offer_service):
    offer_service.results["get_active_offers"] = []
    res = await client.get("/api/offers?type=banner")
    assert res.status_code == 200
    assert offer_service.calls == [("get_active_offers", (OfferType.BANNER,), {})]


async def test_list_offers_rejects_unknown_type(client, offer_service):
    res = await client.get("/api/offers?type=billboard")
    assert res.status_code == 400
    assert offer_service.calls == []


async def test_interact_uses_token_subject(client, offer_service, customer_headers):
    offer_id = uuid4()
    res = await client.post(
        "/api/offers/interact",
        json={"offerId": str(offer_id), "interactionType": "clicked", "userId": "spoofed"},
        headers={**customer_headers, "x-session-id": "sess-2"},
    )
    assert res.status_code == 201
    assert res.json()["message"] == "Interaction recorded"
    assert offer_service.calls == [(
        "track_interaction",
        (offer_id, InteractionType.CLICKED),
        {"user_id": "user_123", "session_id": "sess-2", "order_id": None},
    )]


async def test_interact_rejects_unknown_type(client, offer_service):
    res = await client.post(
        "/api/offers/interact",
        json={"offerId": str(uuid4()), "interactionType": "liked"},
    )
    assert res.status_code == 400
    assert res.json()["error"] == "Invalid interaction type"
    assert offer_service.calls == []


async def test_popup_prefers_token_subject(client, offer_service, customer_headers):
    offer_service.results["get_popup_offers"] = []
    res = await client.get(
        "/api/offers/popup?userId=spoofed",
        headers={**customer_headers, "x-user-id": "also-spoofed", "x-session-id": "sess-3"},
    )
    assert res.status_code == 200
    assert offer_service.calls == [("get_popup_offers", ("user_123", "sess-3"), {})]

"""HTTP-level tests: error envelope, request IDs, role gating and pricing quotes."""

import uuid
from unittest.mock import MagicMock

import pytest


@pytest.mark.asyncio
async def test_health(async_client):
    response = await async_client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
    assert response.headers["X-Request-ID"]


@pytest.mark.asyncio
async def test_request_id_is_echoed(async_client):
    response = await async_client.get("/health", headers={"X-Request-ID": "req-42"})

    assert response.headers["X-Request-ID"] == "req-42"


@pytest.mark.asyncio
async def test_missing_token_uses_error_envelope(async_client):
    response = await async_client.get(
        "/api/v1/deliveries/", headers={"X-Request-ID": "req-401"}
    )

    assert response.status_code == 401
    error = response.json()["error"]
    assert error["code"] == "UNAUTHORIZED"
    assert error["requestId"] == "req-401"
    assert error["details"] == []


@pytest.mark.asyncio
async def test_garbage_token(async_client):
    response = await async_client.get(
        "/api/v1/auth/me", headers={"Authorization": "Bearer not-a-jwt"}
    )

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_me(async_client, courier_headers):
    response = await async_client.get("/api/v1/auth/me", headers=courier_headers)

    assert response.status_code == 200
    assert response.json()["role"] == "COURIER"


@pytest.mark.asyncio
async def test_courier_cannot_open_settlements(async_client, courier_headers):
    response = await async_client.get("/api/v1/settlements/", headers=courier_headers)

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "FORBIDDEN"


@pytest.mark.asyncio
async def test_quote(async_client, courier_headers):
    response = await async_client.get(
        "/api/v1/pricing/quote",
        params={"zone": "PERI", "weight_kg": 3, "parcel_count": 3},
        headers=courier_headers,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["delivery_price"] == 7000
    assert body["pickup_fee"] == 0


@pytest.mark.asyncio
async def test_quote_unknown_zone_falls_back_to_tana(async_client, admin_headers):
    response = await async_client.get(
        "/api/v1/pricing/quote",
        params={"zone": "MARS", "weight_kg": 2},
        headers=admin_headers,
    )

    assert response.status_code == 200
    assert response.json()["zone"] == "TANA"
    assert response.json()["delivery_price"] == 3000


@pytest.mark.asyncio
async def test_quote_validation_error(async_client, admin_headers):
    response = await async_client.get(
        "/api/v1/pricing/quote", params={"weight_kg": 0}, headers=admin_headers
    )

    assert response.status_code == 422
    error = response.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert error["details"][0]["field"] == "query.weight_kg"


@pytest.mark.asyncio
async def test_confirm_settlement(async_client, api_db, admin_headers):
    update_result = MagicMock()
    update_result.rowcount = 1
    api_db.execute.return_value = update_result

    response = await async_client.post(
        "/api/v1/settlements/settle",
        json={
            "delivery_ids": [str(uuid.uuid4()), str(uuid.uuid4())],
            "settlement_type": "MOBILE_MONEY",
        },
        headers=admin_headers,
    )

    assert response.status_code == 200
    assert response.json() == {"requested": 2, "settled_count": 1}


@pytest.mark.asyncio
async def test_confirm_settlement_requires_ids(async_client, admin_headers):
    response = await async_client.post(
        "/api/v1/settlements/settle",
        json={"delivery_ids": [], "settlement_type": "MOBILE_MONEY"},
        headers=admin_headers,
    )

    assert response.status_code == 422

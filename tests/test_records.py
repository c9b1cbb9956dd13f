import pytest
from httpx import ASGITransport, AsyncClient

from maintrack.seed import SEED_USER_EMAIL, SEED_USER_PASSWORD, SEED_VEHICLES


async def _sign_in_and_select(client: AsyncClient, vehicle_id: str) -> None:
    await client.post(
        "/api/v1/auth/sign-in",
        json={"email": SEED_USER_EMAIL, "password": SEED_USER_PASSWORD},
    )
    await client.post("/api/v1/vehicles/select", json={"vehicle_id": vehicle_id})


@pytest.mark.asyncio
async def test_add_record_via_form(ready_app):
    tractor = SEED_VEHICLES[2]["id"]
    transport = ASGITransport(app=ready_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        await _sign_in_and_select(client, tractor)
        response = await client.post("/api/v1/records/form/open")
        assert response.json()["data"]["garage"]["record_form"]["service_type"] == ""

        await client.patch("/api/v1/records/form", json={"field": "service_type", "value": "Hydraulic fluid"})
        await client.patch("/api/v1/records/form", json={"field": "service_date", "value": "2026-04-01"})
        await client.patch("/api/v1/records/form", json={"field": "performed_by", "value": "self"})
        response = await client.post("/api/v1/records")

    assert response.status_code == 201
    garage = response.json()["data"]["garage"]
    assert garage["record_form"] is None
    assert len(garage["records"]) == 1
    record = garage["records"][0]
    assert record["service_type"] == "Hydraulic fluid"
    assert record["service_date"] == "2026-04-01"
    assert record["performed_by"] == "self"
    assert record["notes"] is None


@pytest.mark.asyncio
async def test_add_record_with_body_lands_first(ready_app):
    truck = SEED_VEHICLES[0]["id"]
    transport = ASGITransport(app=ready_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        await _sign_in_and_select(client, truck)
        response = await client.post(
            "/api/v1/records",
            json={
                "service_type": "Oil change",
                "service_date": "2026-02-10",
                "mileage": 69000,
                "next_service_date": "2026-08-10",
                "next_service_mileage": 74000,
            },
        )

    assert response.status_code == 201
    records = response.json()["data"]["garage"]["records"]
    assert [r["service_date"] for r in records] == ["2026-02-10", "2025-06-02", "2025-03-14"]
    assert records[0]["next_service_mileage"] == 74000


@pytest.mark.asyncio
async def test_add_record_without_selection(ready_app):
    transport = ASGITransport(app=ready_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        await client.post(
            "/api/v1/auth/sign-in",
            json={"email": SEED_USER_EMAIL, "password": SEED_USER_PASSWORD},
        )
        response = await client.post(
            "/api/v1/records",
            json={"service_type": "Oil change", "service_date": "2026-02-10"},
        )

    assert response.status_code == 400
    assert response.json()["message"] == "Service record was not added"


@pytest.mark.asyncio
async def test_record_form_rejects_negative_mileage(ready_app):
    truck = SEED_VEHICLES[0]["id"]
    transport = ASGITransport(app=ready_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        await _sign_in_and_select(client, truck)
        response = await client.patch("/api/v1/records/form", json={"field": "mileage", "value": -1})

    assert response.status_code == 422

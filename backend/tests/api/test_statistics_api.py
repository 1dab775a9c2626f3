"""Statistics, category and health routes."""

from tests.api.payloads import (
    COORDINATOR_HEADERS, disclosure, participant, registration_body,
)


async def test_statistics_empty(client):
    response = await client.get("/api/v1/statistics")
    assert response.status_code == 200
    assert response.json() == {
        "total_records": 0,
        "decrypted_records": 0,
        "average_latency_seconds": 0.0,
    }


async def test_statistics_after_partial_finalization(client):
    for owner in ("a", "b"):
        await client.post(
            "/api/v1/athletes", json=registration_body(owner),
            headers=participant(owner),
        )
    await client.post(
        "/api/v1/athletes/a/finalize", json=disclosure(),
        headers=COORDINATOR_HEADERS,
    )

    data = (await client.get("/api/v1/statistics")).json()
    assert data["total_records"] == 2
    assert data["decrypted_records"] == 1
    assert data["average_latency_seconds"] >= 0


async def test_category_min_ages(client):
    response = await client.get("/api/v1/categories")
    assert response.json() == {
        "min_ages": {
            "individual": 16,
            "team": 14,
            "endurance": 18,
            "combat": 16,
            "other": 14,
        },
    }


async def test_health(client):
    response = await client.get("/api/v1/health/")
    assert response.status_code == 200
    assert response.json()["service"] == "athlete-registry-api"


async def test_ready_without_persistence(client):
    response = await client.get("/api/v1/health/ready")
    assert response.status_code == 200
    assert response.json()["checks"]["database"] == "disabled"

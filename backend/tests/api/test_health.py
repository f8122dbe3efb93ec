"""Health Probes — liveness always answers, readiness reflects the database."""


async def test_liveness(client):
    res = await client.get("/api/v1/health/")
    assert res.status_code == 200
    assert res.json()["data"]["status"] == "healthy"


async def test_readiness_without_database(client):
    res = await client.get("/api/v1/health/ready")
    assert res.status_code == 503
    assert res.json() == {"error": "Database unavailable"}

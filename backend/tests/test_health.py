def test_health_endpoints(client):
    assert client.get("/api/health").json() == {"status": "ok"}
    assert client.get("/api/health/live").json() == {"status": "ok"}

    ready = client.get("/api/health/ready")
    assert ready.status_code == 200
    assert ready.json()["database"] == {"ok": True, "missing": [], "error": None}

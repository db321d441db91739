"""Tests for application-level middleware and error handling."""

from fastapi.testclient import TestClient


def test_security_headers(client: TestClient):
    response = client.post("/api/auth/login", json={"email": "nobody@example.com", "password": "x"})
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Frame-Options"] == "DENY"
    assert response.headers["Cache-Control"] == "no-store"


def test_request_body_too_large(client: TestClient):
    response = client.post(
        "/api/auth/login",
        content=b"{}",
        headers={"content-type": "application/json", "content-length": str(2 * 1024 * 1024)},
    )
    assert response.status_code == 413


def test_openapi_served_under_api(client: TestClient):
    response = client.get("/api/openapi.json")
    assert response.status_code == 200
    assert "/api/auth/verify-reset-otp" in response.json()["paths"]


def test_rate_limit(client: TestClient):
    from app.rate_limit import limiter

    limiter.reset()
    limiter.enabled = True
    try:
        statuses = [
            client.post("/api/auth/forgot-password", json={"email": "nobody@example.com"}).status_code
            for _ in range(4)
        ]
    finally:
        limiter.enabled = False
        limiter.reset()
    assert statuses == [200, 200, 200, 429]

"""
Security tests: secure headers, HSTS by environment, CORS policy.
"""

from fastapi.testclient import TestClient

PREFLIGHT_HEADERS = {
    "Access-Control-Request-Method": "POST",
    "Access-Control-Request-Headers": "content-type, x-request-id",
}


def test_secure_headers(client: TestClient) -> None:
    r = client.get("/ping")
    assert r.headers["X-Content-Type-Options"] == "nosniff"
    assert r.headers["X-Frame-Options"] == "DENY"
    assert r.headers["X-XSS-Protection"] == "0"
    assert r.headers["Referrer-Policy"] == "strict-origin-when-cross-origin"
    assert r.headers["Cross-Origin-Resource-Policy"] == "cross-origin"
    assert "default-src 'self'" in r.headers["Content-Security-Policy"]


def test_secure_headers_on_errors(client: TestClient) -> None:
    r = client.get("/users/not-a-uuid")
    assert r.status_code == 400
    assert r.headers["X-Content-Type-Options"] == "nosniff"


def test_hsts_only_in_production(client: TestClient, prod_client: TestClient) -> None:
    assert "Strict-Transport-Security" not in client.get("/ping").headers
    hsts = prod_client.get("/ping").headers["Strict-Transport-Security"]
    assert hsts == "max-age=31536000; includeSubDomains; preload"


def test_cors_development_allows_any_origin(dev_client: TestClient) -> None:
    origin = "http://localhost:5173"
    r = dev_client.options("/users", headers={"Origin": origin, **PREFLIGHT_HEADERS})
    assert r.status_code == 200
    assert r.headers["Access-Control-Allow-Origin"] == origin
    assert r.headers["Access-Control-Max-Age"] == "86400"
    assert "PATCH" in r.headers["Access-Control-Allow-Methods"]


def test_cors_exposes_request_id(dev_client: TestClient) -> None:
    r = dev_client.get("/ping", headers={"Origin": "http://localhost:5173"})
    assert r.headers["Access-Control-Allow-Origin"] == "http://localhost:5173"
    assert "X-Request-Id" in r.headers["Access-Control-Expose-Headers"]
    assert "Access-Control-Allow-Credentials" not in r.headers


def test_cors_production_allows_configured_origin(prod_client: TestClient) -> None:
    origin = "https://app.example.com"
    r = prod_client.options("/users", headers={"Origin": origin, **PREFLIGHT_HEADERS})
    assert r.status_code == 200
    assert r.headers["Access-Control-Allow-Origin"] == origin


def test_cors_production_rejects_other_origins(prod_client: TestClient) -> None:
    origin = "https://evil.example.net"
    r = prod_client.options("/users", headers={"Origin": origin, **PREFLIGHT_HEADERS})
    assert r.status_code == 400
    assert "Access-Control-Allow-Origin" not in r.headers

    r = prod_client.get("/ping", headers={"Origin": origin})
    assert r.status_code == 200
    assert "Access-Control-Allow-Origin" not in r.headers


def test_cors_without_configured_origins(client: TestClient) -> None:
    r = client.get("/ping", headers={"Origin": "https://app.example.com"})
    assert "Access-Control-Allow-Origin" not in r.headers

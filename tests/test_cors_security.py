from conftest import build_app


def test_cors_preflight_allows_whitelisted_origin():
    app = build_app(CORS_ALLOWED_ORIGINS="http://localhost:3000,https://thrift.example.com")
    client = app.test_client()
    resp = client.open(
        "/__ok",
        method="OPTIONS",
        headers={
            "Origin": "http://localhost:3000",
            "Access-Control-Request-Method": "GET",
        },
    )
    assert resp.status_code in (200, 204)
    assert resp.headers.get("Access-Control-Allow-Origin") == "http://localhost:3000"
    vary = resp.headers.get("Vary")
    if vary:
        assert "Origin" in vary


def test_cors_preflight_blocks_disallowed_origin():
    app = build_app(CORS_ALLOWED_ORIGINS="https://thrift.example.com")
    client = app.test_client()
    resp = client.open(
        "/__ok",
        method="OPTIONS",
        headers={
            "Origin": "http://evil.test",
            "Access-Control-Request-Method": "GET",
        },
    )
    assert resp.status_code in (200, 204)
    assert "Access-Control-Allow-Origin" not in resp.headers


def test_security_headers_and_expose_request_id(client):
    resp = client.get(
        "/__ok",
        headers={"Origin": "http://any.test", "X-Request-ID": "abc-123"},
    )
    assert resp.status_code == 200
    assert resp.headers.get("X-Content-Type-Options") == "nosniff"
    assert resp.headers.get("X-Frame-Options") == "DENY"
    assert resp.headers.get("Referrer-Policy") == "no-referrer"
    assert resp.headers.get("X-Request-ID") == "abc-123"
    expose = resp.headers.get("Access-Control-Expose-Headers", "")
    assert "X-Request-ID" in expose
    assert "traceparent" in expose


def test_generated_request_id(client):
    resp = client.get("/__ok")
    assert len(resp.headers.get("X-Request-ID", "")) == 32

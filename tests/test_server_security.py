import httpx
import pytest

from ai_textgen import ProviderId, TextGenConfig
from ai_textgen.server import create_app


def _client(app):
    return httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test")


@pytest.mark.asyncio
async def test_server_enforces_max_body_size_413():
    app = create_app(cfg=TextGenConfig(enable_metrics=False, max_request_body_bytes=60))
    async with _client(app) as client:
        payload = b'{"prompt":"' + (b"x" * 200) + b'"}'
        resp = await client.post("/api/generate", content=payload, headers={"Content-Type": "application/json"})
    assert resp.status_code == 413
    assert resp.json() == {"error": "Request body too large"}


@pytest.mark.asyncio
async def test_server_sets_security_headers_and_request_id():
    app = create_app(cfg=TextGenConfig(enable_metrics=False))
    async with _client(app) as client:
        resp = await client.get("/healthz", headers={"X-Request-Id": "req_12345678"})
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}
        assert resp.headers.get("X-Request-Id") == "req_12345678"
        assert resp.headers.get("X-Content-Type-Options") == "nosniff"
        assert resp.headers.get("X-Frame-Options") == "DENY"
        assert resp.headers.get("Referrer-Policy") == "no-referrer"

        resp2 = await client.post("/api/generate", json={"prompt": ""})
        assert resp2.status_code == 400
        assert resp2.headers.get("Cache-Control") == "no-store"
        assert len(resp2.headers.get("X-Request-Id", "")) == 32


@pytest.mark.asyncio
async def test_server_cors_allowlist_applies():
    cfg = TextGenConfig(enable_metrics=False, cors_allow_origins=["https://example.com"])
    app = create_app(cfg=cfg)
    async with _client(app) as client:
        resp = await client.options(
            "/api/generate",
            headers={"Origin": "https://example.com", "Access-Control-Request-Method": "POST"},
        )
    assert resp.status_code in (200, 204)
    assert resp.headers.get("access-control-allow-origin") == "https://example.com"


def test_cors_wildcard_with_credentials_is_rejected():
    cfg = TextGenConfig(enable_metrics=False, cors_allow_origins=["*"], cors_allow_credentials=True)
    with pytest.raises(ValueError):
        create_app(cfg=cfg)


@pytest.mark.asyncio
async def test_providers_endpoint_lists_catalogue_and_default():
    app = create_app(cfg=TextGenConfig(enable_metrics=False, default_provider=ProviderId.DEEPSEEK))
    async with _client(app) as client:
        resp = await client.get("/api/providers")
    assert resp.status_code == 200
    body = resp.json()
    assert body["default"] == "deepseek"
    by_id = {p["id"]: p for p in body["providers"]}
    assert by_id["gemini"]["model"] == "gemini-1.5-flash"
    assert by_id["gemini"]["name"] == "Google Gemini"
    assert by_id["deepseek"]["model"] == "deepseek-chat"


@pytest.mark.asyncio
async def test_missing_credential_surfaces_as_invalid_api_key(monkeypatch):
    monkeypatch.delenv("GOOGLE_AI_KEY", raising=False)
    app = create_app(cfg=TextGenConfig(enable_metrics=False))
    async with _client(app) as client:
        resp = await client.post("/api/generate", json={"prompt": "Hello"})
    assert resp.status_code == 401
    assert resp.json() == {"error": "Invalid API key"}

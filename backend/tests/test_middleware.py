"""
Notekeep Backend: Middleware Tests
===================================

The middleware is mounted on a bare FastAPI app so limits can be set low
without touching the settings the rest of the suite relies on.
"""

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from app.middleware.rate_limit import RateLimitMiddleware
from app.middleware.request_id import RequestIDMiddleware


def _app(max_requests: int) -> FastAPI:
    app = FastAPI()

    @app.get("/ping")
    async def ping():
        return {"ok": True}

    @app.get("/health")
    async def health():
        return {"status": "healthy"}

    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(RateLimitMiddleware, max_requests=max_requests, window_seconds=60)
    return app


class TestRateLimit:

    @pytest.mark.asyncio
    async def test_requests_over_limit_get_429(self):
        transport = ASGITransport(app=_app(max_requests=2))
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            assert (await client.get("/ping")).status_code == 200
            assert (await client.get("/ping")).status_code == 200

            response = await client.get("/ping")

        assert response.status_code == 429
        assert 1 <= int(response.headers["Retry-After"]) <= 61
        body = response.json()
        assert body["error"] == "rate_limit_exceeded"
        assert body["details"]["retry_after"] == int(response.headers["Retry-After"])

    @pytest.mark.asyncio
    async def test_health_is_never_limited(self):
        transport = ASGITransport(app=_app(max_requests=1))
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            statuses = [(await client.get("/health")).status_code for _ in range(5)]
        assert statuses == [200] * 5


class TestRequestID:

    @pytest.mark.asyncio
    async def test_incoming_id_is_reused(self):
        transport = ASGITransport(app=_app(max_requests=100))
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.get("/ping", headers={"X-Request-ID": "trace-42"})
        assert response.headers["X-Request-ID"] == "trace-42"

    @pytest.mark.asyncio
    async def test_each_request_gets_its_own_id(self):
        transport = ASGITransport(app=_app(max_requests=100))
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            first = (await client.get("/ping")).headers["X-Request-ID"]
            second = (await client.get("/ping")).headers["X-Request-ID"]
        assert first != second

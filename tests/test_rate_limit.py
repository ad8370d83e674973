"""Tests for RateLimitMiddleware on a minimal app"""
import asyncio
from types import SimpleNamespace

from fastapi import FastAPI
from fastapi.testclient import TestClient
from starlette.requests import Request
from starlette.responses import PlainTextResponse

from app.api.middleware import rate_limit_middleware
from app.api.middleware.rate_limit_middleware import RateLimitMiddleware


def make_client(limit):
    app = FastAPI()
    app.add_middleware(RateLimitMiddleware, requests_per_second=limit)

    @app.get("/api/v1/ping")
    async def ping():
        return {"ok": True}

    @app.get("/health")
    async def health():
        return {"ok": True}

    return TestClient(app)


def api_request(ip):
    return Request({
        "type": "http",
        "method": "GET",
        "scheme": "http",
        "server": ("testserver", 80),
        "path": "/api/v1/ping",
        "query_string": b"",
        "headers": [],
        "client": (ip, 50000),
    })


async def ok(request):
    return PlainTextResponse("ok")


def test_requests_over_the_limit_get_429():
    client = make_client(2)

    statuses = [client.get("/api/v1/ping").status_code for _ in range(3)]

    assert statuses == [200, 200, 429]
    limited = client.get("/api/v1/ping")
    assert limited.json() == {"error": "Rate limit exceeded. Too many requests per second."}
    assert limited.headers["Retry-After"] == "1"


def test_routes_outside_the_api_are_not_limited():
    client = make_client(1)

    statuses = [client.get("/health").status_code for _ in range(5)]

    assert statuses == [200] * 5


def test_idle_clients_are_forgotten(monkeypatch):
    now = [1000.0]
    monkeypatch.setattr(rate_limit_middleware, "time", SimpleNamespace(time=lambda: now[0]))
    middleware = RateLimitMiddleware(ok, requests_per_second=5)

    async def send(ips):
        return [(await middleware.dispatch(api_request(ip), ok)).status_code for ip in ips]

    burst = [f"10.0.{i // 256}.{i % 256}" for i in range(1000)]
    assert set(asyncio.run(send(burst))) == {200}
    assert len(middleware.request_times) == 1000

    now[0] += 1.5
    assert asyncio.run(send(["192.168.1.1"])) == [200]

    assert list(middleware.request_times) == ["192.168.1.1"]


def test_sweep_keeps_clients_inside_the_window(monkeypatch):
    now = [1000.0]
    monkeypatch.setattr(rate_limit_middleware, "time", SimpleNamespace(time=lambda: now[0]))
    middleware = RateLimitMiddleware(ok, requests_per_second=2)

    async def send(ip, count):
        return [(await middleware.dispatch(api_request(ip), ok)).status_code for _ in range(count)]

    assert asyncio.run(send("10.0.0.1", 2)) == [200, 200]

    # A sweep runs for another client while 10.0.0.1 is still inside its window
    now[0] += 0.5
    middleware.last_sweep = 0.0
    assert asyncio.run(send("10.0.0.2", 1)) == [200]

    assert asyncio.run(send("10.0.0.1", 1)) == [429]

"""Request deadline middleware."""

import asyncio

import httpx
from fastapi import FastAPI

from app.core.middleware import RequestTimeoutMiddleware


def build_app(timeout_seconds: float) -> FastAPI:
    app = FastAPI()
    app.add_middleware(RequestTimeoutMiddleware, timeout_seconds=timeout_seconds)

    @app.get("/slow")
    async def slow():
        await asyncio.sleep(1)
        return {"done": True}

    @app.get("/fast")
    async def fast():
        return {"done": True}

    return app


async def get(app: FastAPI, path: str) -> httpx.Response:
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        return await client.get(path)


async def test_slow_request_times_out():
    response = await get(build_app(0.05), "/slow")

    assert response.status_code == 504
    assert response.json() == {"error": "Request timed out"}


async def test_fast_request_passes_through():
    response = await get(build_app(0.5), "/fast")

    assert response.status_code == 200
    assert response.json() == {"done": True}


async def test_zero_timeout_disables_deadline():
    response = await get(build_app(0), "/fast")

    assert response.status_code == 200

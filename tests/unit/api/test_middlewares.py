"""Unit tests for the ray ID and CORS middlewares."""

import logging
import re

import pytest
from fastapi import FastAPI
from fastapi import Request
from httpx import ASGITransport
from httpx import AsyncClient

from mission_gallery.api.middlewares import make_cors_middleware
from mission_gallery.api.middlewares import ray_id_middleware
from mission_gallery.api.middlewares.ray_id import RAY_ID_HEADER
from mission_gallery.logging_config import RayIDFilter
from mission_gallery.services.ray_id_service import ray_id_context


def _app(origins: list[str]) -> FastAPI:
    app = FastAPI()
    app.middleware("http")(make_cors_middleware(origins))
    app.middleware("http")(ray_id_middleware)

    @app.get("/echo")
    async def echo(request: Request) -> dict[str, str]:
        logging.getLogger("mission_gallery.api.echo").info("echo handled")
        return {"state": request.state.ray_id, "context": ray_id_context.get()}

    return app


@pytest.mark.asyncio
async def test_ray_id_header_matches_request_context() -> None:
    async with AsyncClient(transport=ASGITransport(app=_app(["*"])), base_url="http://test") as client:
        response = await client.get("/echo")

    ray_id = response.headers[RAY_ID_HEADER]
    assert re.match(r"^[0-9a-f]{16}$", ray_id)
    assert response.json() == {"state": ray_id, "context": ray_id}


@pytest.mark.asyncio
async def test_handler_log_lines_carry_the_response_ray_id(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="mission_gallery.api.echo")
    caplog.handler.addFilter(RayIDFilter())

    async with AsyncClient(transport=ASGITransport(app=_app(["*"])), base_url="http://test") as client:
        response = await client.get("/echo")

    records = [r for r in caplog.records if r.getMessage() == "echo handled"]
    assert [r.ray_id for r in records] == [response.headers[RAY_ID_HEADER]]


@pytest.mark.asyncio
async def test_ray_id_differs_per_request() -> None:
    async with AsyncClient(transport=ASGITransport(app=_app(["*"])), base_url="http://test") as client:
        first = await client.get("/echo")
        second = await client.get("/echo")

    assert first.headers[RAY_ID_HEADER] != second.headers[RAY_ID_HEADER]


@pytest.mark.asyncio
async def test_cors_wildcard() -> None:
    async with AsyncClient(transport=ASGITransport(app=_app(["*"])), base_url="http://test") as client:
        response = await client.get("/echo", headers={"Origin": "https://example.org"})

    assert response.headers["Access-Control-Allow-Origin"] == "*"
    assert response.headers["X-Content-Type-Options"] == "nosniff"


@pytest.mark.asyncio
async def test_cors_preflight_echoes_allowed_origin() -> None:
    app = _app(["https://gallery.example.org"])
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.options(
            "/echo",
            headers={"Origin": "https://gallery.example.org", "Access-Control-Request-Headers": "content-type"},
        )

    assert response.status_code == 204
    assert response.headers["Access-Control-Allow-Origin"] == "https://gallery.example.org"
    assert response.headers["Access-Control-Allow-Headers"] == "content-type"
    assert RAY_ID_HEADER in response.headers


@pytest.mark.asyncio
async def test_cors_unknown_origin_gets_no_allow_header() -> None:
    app = _app(["https://gallery.example.org"])
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.get("/echo", headers={"Origin": "https://evil.example"})

    assert response.status_code == 200
    assert "Access-Control-Allow-Origin" not in response.headers

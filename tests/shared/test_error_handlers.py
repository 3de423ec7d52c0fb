# -*- coding: utf-8 -*-
"""
backend/tests/shared/test_error_handlers.py

Cuerpo de error uniforme {error, code, solution, details?} para
excepciones de negocio, errores HTTP genéricos, validación y 500.
"""

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from pydantic import BaseModel

from app.shared.middleware import JSONExceptionMiddleware, register_exception_handlers
from app.shared.utils.http_exceptions import (
    ConflictException,
    ForbiddenException,
    UnauthorizedException,
)


class _Body(BaseModel):
    amount: int


def _build_app() -> FastAPI:
    app = FastAPI()
    register_exception_handlers(app)
    app.add_middleware(JSONExceptionMiddleware)

    @app.get("/conflict")
    async def conflict():
        raise ConflictException(
            "La grupal está cerrada.",
            code="GROUP_LOCKED",
            solution="Cambiá el estado.",
            details={"status": "CERRADA"},
        )

    @app.get("/forbidden")
    async def forbidden():
        raise ForbiddenException(code="FILE_FORBIDDEN")

    @app.get("/unauthorized")
    async def unauthorized():
        raise UnauthorizedException()

    @app.post("/validate")
    async def validate(body: _Body):
        return body

    @app.get("/boom")
    async def boom():
        raise RuntimeError("kaput")

    return app


@pytest.fixture
async def http():
    transport = ASGITransport(app=_build_app(), raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client


async def test_api_exception_body(http):
    resp = await http.get("/conflict")

    assert resp.status_code == 409
    assert resp.json() == {
        "error": "La grupal está cerrada.",
        "code": "GROUP_LOCKED",
        "solution": "Cambiá el estado.",
        "details": {"status": "CERRADA"},
    }
    assert resp.headers["X-Request-ID"]


async def test_defaults_fill_missing_fields(http):
    body = (await http.get("/forbidden")).json()

    assert body["code"] == "FILE_FORBIDDEN"
    assert body["error"] == "Sin permisos"
    assert body["solution"]
    assert "details" not in body


async def test_unauthorized_sets_bearer_challenge(http):
    resp = await http.get("/unauthorized")

    assert resp.status_code == 401
    assert resp.headers["WWW-Authenticate"] == "Bearer"
    assert resp.json()["code"] == "AUTH_REQUIRED"


async def test_unknown_route_is_uniform(http):
    resp = await http.get("/nope")

    assert resp.status_code == 404
    assert resp.json()["code"] == "HTTP_404"


async def test_method_not_allowed_is_uniform(http):
    resp = await http.delete("/conflict")

    assert resp.status_code == 405
    assert resp.json()["code"] == "HTTP_405"


async def test_validation_error_is_400(http):
    resp = await http.post("/validate", json={"amount": "mucho"})

    assert resp.status_code == 400
    body = resp.json()
    assert body["code"] == "VALIDATION_ERROR"
    assert body["error"].startswith("amount")
    assert isinstance(body["details"], list)


async def test_unhandled_error_is_json_500(http):
    resp = await http.get("/boom", headers={"X-Request-ID": "req-123"})

    assert resp.status_code == 500
    body = resp.json()
    assert body["code"] == "INTERNAL_SERVER_ERROR"
    assert body["request_id"] == "req-123"
    assert resp.headers["X-Request-ID"] == "req-123"

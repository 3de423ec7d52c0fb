# -*- coding: utf-8 -*-
"""
backend/tests/shared/test_auth_context.py

AuthContext desde claims JWT y la dependencia real (sin overrides).
"""

from datetime import timedelta

import pytest
from httpx import ASGITransport, AsyncClient

from app.shared.auth_context import AuthContext, auth_context_from_claims
from app.shared.utils.http_exceptions import UnauthorizedException
from app.shared.utils.jwt_utils import create_access_token, decode_token


def test_claims_with_alternative_names():
    ctx = auth_context_from_claims({"userId": "7", "agencyId": 3, "role": "Gerente"})
    assert ctx == AuthContext(id_user=7, id_agency=3, role="Gerente")


@pytest.mark.parametrize(
    "claims",
    [
        {"id_agency": 1, "role": "gerente"},
        {"id_user": 1, "role": "gerente"},
        {"id_user": 1, "id_agency": 1},
        {"id_user": 1, "id_agency": 1, "role": "  "},
        {"id_user": "x", "id_agency": 1, "role": "gerente"},
    ],
)
def test_incomplete_claims_are_unauthorized(claims):
    with pytest.raises(UnauthorizedException):
        auth_context_from_claims(claims)


def test_token_round_trip():
    token = create_access_token({"id_user": 1, "id_agency": 2, "role": "vendedor"})
    payload = decode_token(token)
    assert payload["id_agency"] == 2
    assert payload["jti"]


def test_expired_token_decodes_to_none():
    token = create_access_token({"id_user": 1}, expires_delta=timedelta(seconds=-5))
    assert decode_token(token) is None


def test_tampered_token_decodes_to_none():
    header, body, _ = create_access_token({"id_user": 1}).split(".")
    assert decode_token(f"{header}.{body}.firma-falsa") is None


@pytest.fixture
async def raw_client(app):
    app.dependency_overrides.clear()
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as http:
        yield http


async def test_missing_token_is_401(raw_client):
    resp = await raw_client.post("/api/finance/commission/preview", json={"sale_price": 10, "cost_price": 5})

    assert resp.status_code == 401
    assert resp.json()["code"] == "AUTH_REQUIRED"


async def test_bearer_token_reaches_route(raw_client):
    token = create_access_token({"id_user": 1, "id_agency": 2, "role": "vendedor"})

    resp = await raw_client.post(
        "/api/finance/commission/preview",
        json={"sale_price": 1210, "cost_price": 1000},
        headers={"Authorization": f"Bearer {token}"},
    )

    assert resp.status_code == 200, resp.text
    assert resp.json()["breakdown"]["commission21"] == 173.55

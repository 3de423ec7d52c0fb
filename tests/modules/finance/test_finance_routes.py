# -*- coding: utf-8 -*-
"""
backend/tests/modules/finance/test_finance_routes.py

Rutas /api/finance: resumen de reserva y preview de comisión.
"""

from decimal import Decimal

import pytest

from app.modules.bookings.models import Receipt
from tests.conftest import OTHER_AGENCY_ID


async def test_booking_summary_by_currency(client, seed, db_session):
    booking = await seed.booking()
    await seed.service(booking, sale_price=Decimal("1000"), cost_price=Decimal("700"), tax_21=Decimal("63"))
    await seed.service(booking, currency="AR$", sale_price=Decimal("50000"), cost_price=Decimal("40000"), exempt=Decimal("40000"))
    db_session.add(
        Receipt(
            id_agency=booking.id_agency,
            receipt_number="R-1",
            booking_id=booking.id_booking,
            amount=Decimal("400"),
            amount_currency="USD",
            currency="USD",
        )
    )
    await db_session.commit()

    resp = await client.get(f"/api/finance/bookings/{booking.id_booking}/summary")

    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["booking_id"] == booking.id_booking
    assert set(body["totals"]) == {"ARS", "USD"}

    usd = body["totals"]["USD"]
    assert usd["taxableBase21"] == 300.0
    assert usd["commission21"] == 247.93
    assert usd["vatOnCommission21"] == 52.07
    assert usd["commissionExempt"] == 0.0
    assert usd["transferFeesAmount"] == 24.0

    ars = body["totals"]["ARS"]
    assert ars["commissionExempt"] == 10000.0
    assert ars["commission21"] == 0.0

    assert body["debt"]["debt"]["USD"] == 600.0
    assert body["debt"]["debt"]["ARS"] == 50000.0


async def test_booking_summary_not_found(client):
    resp = await client.get("/api/finance/bookings/999/summary")

    assert resp.status_code == 404
    assert resp.json()["code"] == "BOOKING_NOT_FOUND"


async def test_booking_summary_other_agency_is_forbidden(client, seed):
    booking = await seed.booking(id_agency=OTHER_AGENCY_ID)

    resp = await client.get(f"/api/finance/bookings/{booking.id_booking}/summary")

    assert resp.status_code == 403
    body = resp.json()
    assert body["code"] == "BOOKING_FORBIDDEN"
    assert body["solution"]


async def test_commission_preview(client):
    resp = await client.post(
        "/api/finance/commission/preview",
        json={"sale_price": 1000, "cost_price": 700, "tax_21": 63, "currency": "u$s"},
    )

    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["currency"] == "USD"
    assert body["breakdown"]["commission21"] == 247.93
    assert body["breakdown"]["totalCommissionWithoutVAT"] == 247.93
    assert body["transferFeesAmount"] == 24.0
    assert body["netCommission"] == 223.93


async def test_commission_preview_rejects_sale_below_cost(client):
    resp = await client.post(
        "/api/finance/commission/preview",
        json={"sale_price": 500, "cost_price": 700},
    )

    assert resp.status_code == 400
    body = resp.json()
    assert body["code"] == "COMMISSION_SALE_NOT_ABOVE_COST"
    assert set(body) >= {"error", "code", "solution"}


async def test_commission_preview_schema_error_is_uniform(client):
    resp = await client.post("/api/finance/commission/preview", json={"cost_price": 700})

    assert resp.status_code == 400
    assert resp.json()["code"] == "VALIDATION_ERROR"


@pytest.mark.parametrize(
    "body",
    [
        {"sale_price": "1e20", "cost_price": "100"},
        {"sale_price": "1000", "cost_price": "1e30"},
        {"sale_price": "1000", "cost_price": "100", "tax_21": "1e17"},
        {"sale_price": "NaN", "cost_price": "100"},
    ],
)
async def test_commission_preview_rejects_amounts_outside_money_column(client, body):
    resp = await client.post("/api/finance/commission/preview", json=body)

    assert resp.status_code == 400
    assert resp.json()["code"] == "VALIDATION_ERROR"

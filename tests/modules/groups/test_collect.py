# -*- coding: utf-8 -*-
"""
backend/tests/modules/groups/test_collect.py

Cobro masivo (/api/groups/{id}/bulk/collect):
- un recibo por (reserva, cliente, moneda) con la suma del bucket
- cada cuota queda PAGADA apuntando a su recibo, con auditoría
- un pago fuera de estado o de grupal rechaza el lote completo
"""

from datetime import datetime, timezone
from decimal import Decimal
from types import SimpleNamespace

import pytest
from sqlalchemy import func, select

from app.modules.bookings.models import ClientPayment, ClientPaymentAudit, Receipt
from app.modules.groups.services import bucket_payments


async def _setup(seed):
    group = await seed.group()
    booking = await seed.booking(travel_group_id=group.id_travel_group)
    pax = await seed.client()
    passenger = await seed.passenger(group, booking, pax)
    return group, booking, pax, passenger


async def _reload(db_session, payment_id: int) -> ClientPayment:
    stmt = (
        select(ClientPayment)
        .where(ClientPayment.id_client_payment == payment_id)
        .execution_options(populate_existing=True)
    )
    return (await db_session.execute(stmt)).scalar_one()


def test_bucket_payments_groups_by_booking_client_currency():
    rows = [
        SimpleNamespace(id_client_payment=1, booking_id=1, client_id=1, currency="USD", amount=Decimal("10"), service_id=5),
        SimpleNamespace(id_client_payment=2, booking_id=1, client_id=1, currency="usd", amount=Decimal("15"), service_id=6),
        SimpleNamespace(id_client_payment=3, booking_id=1, client_id=1, currency="ARS", amount=Decimal("100"), service_id=None),
        SimpleNamespace(id_client_payment=4, booking_id=1, client_id=2, currency="USD", amount=Decimal("7"), service_id=5),
    ]

    buckets = bucket_payments(rows)

    assert [(b.booking_id, b.client_id, b.currency) for b in buckets] == [(1, 1, "USD"), (1, 1, "ARS"), (1, 2, "USD")]
    assert buckets[0].total == Decimal("25.00")
    assert buckets[0].payment_ids == [1, 2]
    assert buckets[0].service_ids == [5, 6]
    assert buckets[1].service_ids == []


async def test_collect_one_receipt_per_bucket(client, seed, db_session):
    group, booking, pax, _ = await _setup(seed)
    usd_a = await seed.payment(booking, pax, amount="100")
    usd_b = await seed.payment(booking, pax, amount="250.50")
    ars = await seed.payment(booking, pax, amount="90000", currency="ARS")

    resp = await client.post(
        f"/api/groups/{group.id_travel_group}/bulk/collect",
        json={
            "paymentIds": [usd_a.id_client_payment, usd_b.id_client_payment, ars.id_client_payment],
            "createReceipts": True,
            "payment_method_id": 3,
            "issue_date": "2026-10-05",
        },
    )

    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["settled_count"] == 3
    assert body["receipts_count"] == 2

    usd_bucket = next(b for b in body["buckets"] if b["currency"] == "USD")
    assert usd_bucket["payment_ids"] == [usd_a.id_client_payment, usd_b.id_client_payment]

    receipt = await db_session.get(Receipt, usd_bucket["receipt_id"])
    assert receipt.amount == Decimal("350.50")
    assert receipt.amount_currency == "USD"
    assert receipt.client_ids == [pax.id_client]
    assert receipt.payment_method_id == 3
    assert receipt.agency_receipt_id in (1, 2)

    for payment_id in (usd_a.id_client_payment, usd_b.id_client_payment):
        payment = await _reload(db_session, payment_id)
        assert payment.status == "PAGADA"
        assert payment.receipt_id == usd_bucket["receipt_id"]
        assert payment.paid_by == 10
        assert payment.paid_at.replace(tzinfo=timezone.utc) == datetime(2026, 10, 5, tzinfo=timezone.utc)

    audits = await db_session.scalar(
        select(func.count()).select_from(ClientPaymentAudit).where(ClientPaymentAudit.to_status == "PAGADA")
    )
    assert audits == 3


async def test_collect_by_passenger_without_receipts(client, seed, db_session):
    group, booking, pax, passenger = await _setup(seed)
    pending = await seed.payment(booking, pax, amount="100")
    await seed.payment(booking, pax, amount="40", status="CANCELADA")

    resp = await client.post(
        f"/api/groups/{group.id_travel_group}/bulk/collect",
        json={"passengerIds": [passenger.id_travel_group_passenger], "createReceipts": False},
    )

    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["settled_count"] == 1
    assert body["receipts_count"] == 0
    assert body["buckets"][0]["receipt_id"] is None

    payment = await _reload(db_session, pending.id_client_payment)
    assert payment.status == "PAGADA"
    assert payment.receipt_id is None
    assert await db_session.scalar(select(func.count()).select_from(Receipt)) == 0


async def test_non_pending_payment_rejects_whole_batch(client, seed, db_session):
    group, booking, pax, _ = await _setup(seed)
    pending = await seed.payment(booking, pax)
    paid = await seed.payment(booking, pax, status="PAGADA")

    resp = await client.post(
        f"/api/groups/{group.id_travel_group}/bulk/collect",
        json={"paymentIds": [pending.id_client_payment, paid.id_client_payment], "createReceipts": False},
    )

    assert resp.status_code == 409
    body = resp.json()
    assert body["code"] == "GROUP_COLLECT_PAYMENT_STATUS_INVALID"
    assert body["details"]["id_client_payment"] == paid.id_client_payment
    assert (await _reload(db_session, pending.id_client_payment)).status == "PENDIENTE"


async def test_payment_outside_group_is_rejected(client, seed):
    group, *_ = await _setup(seed)
    stray_booking = await seed.booking()
    stray_client = await seed.client()
    stray = await seed.payment(stray_booking, stray_client)

    resp = await client.post(
        f"/api/groups/{group.id_travel_group}/bulk/collect",
        json={"paymentIds": [stray.id_client_payment], "createReceipts": False},
    )

    assert resp.status_code == 400
    assert resp.json()["code"] == "GROUP_COLLECT_PAYMENT_SCOPE_INVALID"


async def test_receipts_require_payment_method(client, seed):
    group, booking, pax, _ = await _setup(seed)
    payment = await seed.payment(booking, pax)

    resp = await client.post(
        f"/api/groups/{group.id_travel_group}/bulk/collect",
        json={"paymentIds": [payment.id_client_payment], "createReceipts": True},
    )

    assert resp.status_code == 400
    assert resp.json()["code"] == "GROUP_COLLECT_METHOD_REQUIRED"


@pytest.mark.parametrize("fee", ["-3", "1e20", "NaN"])
async def test_invalid_fee_is_rejected(client, seed, db_session, fee):
    group, booking, pax, _ = await _setup(seed)
    payment = await seed.payment(booking, pax)

    resp = await client.post(
        f"/api/groups/{group.id_travel_group}/bulk/collect",
        json={
            "paymentIds": [payment.id_client_payment],
            "createReceipts": True,
            "payment_method_id": 1,
            "payment_fee_amount": fee,
        },
    )

    assert resp.status_code == 400
    assert resp.json()["code"] == "GROUP_COLLECT_FEE_INVALID"
    assert (await _reload(db_session, payment.id_client_payment)).status == "PENDIENTE"


async def test_nothing_to_collect(client, seed):
    group, *_rest, passenger = await _setup(seed)

    resp = await client.post(
        f"/api/groups/{group.id_travel_group}/bulk/collect",
        json={"passengerIds": [passenger.id_travel_group_passenger], "createReceipts": False},
    )

    assert resp.status_code == 400
    assert resp.json()["code"] == "GROUP_COLLECT_EMPTY"


async def test_cancelled_group_rejects_collect(client, seed):
    group, booking, pax, _ = await _setup(seed)
    payment = await seed.payment(booking, pax)
    group.status = "CANCELADA"
    await seed.session.commit()

    resp = await client.post(
        f"/api/groups/{group.id_travel_group}/bulk/collect",
        json={"paymentIds": [payment.id_client_payment], "createReceipts": False},
    )

    assert resp.status_code == 409
    assert resp.json()["code"] == "GROUP_LOCKED"

# -*- coding: utf-8 -*-
"""
backend/tests/modules/bookings/test_client_payments.py

Cuotas individuales (/api/client-payments):
- alta con reparto equitativo al centavo o con importes explícitos
- una fila de auditoría CREATED por cuota creada
- liquidación contra un recibo: PAGADA con paid_at, paid_by y receipt_id,
  más una fila STATUS_CHANGED por cuota
- cualquier cuota fuera de estado, reserva o importe rechaza el lote
"""

from datetime import date
from decimal import Decimal
from types import SimpleNamespace

import pytest
from sqlalchemy import select

from app.modules.bookings.models import ClientPayment, ClientPaymentAudit
from app.modules.bookings.services import derived_status, distinct_ids, split_in_cents

from tests.conftest import OTHER_AGENCY_ID


async def _reload(db_session, payment_id: int) -> ClientPayment:
    stmt = (
        select(ClientPayment)
        .where(ClientPayment.id_client_payment == payment_id)
        .execution_options(populate_existing=True)
    )
    return (await db_session.execute(stmt)).scalar_one()


async def _audits(db_session, payment_id: int) -> list[ClientPaymentAudit]:
    stmt = (
        select(ClientPaymentAudit)
        .where(ClientPaymentAudit.client_payment_id == payment_id)
        .order_by(ClientPaymentAudit.id_audit)
    )
    return list((await db_session.execute(stmt)).scalars().all())


def _body(booking, pax, **extra):
    body = {
        "bookingId": booking.id_booking,
        "clientId": pax.id_client,
        "amount": "100",
        "currency": "USD",
        "count": 1,
        "dueDates": ["2026-11-01"],
    }
    body.update(extra)
    return body


# ---------------------------------------------------------------------------
# Helpers puros
# ---------------------------------------------------------------------------
def test_split_in_cents_puts_remainder_first():
    assert split_in_cents(Decimal("100"), 3) == [Decimal("33.34"), Decimal("33.33"), Decimal("33.33")]
    assert split_in_cents(Decimal("0.05"), 2) == [Decimal("0.03"), Decimal("0.02")]
    assert sum(split_in_cents(Decimal("1234.57"), 7)) == Decimal("1234.57")


def test_derived_status_marks_past_due_pending_as_overdue():
    today = date(2026, 10, 1)
    late = SimpleNamespace(status="PENDIENTE", due_date=date(2026, 9, 30))
    upcoming = SimpleNamespace(status="PENDIENTE", due_date=date(2026, 10, 1))
    paid = SimpleNamespace(status="PAGADA", due_date=date(2026, 1, 1))

    assert derived_status(late, today) == ("VENCIDA", True)
    assert derived_status(upcoming, today) == ("PENDIENTE", False)
    assert derived_status(paid, today) == ("PAGADA", False)


def test_distinct_ids_skips_garbage_and_duplicates():
    assert distinct_ids(["3", 1, 3, "x", -2, True, None, " 7 "]) == [3, 1, 7]
    assert distinct_ids(None) == []


# ---------------------------------------------------------------------------
# Alta
# ---------------------------------------------------------------------------
async def test_create_splits_total_equally_and_audits_each_installment(client, seed, db_session):
    booking = await seed.booking()
    pax = await seed.client()

    resp = await client.post(
        "/api/client-payments",
        json=_body(booking, pax, count=3, currency="u$s", dueDates=["2026-11-01", "2026-12-01", "2027-01-01"]),
    )

    assert resp.status_code == 201, resp.text
    payments = resp.json()["payments"]
    assert [Decimal(str(p["amount"])) for p in payments] == [
        Decimal("33.34"), Decimal("33.33"), Decimal("33.33"),
    ]
    assert {p["currency"] for p in payments} == {"USD"}
    assert {p["status"] for p in payments} == {"PENDIENTE"}
    assert [p["due_date"] for p in payments] == ["2026-11-01", "2026-12-01", "2027-01-01"]
    assert [p["agency_client_payment_id"] for p in payments] == [1, 2, 3]
    assert all(p["created_by"] == 10 for p in payments)

    for payment in payments:
        audits = await _audits(db_session, payment["id_client_payment"])
        assert len(audits) == 1
        assert audits[0].action == "CREATED"
        assert audits[0].from_status is None
        assert audits[0].to_status == "PENDIENTE"
        assert audits[0].changed_by == 10


async def test_create_with_explicit_amounts(client, seed):
    booking = await seed.booking()
    pax = await seed.client()

    resp = await client.post(
        "/api/client-payments",
        json=_body(booking, pax, amount="300", amounts=["100.004", "199.996"], dueDates=["2026-11-01", "2026-12-01"]),
    )

    assert resp.status_code == 201, resp.text
    assert [Decimal(str(p["amount"])) for p in resp.json()["payments"]] == [Decimal("100.00"), Decimal("200.00")]


@pytest.mark.parametrize(
    "extra, code",
    [
        ({"amounts": ["100", "150"], "dueDates": ["2026-11-01", "2026-12-01"]}, "CLIENT_PAYMENT_AMOUNTS_MISMATCH"),
        ({"amounts": ["100", "0"], "amount": "100", "dueDates": ["2026-11-01", "2026-12-01"]}, "CLIENT_PAYMENT_AMOUNTS_INVALID"),
        ({"count": 2, "dueDates": ["2026-11-01"]}, "CLIENT_PAYMENT_DUE_DATES_INVALID"),
        ({"dueDates": ["2026-02-30"]}, "CLIENT_PAYMENT_DUE_DATES_INVALID"),
        ({"amount": None}, "CLIENT_PAYMENT_AMOUNT_REQUIRED"),
        ({"amount": "-5"}, "CLIENT_PAYMENT_AMOUNT_INVALID"),
        ({"amount": "0.02", "count": 3, "dueDates": ["2026-11-01"] * 3}, "CLIENT_PAYMENT_AMOUNT_INVALID"),
        ({"currency": "???"}, "CLIENT_PAYMENT_CURRENCY_INVALID"),
    ],
)
async def test_create_validations_write_nothing(client, seed, db_session, extra, code):
    booking = await seed.booking()
    pax = await seed.client()

    resp = await client.post("/api/client-payments", json=_body(booking, pax, **extra))

    assert resp.status_code == 400, resp.text
    assert resp.json()["code"] == code
    assert (await db_session.execute(select(ClientPayment))).scalars().all() == []


@pytest.mark.parametrize("amount", ["1e20", 1e30, "Infinity"])
async def test_create_rejects_amount_outside_money_column(client, seed, db_session, amount):
    booking = await seed.booking()
    pax = await seed.client()

    resp = await client.post("/api/client-payments", json=_body(booking, pax, amount=amount))

    assert resp.status_code == 400, resp.text
    assert resp.json()["code"] == "VALIDATION_ERROR"
    assert (await db_session.execute(select(ClientPayment))).scalars().all() == []


async def test_create_requires_booking_and_client_of_the_agency(client, seed):
    foreign_booking = await seed.booking(id_agency=OTHER_AGENCY_ID)
    foreign_pax = await seed.client(id_agency=OTHER_AGENCY_ID)
    booking = await seed.booking()
    pax = await seed.client()

    resp = await client.post("/api/client-payments", json=_body(foreign_booking, pax))
    assert resp.status_code == 404
    assert resp.json()["code"] == "CLIENT_PAYMENT_BOOKING_NOT_FOUND"

    resp = await client.post("/api/client-payments", json=_body(booking, foreign_pax))
    assert resp.status_code == 404
    assert resp.json()["code"] == "CLIENT_PAYMENT_CLIENT_NOT_FOUND"


async def test_create_rejects_service_of_another_booking(client, seed):
    booking = await seed.booking()
    other = await seed.booking()
    service = await seed.service(other)
    pax = await seed.client()

    resp = await client.post("/api/client-payments", json=_body(booking, pax, serviceId=service.id_service))

    assert resp.status_code == 400
    assert resp.json()["code"] == "CLIENT_PAYMENT_SERVICE_SCOPE_INVALID"


async def test_blocked_booking_needs_override(client, seed, auth):
    booking = await seed.booking(status="bloqueada")
    pax = await seed.client()

    auth.as_role("vendedor")
    resp = await client.post("/api/client-payments", json=_body(booking, pax))
    assert resp.status_code == 403
    assert resp.json()["code"] == "CLIENT_PAYMENT_BOOKING_LOCKED"

    auth.as_role("administrativo")
    resp = await client.post("/api/client-payments", json=_body(booking, pax))
    assert resp.status_code == 201, resp.text


async def test_list_and_detail_show_overdue_pending(client, seed):
    booking = await seed.booking()
    pax = await seed.client()
    late = await seed.payment(booking, pax, due_date=date(2020, 1, 1))
    future = await seed.payment(booking, pax, due_date=date(2099, 1, 1))

    resp = await client.get("/api/client-payments", params={"bookingId": booking.id_booking})
    assert resp.status_code == 200, resp.text
    rows = resp.json()["payments"]
    assert [r["id_client_payment"] for r in rows] == [late.id_client_payment, future.id_client_payment]
    assert [(r["derived_status"], r["is_overdue"]) for r in rows] == [("VENCIDA", True), ("PENDIENTE", False)]

    resp = await client.get(f"/api/client-payments/{late.id_client_payment}")
    assert resp.status_code == 200
    assert resp.json()["status"] == "PENDIENTE"


async def test_detail_of_other_agency_is_not_found(client, seed):
    booking = await seed.booking(id_agency=OTHER_AGENCY_ID)
    pax = await seed.client(id_agency=OTHER_AGENCY_ID)
    payment = await seed.payment(booking, pax)

    resp = await client.get(f"/api/client-payments/{payment.id_client_payment}")

    assert resp.status_code == 404
    assert resp.json()["code"] == "CLIENT_PAYMENT_NOT_FOUND"


# ---------------------------------------------------------------------------
# Liquidación
# ---------------------------------------------------------------------------
async def test_settle_marks_paid_with_receipt_and_audit(client, seed, db_session):
    booking = await seed.booking()
    pax = await seed.client()
    first = await seed.payment(booking, pax, amount="100")
    second = await seed.payment(booking, pax, amount="50.25")
    receipt = await seed.receipt(booking, amount="150.25", client_ids=[pax.id_client])

    resp = await client.post(
        "/api/client-payments/settle",
        json={"paymentIds": [first.id_client_payment, second.id_client_payment], "receiptId": receipt.id_receipt},
    )

    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["receipt_id"] == receipt.id_receipt
    assert body["settled_count"] == 2

    for payment_id in (first.id_client_payment, second.id_client_payment):
        payment = await _reload(db_session, payment_id)
        assert payment.status == "PAGADA"
        assert payment.receipt_id == receipt.id_receipt
        assert payment.paid_by == 10
        assert payment.paid_at is not None
        assert "R-" in payment.status_reason

        audits = await _audits(db_session, payment_id)
        assert len(audits) == 1
        assert audits[0].action == "STATUS_CHANGED"
        assert (audits[0].from_status, audits[0].to_status) == ("PENDIENTE", "PAGADA")
        assert audits[0].data == {"receipt_id": receipt.id_receipt, "mode": "bulk"}


async def test_settle_single_uses_reason_and_mode(client, seed, db_session):
    booking = await seed.booking()
    pax = await seed.client()
    payment = await seed.payment(booking, pax, amount="100")
    receipt = await seed.receipt(booking, amount="100.005")

    resp = await client.post(
        "/api/client-payments/settle",
        json={"paymentIds": [payment.id_client_payment], "receiptId": receipt.id_receipt, "reason": "Transferencia"},
    )

    assert resp.status_code == 200, resp.text
    reloaded = await _reload(db_session, payment.id_client_payment)
    assert reloaded.status_reason == "Transferencia"
    audits = await _audits(db_session, payment.id_client_payment)
    assert audits[0].data["mode"] == "single"
    assert audits[0].reason == "Transferencia"


async def test_settle_non_pending_is_conflict_and_changes_nothing(client, seed, db_session):
    booking = await seed.booking()
    pax = await seed.client()
    pending = await seed.payment(booking, pax, amount="100")
    paid = await seed.payment(booking, pax, amount="100", status="PAGADA")
    receipt = await seed.receipt(booking, amount="200")

    resp = await client.post(
        "/api/client-payments/settle",
        json={"paymentIds": [pending.id_client_payment, paid.id_client_payment], "receiptId": receipt.id_receipt},
    )

    assert resp.status_code == 409
    assert resp.json()["code"] == "CLIENT_PAYMENT_STATUS_INVALID"
    assert (await _reload(db_session, pending.id_client_payment)).status == "PENDIENTE"
    assert await _audits(db_session, pending.id_client_payment) == []


@pytest.mark.parametrize(
    "receipt_amount, receipt_currency, code",
    [
        ("150", "USD", "CLIENT_PAYMENT_RECEIPT_AMOUNT_MISMATCH"),
        ("99.98", "USD", "CLIENT_PAYMENT_RECEIPT_AMOUNT_MISMATCH"),
        ("100", "ARS", "CLIENT_PAYMENT_RECEIPT_CURRENCY_MISMATCH"),
    ],
)
async def test_settle_receipt_must_match_installments(client, seed, db_session, receipt_amount, receipt_currency, code):
    booking = await seed.booking()
    pax = await seed.client()
    payment = await seed.payment(booking, pax, amount="100")
    receipt = await seed.receipt(booking, amount=receipt_amount, currency=receipt_currency)

    resp = await client.post(
        "/api/client-payments/settle",
        json={"paymentIds": [payment.id_client_payment], "receiptId": receipt.id_receipt},
    )

    assert resp.status_code == 400, resp.text
    assert resp.json()["code"] == code
    assert (await _reload(db_session, payment.id_client_payment)).status == "PENDIENTE"


async def test_settle_receipt_scope(client, seed):
    booking = await seed.booking()
    other_booking = await seed.booking()
    pax = await seed.client()
    other_pax = await seed.client(first_name="Beto")
    payment = await seed.payment(booking, pax, amount="100")

    wrong_booking = await seed.receipt(other_booking, amount="100")
    resp = await client.post(
        "/api/client-payments/settle",
        json={"paymentIds": [payment.id_client_payment], "receiptId": wrong_booking.id_receipt},
    )
    assert resp.status_code == 400
    assert resp.json()["code"] == "CLIENT_PAYMENT_RECEIPT_SCOPE_INVALID"

    wrong_pax = await seed.receipt(booking, amount="100", client_ids=[other_pax.id_client])
    resp = await client.post(
        "/api/client-payments/settle",
        json={"paymentIds": [payment.id_client_payment], "receiptId": wrong_pax.id_receipt},
    )
    assert resp.status_code == 400
    assert resp.json()["code"] == "CLIENT_PAYMENT_RECEIPT_SCOPE_INVALID"

    resp = await client.post(
        "/api/client-payments/settle",
        json={"paymentIds": [payment.id_client_payment], "receiptId": 999},
    )
    assert resp.status_code == 404
    assert resp.json()["code"] == "CLIENT_PAYMENT_RECEIPT_NOT_FOUND"


async def test_settle_mixed_clients_is_rejected(client, seed):
    booking = await seed.booking()
    pax = await seed.client()
    other_pax = await seed.client(first_name="Beto")
    a = await seed.payment(booking, pax, amount="50")
    b = await seed.payment(booking, other_pax, amount="50")
    receipt = await seed.receipt(booking, amount="100")

    resp = await client.post(
        "/api/client-payments/settle",
        json={"paymentIds": [a.id_client_payment, b.id_client_payment], "receiptId": receipt.id_receipt},
    )

    assert resp.status_code == 400
    assert resp.json()["code"] == "CLIENT_PAYMENT_SETTLE_SCOPE_INVALID"


async def test_settle_other_agency(client, seed):
    foreign_booking = await seed.booking(id_agency=OTHER_AGENCY_ID)
    foreign_pax = await seed.client(id_agency=OTHER_AGENCY_ID)
    foreign_payment = await seed.payment(foreign_booking, foreign_pax, amount="100")
    foreign_receipt = await seed.receipt(foreign_booking, amount="100")

    booking = await seed.booking()
    pax = await seed.client()
    payment = await seed.payment(booking, pax, amount="100")

    resp = await client.post(
        "/api/client-payments/settle",
        json={"paymentIds": [foreign_payment.id_client_payment], "receiptId": foreign_receipt.id_receipt},
    )
    assert resp.status_code == 404
    assert resp.json()["code"] == "CLIENT_PAYMENT_NOT_FOUND"

    resp = await client.post(
        "/api/client-payments/settle",
        json={"paymentIds": [payment.id_client_payment], "receiptId": foreign_receipt.id_receipt},
    )
    assert resp.status_code == 403
    assert resp.json()["code"] == "CLIENT_PAYMENT_RECEIPT_FORBIDDEN"


@pytest.mark.parametrize(
    "body, code",
    [
        ({"paymentIds": [], "receiptId": 1}, "CLIENT_PAYMENT_IDS_INVALID"),
        ({"paymentIds": ["x", -1], "receiptId": 1}, "CLIENT_PAYMENT_IDS_INVALID"),
        ({"paymentIds": [1]}, "CLIENT_PAYMENT_RECEIPT_INVALID"),
    ],
)
async def test_settle_request_validation(client, body, code):
    resp = await client.post("/api/client-payments/settle", json=body)

    assert resp.status_code == 400
    assert resp.json()["code"] == code

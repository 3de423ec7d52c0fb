# -*- coding: utf-8 -*-
"""
backend/tests/modules/groups/test_payment_plans.py

Planes de pago masivos por grupal (/api/groups/{id}/bulk/payment-plans):
- replacePending cancela con auditoría y recién después crea
- plantillas: fecha base, tipo de grupal, permisos
- validaciones previas sin escritura
"""

from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import func, select

from app.modules.bookings.models import ClientPayment, ClientPaymentAudit
from tests.conftest import OTHER_AGENCY_ID


async def _group_with_passenger(seed, **group_fields):
    group = await seed.group(**group_fields)
    booking = await seed.booking(travel_group_id=group.id_travel_group)
    pax = await seed.client()
    passenger = await seed.passenger(group, booking, pax)
    return group, booking, pax, passenger


async def _payments(db_session, **where):
    stmt = select(ClientPayment).order_by(ClientPayment.id_client_payment)
    for key, value in where.items():
        stmt = stmt.where(getattr(ClientPayment, key) == value)
    return (await db_session.execute(stmt.execution_options(populate_existing=True))).scalars().all()


async def _audit_count(db_session, **where) -> int:
    stmt = select(func.count()).select_from(ClientPaymentAudit)
    for key, value in where.items():
        stmt = stmt.where(getattr(ClientPaymentAudit, key) == value)
    return await db_session.scalar(stmt)


async def test_replace_pending_cancels_then_creates(client, seed, db_session):
    group, booking, pax, passenger = await _group_with_passenger(seed)
    for _ in range(3):
        await seed.payment(booking, pax, amount="80")
    paid = await seed.payment(booking, pax, amount="50", status="PAGADA")

    resp = await client.post(
        f"/api/groups/{group.id_travel_group}/bulk/payment-plans",
        json={
            "passengerIds": [passenger.id_travel_group_passenger],
            "replacePending": True,
            "installments": [
                {"due_date": "2026-11-10", "amount": "500", "currency": "USD"},
                {"due_date": "2026-12-10T00:00:00Z", "amount": 500, "currency": "U$D"},
            ],
        },
    )

    assert resp.status_code == 201, resp.text
    body = resp.json()
    assert body["created_count"] == 2
    assert body["cancelled_pending_count"] == 3
    assert body["passengers_count"] == 1
    assert body["installments_per_passenger"] == 2

    cancelled = await _payments(db_session, status="CANCELADA")
    assert len(cancelled) == 3
    assert all(p.status_reason for p in cancelled)
    assert await _audit_count(db_session, action="STATUS_CHANGED", to_status="CANCELADA") == 3

    pending = await _payments(db_session, status="PENDIENTE")
    assert [p.due_date for p in pending] == [date(2026, 11, 10), date(2026, 12, 10)]
    assert all(p.amount == Decimal("500") and p.currency == "USD" for p in pending)
    assert await _audit_count(db_session, action="CREATED") == 2

    untouched = await _payments(db_session, id_client_payment=paid.id_client_payment)
    assert untouched[0].status == "PAGADA"


async def test_without_replace_keeps_existing_pending(client, seed, db_session):
    group, booking, pax, passenger = await _group_with_passenger(seed)
    await seed.payment(booking, pax)

    resp = await client.post(
        f"/api/groups/{group.id_travel_group}/bulk/payment-plans",
        json={
            "passengerIds": [passenger.id_travel_group_passenger],
            "installments": [{"due_date": "2026-11-10", "amount": 100, "currency": "USD"}],
        },
    )

    assert resp.json()["cancelled_pending_count"] == 0
    assert len(await _payments(db_session, status="PENDIENTE")) == 2


async def test_template_dates_from_group_start(client, seed, db_session):
    group, *_rest, passenger = await _group_with_passenger(seed, start_date=date(2026, 12, 1))
    template = await seed.template()

    resp = await client.post(
        f"/api/groups/{group.id_travel_group}/bulk/payment-plans",
        json={"passengerIds": [passenger.id_travel_group_passenger], "templateId": template.id_travel_group_payment_template},
    )

    assert resp.status_code == 201, resp.text
    assert resp.json()["template_id"] == template.id_travel_group_payment_template
    pending = await _payments(db_session, status="PENDIENTE")
    assert [p.due_date for p in pending] == [date(2026, 12, 1), date(2026, 12, 31)]


async def test_template_base_date_overrides_group_start(client, seed, db_session):
    group, *_rest, passenger = await _group_with_passenger(seed)
    template = await seed.template()

    await client.post(
        f"/api/groups/{group.id_travel_group}/bulk/payment-plans",
        json={
            "passengerIds": [passenger.id_travel_group_passenger],
            "templateId": template.id_travel_group_payment_template,
            "template_base_date": "2027-01-15",
        },
    )

    pending = await _payments(db_session, status="PENDIENTE")
    assert [p.due_date for p in pending] == [date(2027, 1, 15), date(2027, 2, 14)]


async def test_template_for_other_group_type_is_rejected(client, seed):
    group, *_rest, passenger = await _group_with_passenger(seed, type="AGENCIA")
    template = await seed.template(target_type="ESTUDIANTIL")

    resp = await client.post(
        f"/api/groups/{group.id_travel_group}/bulk/payment-plans",
        json={"passengerIds": [passenger.id_travel_group_passenger], "templateId": template.id_travel_group_payment_template},
    )

    assert resp.status_code == 400
    assert resp.json()["code"] == "GROUP_PAYMENT_TEMPLATE_TYPE_MISMATCH"


async def test_assigned_template_is_forbidden_for_unassigned_seller(client, auth, seed):
    group, *_rest, passenger = await _group_with_passenger(seed)
    template = await seed.template(assigned_user_ids=[99])
    auth.as_role("vendedor", id_user=10)

    resp = await client.post(
        f"/api/groups/{group.id_travel_group}/bulk/payment-plans",
        json={"passengerIds": [passenger.id_travel_group_passenger], "templateId": template.id_travel_group_payment_template},
    )

    assert resp.status_code == 403
    assert resp.json()["code"] == "GROUP_PAYMENT_TEMPLATE_FORBIDDEN"


async def test_manual_rows_and_template_conflict(client, seed):
    group, *_rest, passenger = await _group_with_passenger(seed)
    template = await seed.template()

    resp = await client.post(
        f"/api/groups/{group.id_travel_group}/bulk/payment-plans",
        json={
            "passengerIds": [passenger.id_travel_group_passenger],
            "templateId": template.id_travel_group_payment_template,
            "installments": [{"due_date": "2026-11-10", "amount": 100, "currency": "USD"}],
        },
    )

    assert resp.status_code == 400
    assert resp.json()["code"] == "GROUP_PAYMENT_PLAN_SOURCE_CONFLICT"


async def test_invalid_installment_row_rejects_plan(client, seed, db_session):
    group, booking, pax, passenger = await _group_with_passenger(seed)
    await seed.payment(booking, pax)

    resp = await client.post(
        f"/api/groups/{group.id_travel_group}/bulk/payment-plans",
        json={
            "passengerIds": [passenger.id_travel_group_passenger],
            "replacePending": True,
            "installments": [
                {"due_date": "2026-11-10", "amount": 100, "currency": "USD"},
                {"due_date": "2026-12-10", "amount": -5, "currency": "USD"},
            ],
        },
    )

    assert resp.status_code == 400
    assert resp.json()["code"] == "GROUP_PAYMENT_PLAN_INVALID"
    assert len(await _payments(db_session, status="PENDIENTE")) == 1


@pytest.mark.parametrize("amount", ["1e20", 1e30, "Infinity"])
async def test_installment_amount_outside_money_column_rejects_plan(client, seed, db_session, amount):
    group, booking, pax, passenger = await _group_with_passenger(seed)

    resp = await client.post(
        f"/api/groups/{group.id_travel_group}/bulk/payment-plans",
        json={
            "passengerIds": [passenger.id_travel_group_passenger],
            "installments": [{"due_date": "2026-11-10", "amount": amount, "currency": "USD"}],
        },
    )

    assert resp.status_code == 400
    assert resp.json()["code"] == "GROUP_PAYMENT_PLAN_INVALID"
    assert await _payments(db_session) == []


async def test_locked_group_rejects_plans(client, seed):
    group, *_rest, passenger = await _group_with_passenger(seed, status="CERRADA")

    resp = await client.post(
        f"/api/groups/{group.id_travel_group}/bulk/payment-plans",
        json={
            "passengerIds": [passenger.id_travel_group_passenger],
            "installments": [{"due_date": "2026-11-10", "amount": 100, "currency": "USD"}],
        },
    )

    assert resp.status_code == 409
    assert resp.json()["code"] == "GROUP_LOCKED"


async def test_group_of_other_agency_is_not_found(client, seed):
    group = await seed.group(id_agency=OTHER_AGENCY_ID)

    resp = await client.post(
        f"/api/groups/{group.id_travel_group}/bulk/payment-plans",
        json={"passengerIds": [1], "installments": [{"due_date": "2026-11-10", "amount": 1, "currency": "USD"}]},
    )

    assert resp.status_code == 404
    assert resp.json()["code"] == "GROUP_NOT_FOUND"


async def test_passenger_of_other_group_is_rejected(client, seed):
    group, *_rest = await _group_with_passenger(seed)
    _other, *_more, stranger = await _group_with_passenger(seed)

    resp = await client.post(
        f"/api/groups/{group.id_travel_group}/bulk/payment-plans",
        json={
            "passengerIds": [stranger.id_travel_group_passenger],
            "installments": [{"due_date": "2026-11-10", "amount": 100, "currency": "USD"}],
        },
    )

    assert resp.status_code == 404
    assert resp.json()["code"] == "GROUP_PASSENGER_NOT_FOUND"


async def test_passenger_ids_are_required(client, seed):
    group, *_rest = await _group_with_passenger(seed)

    resp = await client.post(
        f"/api/groups/{group.id_travel_group}/bulk/payment-plans",
        json={"passengerIds": ["x", 0, -3], "installments": [{"due_date": "2026-11-10", "amount": 1, "currency": "USD"}]},
    )

    assert resp.status_code == 400
    assert resp.json()["code"] == "GROUP_PASSENGER_IDS_INVALID"

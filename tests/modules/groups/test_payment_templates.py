# -*- coding: utf-8 -*-
"""
backend/tests/modules/groups/test_payment_templates.py

ABM de plantillas de pago (/api/groups/config/payment-templates).
"""

from app.modules.groups.services.common import parse_template_installments

BASE = "/api/groups/config/payment-templates"


def _template_body(**overrides):
    body = {
        "name": "Estudiantil 3 cuotas",
        "target_type": "estudiantil",
        "assigned_user_ids": [5, 5, 7],
        "installments": [
            {"due_in_days": 0, "amount": "300", "currency": "USD"},
            {"due_in_days": 30, "amount": "300.555", "currency": "u$s"},
        ],
        "metadata": {"color": "azul"},
    }
    body.update(overrides)
    return body


async def test_create_and_get_template(client):
    resp = await client.post(BASE, json=_template_body())

    assert resp.status_code == 201, resp.text
    created = resp.json()
    assert created["target_type"] == "ESTUDIANTIL"
    assert created["assigned_user_ids"] == [5, 7]
    assert created["installments"][1] == {"due_in_days": 30, "amount": 300.56, "currency": "USD"}
    assert created["metadata"] == {"color": "azul"}
    assert created["agency_travel_group_payment_template_id"] == 1

    detail = await client.get(f"{BASE}/{created['id_travel_group_payment_template']}")
    assert detail.status_code == 200
    assert detail.json()["name"] == "Estudiantil 3 cuotas"


async def test_create_rejects_unknown_target_type(client):
    resp = await client.post(BASE, json=_template_body(target_type="crucero"))

    assert resp.status_code == 400
    assert resp.json()["code"] == "GROUP_TEMPLATE_TARGET_TYPE_INVALID"


async def test_create_rejects_amount_outside_money_column(client):
    body = _template_body(installments=[{"due_in_days": 0, "amount": "1e20", "currency": "USD"}])

    resp = await client.post(BASE, json=body)

    assert resp.status_code == 400
    assert resp.json()["code"] == "VALIDATION_ERROR"


def test_parse_template_installments_rejects_out_of_range_amount():
    assert parse_template_installments([{"due_in_days": 0, "amount": "1e20", "currency": "USD"}]) is None


async def test_create_rejects_invalid_currency(client):
    body = _template_body(installments=[{"due_in_days": 0, "amount": 10, "currency": "???"}])

    resp = await client.post(BASE, json=body)

    assert resp.status_code == 400
    assert resp.json()["code"] == "VALIDATION_ERROR"


async def test_seller_cannot_create(client, auth):
    auth.as_role("vendedor")

    resp = await client.post(BASE, json=_template_body())

    assert resp.status_code == 403
    assert resp.json()["code"] == "GROUP_TEMPLATE_CREATE_FORBIDDEN"


async def test_update_only_touches_sent_fields(client):
    created = (await client.post(BASE, json=_template_body())).json()
    template_id = created["id_travel_group_payment_template"]

    resp = await client.put(f"{BASE}/{template_id}", json={"name": "  Renombrada  ", "target_type": ""})

    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["name"] == "Renombrada"
    assert body["target_type"] is None
    assert body["installments"] == created["installments"]


async def test_update_without_changes(client):
    created = (await client.post(BASE, json=_template_body())).json()

    resp = await client.put(f"{BASE}/{created['id_travel_group_payment_template']}", json={})

    assert resp.status_code == 400
    assert resp.json()["code"] == "GROUP_TEMPLATE_NO_CHANGES"


async def test_delete_deactivates_template(client):
    created = (await client.post(BASE, json=_template_body())).json()
    template_id = created["id_travel_group_payment_template"]

    resp = await client.delete(f"{BASE}/{template_id}")
    assert resp.status_code == 200
    assert resp.json() == {"ok": True}

    active = (await client.get(BASE)).json()["items"]
    assert template_id not in [t["id_travel_group_payment_template"] for t in active]

    everything = (await client.get(BASE, params={"include_inactive": True})).json()["items"]
    inactive = next(t for t in everything if t["id_travel_group_payment_template"] == template_id)
    assert inactive["is_active"] is False


async def test_seller_only_lists_available_templates(client, auth, seed):
    await seed.template(name="Para todos")
    await seed.template(name="Solo 99", assigned_user_ids=[99])
    await seed.template(name="Para mí", assigned_user_ids=[10])
    auth.as_role("vendedor", id_user=10)

    resp = await client.get(BASE)

    names = [t["name"] for t in resp.json()["items"]]
    assert names == ["Para mí", "Para todos"]


async def test_list_filters_by_target_type(client, seed):
    await seed.template(name="Agencia", target_type="AGENCIA")
    await seed.template(name="Estudiantil", target_type="ESTUDIANTIL")
    await seed.template(name="Genérica")

    resp = await client.get(BASE, params={"target_type": "agencia"})

    assert [t["name"] for t in resp.json()["items"]] == ["Agencia", "Genérica"]


def test_parse_template_installments_rejects_bad_rows():
    good = [{"due_in_days": 0, "amount": 10.0, "currency": "USD"}]
    assert parse_template_installments(good)[0].currency == "USD"

    assert parse_template_installments([]) is None
    assert parse_template_installments([{"due_in_days": -1, "amount": 10, "currency": "USD"}]) is None
    assert parse_template_installments([{"due_in_days": 1.5, "amount": 10, "currency": "USD"}]) is None
    assert parse_template_installments([{"due_in_days": 1, "amount": 0, "currency": "USD"}]) is None
    assert parse_template_installments([{"due_in_days": 1, "amount": 10, "currency": "???"}]) is None
    assert parse_template_installments([{"due_in_days": True, "amount": 10, "currency": "USD"}]) is None

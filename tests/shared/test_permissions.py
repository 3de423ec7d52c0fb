# -*- coding: utf-8 -*-
"""
backend/tests/shared/test_permissions.py

Matriz rol → acción.
"""

import pytest

from app.shared.permissions import Action, can, normalize_role

ALL_ROLES = ["desarrollador", "gerente", "administrativo", "lider", "vendedor"]


@pytest.mark.parametrize(
    "raw, expected",
    [("Gerente", "gerente"), (" LÍDER ", "lider"), ("Administrativo", "administrativo"), (None, ""), ("", "")],
)
def test_normalize_role(raw, expected):
    assert normalize_role(raw) == expected


@pytest.mark.parametrize("role", ALL_ROLES)
def test_every_role_can_write_groups_files_and_client_payments(role):
    assert can(role, Action.GROUPS_WRITE)
    assert can(role, Action.FILES_MANAGE)
    assert can(role, Action.CLIENT_PAYMENTS_WRITE)


@pytest.mark.parametrize("action", [Action.GROUPS_CONFIG, Action.CREDITS_ACCESS])
def test_config_and_credits_exclude_sellers(action):
    assert can("Líder", action)
    assert can("gerente", action)
    assert not can("vendedor", action)


@pytest.mark.parametrize(
    "action",
    [Action.CREDIT_ENTRY_EDIT, Action.CREDIT_ENTRY_DELETE, Action.BOOKING_OVERRIDE_BLOCKED],
)
def test_finance_admin_actions(action):
    assert {r for r in ALL_ROLES if can(r, action)} == {"desarrollador", "gerente", "administrativo"}


@pytest.mark.parametrize("role", [None, "", "admin", "superuser"])
def test_unknown_roles_get_nothing(role):
    assert not any(can(role, action) for action in Action)

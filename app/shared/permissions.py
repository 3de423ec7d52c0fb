# -*- coding: utf-8 -*-
"""
backend/app/shared/permissions.py

Capacidades por rol. Punto único para responder "¿este rol puede hacer X?".

Los roles llegan del JWT con mayúsculas, espacios o tildes variables
("Líder", " GERENTE "); se normalizan antes de comparar. Un rol
desconocido no tiene ninguna capacidad.

Autor: TurisCore
Fecha: 2026-09-04
"""

from __future__ import annotations

import unicodedata
from enum import Enum
from typing import Dict, FrozenSet, Optional


class Role(str, Enum):
    DESARROLLADOR = "desarrollador"
    GERENTE = "gerente"
    ADMINISTRATIVO = "administrativo"
    LIDER = "lider"
    VENDEDOR = "vendedor"


class Action(str, Enum):
    GROUPS_WRITE = "groups.write"
    GROUPS_CONFIG = "groups.config"
    CREDITS_ACCESS = "credits.access"
    CREDIT_ENTRY_EDIT = "credits.entry.edit"
    CREDIT_ENTRY_DELETE = "credits.entry.delete"
    FILES_MANAGE = "files.manage"
    BOOKING_OVERRIDE_BLOCKED = "bookings.override_blocked"
    CLIENT_PAYMENTS_WRITE = "client_payments.write"


_FINANCE_ADMINS: FrozenSet[Role] = frozenset({Role.GERENTE, Role.ADMINISTRATIVO, Role.DESARROLLADOR})
_CONFIG_MANAGERS: FrozenSet[Role] = _FINANCE_ADMINS | {Role.LIDER}
_WRITERS: FrozenSet[Role] = _CONFIG_MANAGERS | {Role.VENDEDOR}

CAPABILITIES: Dict[Action, FrozenSet[Role]] = {
    Action.GROUPS_WRITE: _WRITERS,
    Action.GROUPS_CONFIG: _CONFIG_MANAGERS,
    Action.CREDITS_ACCESS: _CONFIG_MANAGERS,
    Action.CREDIT_ENTRY_EDIT: _FINANCE_ADMINS,
    Action.CREDIT_ENTRY_DELETE: _FINANCE_ADMINS,
    Action.FILES_MANAGE: _WRITERS,
    Action.BOOKING_OVERRIDE_BLOCKED: _FINANCE_ADMINS,
    Action.CLIENT_PAYMENTS_WRITE: _WRITERS,
}


def normalize_role(role: Optional[str]) -> str:
    """Minúsculas, sin espacios alrededor y sin tildes."""
    if not role:
        return ""
    decomposed = unicodedata.normalize("NFD", role.strip().lower())
    return "".join(ch for ch in decomposed if unicodedata.category(ch) != "Mn")


def can(role: Optional[str], action: Action) -> bool:
    normalized = normalize_role(role)
    try:
        parsed = Role(normalized)
    except ValueError:
        return False
    return parsed in CAPABILITIES.get(action, frozenset())


__all__ = ["Role", "Action", "CAPABILITIES", "normalize_role", "can"]
# Fin del archivo backend/app/shared/permissions.py

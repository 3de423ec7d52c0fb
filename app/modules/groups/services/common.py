# -*- coding: utf-8 -*-
"""
backend/app/modules/groups/services/common.py

Helpers compartidos por los servicios de grupales: parseo tolerante de
ids, cuotas de plantilla y carga de la grupal con sus chequeos previos
(permiso, pertenencia a la agencia, estado bloqueado).

Autor: TurisCore
Fecha: 2026-09-08
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Iterable, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.finance.commission import ZERO, money, to_decimal
from app.modules.finance.currency import resolve_currency
from app.shared.auth_context import AuthContext
from app.shared.permissions import Action, can
from app.shared.utils.http_exceptions import (
    ConflictException,
    DomainValidationError,
    ForbiddenException,
    NotFoundException,
)

from ..enums import is_locked_group_status
from ..models import TravelGroup
from ..repositories import TravelGroupRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TemplateInstallment:
    due_in_days: int
    amount: Decimal
    currency: str

    def as_json(self) -> dict[str, Any]:
        return {
            "due_in_days": self.due_in_days,
            "amount": float(self.amount),
            "currency": self.currency,
        }


def to_positive_int(value: Any) -> Optional[int]:
    """Entero > 0 (trunca decimales); None si no aplica. Booleanos no cuentan."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = int(Decimal(str(value).strip()))
    except (ArithmeticError, ValueError):
        return None
    return number if number > 0 else None


def distinct_positive_ints(values: Optional[Iterable[Any]]) -> list[int]:
    """Ids positivos, sin duplicados, en orden de llegada; descarta basura."""
    out: list[int] = []
    seen: set[int] = set()
    for raw in values or []:
        parsed = to_positive_int(raw)
        if parsed is not None and parsed not in seen:
            seen.add(parsed)
            out.append(parsed)
    return out


def parse_template_installments(raw: Any) -> Optional[list[TemplateInstallment]]:
    """
    Valida las cuotas guardadas en una plantilla. Devuelve None ante la
    primera fila inválida (o lista vacía).
    """
    if not isinstance(raw, list) or not raw:
        return None
    rows: list[TemplateInstallment] = []
    for item in raw:
        if not isinstance(item, dict):
            return None
        days = item.get("due_in_days")
        if isinstance(days, bool) or not isinstance(days, (int, float)) or days < 0 or int(days) != days:
            return None
        try:
            amount = to_decimal(item.get("amount"), default=ZERO)
        except DomainValidationError:
            return None
        if amount <= ZERO:
            return None
        currency = resolve_currency(item.get("currency") if isinstance(item.get("currency"), str) else None)
        if currency is None:
            return None
        rows.append(TemplateInstallment(due_in_days=int(days), amount=money(amount), currency=currency))
    return rows


async def load_group_for_write(
    session: AsyncSession,
    ctx: AuthContext,
    group_id: int,
    *,
    forbidden_message: str,
    forbidden_code: str,
    locked_message: str,
    locked_solution: str,
    groups: Optional[TravelGroupRepository] = None,
) -> TravelGroup:
    """
    Chequeos previos de toda operación masiva, en orden:
    permiso de escritura → grupal de la agencia → grupal no bloqueada.
    """
    if not can(ctx.role, Action.GROUPS_WRITE):
        raise ForbiddenException(
            forbidden_message,
            code=forbidden_code,
            solution="Solicitá permisos de edición de grupales a un administrador.",
        )

    repo = groups or TravelGroupRepository()
    group = await repo.get_for_agency(session, group_id, ctx.id_agency)
    if group is None:
        raise NotFoundException(
            "No encontramos la grupal solicitada.",
            code="GROUP_NOT_FOUND",
            solution="Revisá que exista y pertenezca a tu agencia.",
        )
    if is_locked_group_status(group.status):
        raise ConflictException(locked_message, code="GROUP_LOCKED", solution=locked_solution)
    return group


__all__ = [
    "TemplateInstallment",
    "to_positive_int",
    "distinct_positive_ints",
    "parse_template_installments",
    "load_group_for_write",
]
# Fin del archivo backend/app/modules/groups/services/common.py

# -*- coding: utf-8 -*-
"""
backend/app/modules/finance/debt_summary.py

Deuda por moneda de una reserva: venta con interés menos lo cobrado.

- Venta con interés: sale_price + interés de tarjeta (el desglose
  gravado + IVA si existe; si no, el interés bruto).
- Cobrado: por recibo, el contravalor si se registró; si no, el importe
  en la moneda del recibo.

Autor: TurisCore
Fecha: 2026-09-06
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Iterable

from .commission import ZERO, money, to_decimal
from .currency import normalize_currency


@dataclass
class DebtSummary:
    sales_with_interest: dict[str, Decimal] = field(default_factory=dict)
    paid: dict[str, Decimal] = field(default_factory=dict)

    @property
    def currencies(self) -> list[str]:
        return sorted(set(self.sales_with_interest) | set(self.paid))

    @property
    def debt(self) -> dict[str, Decimal]:
        return {
            cur: self.sales_with_interest.get(cur, ZERO) - self.paid.get(cur, ZERO)
            for cur in self.currencies
        }

    def as_dict(self) -> dict[str, dict[str, Decimal]]:
        return {
            "sales_with_interest": {c: money(v) for c, v in sorted(self.sales_with_interest.items())},
            "paid": {c: money(v) for c, v in sorted(self.paid.items())},
            "debt": {c: money(v) for c, v in self.debt.items()},
        }


def _service_interest(service: Any) -> Decimal:
    split = to_decimal(getattr(service, "taxable_card_interest", None)) + to_decimal(
        getattr(service, "vat_on_card_interest", None)
    )
    if split > ZERO:
        return split
    return to_decimal(getattr(service, "card_interest", None))


def build_debt_summary(services: Iterable[Any], receipts: Iterable[Any]) -> DebtSummary:
    summary = DebtSummary()

    for service in services:
        cur = normalize_currency(getattr(service, "currency", None))
        sale = to_decimal(getattr(service, "sale_price", None))
        summary.sales_with_interest[cur] = (
            summary.sales_with_interest.get(cur, ZERO) + sale + _service_interest(service)
        )

    for receipt in receipts:
        counter_currency = getattr(receipt, "counter_currency", None)
        counter_amount = getattr(receipt, "counter_amount", None)
        if counter_currency and counter_amount is not None:
            cur, value = normalize_currency(counter_currency), to_decimal(counter_amount)
        elif getattr(receipt, "amount_currency", None):
            cur = normalize_currency(receipt.amount_currency)
            value = to_decimal(getattr(receipt, "amount", None))
        else:
            continue
        summary.paid[cur] = summary.paid.get(cur, ZERO) + value

    return summary


__all__ = ["DebtSummary", "build_debt_summary"]
# Fin del archivo backend/app/modules/finance/debt_summary.py

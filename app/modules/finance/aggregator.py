# -*- coding: utf-8 -*-
"""
backend/app/modules/finance/aggregator.py

Totales por moneda de una lista de servicios (una reserva, un listado).

Cada moneda es un balde independiente: nunca se suman importes de dos
monedas distintas ni se convierte entre ellas.

Autor: TurisCore
Fecha: 2026-09-06
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Iterable

from app.shared.utils.http_exceptions import DomainValidationError
from .commission import (
    ZERO,
    ServiceAmounts,
    compute_commission,
    money,
    q,
    to_decimal,
    transfer_fee,
)
from .currency import normalize_currency

logger = logging.getLogger(__name__)


@dataclass
class CurrencyTotals:
    sale_price: Decimal = ZERO
    cost_price: Decimal = ZERO
    tax_21: Decimal = ZERO
    tax_105: Decimal = ZERO
    exempt: Decimal = ZERO
    other_taxes: Decimal = ZERO
    taxable_card_interest: Decimal = ZERO
    vat_on_card_interest: Decimal = ZERO
    card_interest_raw: Decimal = ZERO
    non_computable: Decimal = ZERO
    taxable_base_21: Decimal = ZERO
    taxable_base_10_5: Decimal = ZERO
    commission_exempt: Decimal = ZERO
    commission_21: Decimal = ZERO
    commission_10_5: Decimal = ZERO
    vat_on_commission_21: Decimal = ZERO
    vat_on_commission_10_5: Decimal = ZERO
    total_commission_without_vat: Decimal = ZERO
    extra_costs_amount: Decimal = ZERO
    extra_taxes_amount: Decimal = ZERO
    transfer_fees_amount: Decimal = ZERO
    services_count: int = 0
    # Servicios con datos fiscales inconsistentes: suman importes crudos
    # pero no comisión.
    invalid_service_ids: list[int] = field(default_factory=list)

    @property
    def net_commission(self) -> Decimal:
        return self.total_commission_without_vat - self.transfer_fees_amount

    def as_dict(self) -> dict[str, Any]:
        return {
            "sale_price": money(self.sale_price),
            "cost_price": money(self.cost_price),
            "tax_21": money(self.tax_21),
            "tax_105": money(self.tax_105),
            "exempt": money(self.exempt),
            "other_taxes": money(self.other_taxes),
            "taxableCardInterest": money(self.taxable_card_interest),
            "vatOnCardInterest": money(self.vat_on_card_interest),
            "cardInterestRaw": money(self.card_interest_raw),
            "nonComputable": money(self.non_computable),
            "taxableBase21": money(self.taxable_base_21),
            "taxableBase10_5": money(self.taxable_base_10_5),
            "commissionExempt": money(self.commission_exempt),
            "commission21": money(self.commission_21),
            "commission10_5": money(self.commission_10_5),
            "vatOnCommission21": money(self.vat_on_commission_21),
            "vatOnCommission10_5": money(self.vat_on_commission_10_5),
            "totalCommissionWithoutVAT": money(self.total_commission_without_vat),
            "extra_costs_amount": money(self.extra_costs_amount),
            "extra_taxes_amount": money(self.extra_taxes_amount),
            "transferFeesAmount": money(self.transfer_fees_amount),
            "netCommission": money(self.net_commission),
            "services_count": self.services_count,
            "invalid_service_ids": list(self.invalid_service_ids),
        }


def _add_service(totals: CurrencyTotals, service: Any, agency_transfer_fee_pct: Decimal) -> None:
    sale = to_decimal(getattr(service, "sale_price", None))
    cost = to_decimal(getattr(service, "cost_price", None))

    totals.services_count += 1
    totals.sale_price += sale
    totals.cost_price += cost
    totals.tax_21 += to_decimal(getattr(service, "tax_21", None))
    totals.tax_105 += to_decimal(getattr(service, "tax_105", None))
    totals.exempt += to_decimal(getattr(service, "exempt", None))
    totals.other_taxes += to_decimal(getattr(service, "other_taxes", None))
    totals.extra_costs_amount += to_decimal(getattr(service, "extra_costs_amount", None))
    totals.extra_taxes_amount += to_decimal(getattr(service, "extra_taxes_amount", None))

    split_taxable = to_decimal(getattr(service, "taxable_card_interest", None))
    split_vat = to_decimal(getattr(service, "vat_on_card_interest", None))
    raw_interest = to_decimal(getattr(service, "card_interest", None))
    totals.taxable_card_interest += split_taxable
    totals.vat_on_card_interest += split_vat
    if split_taxable + split_vat <= ZERO and raw_interest > ZERO:
        totals.card_interest_raw += raw_interest

    totals.transfer_fees_amount += transfer_fee(
        sale,
        agency_pct=agency_transfer_fee_pct,
        service_pct=getattr(service, "transfer_fee_pct", None),
        fee_amount=getattr(service, "transfer_fee_amount", None),
    )

    try:
        breakdown = compute_commission(ServiceAmounts.from_service(service))
    except DomainValidationError as e:
        service_id = getattr(service, "id_service", None)
        logger.info("Servicio sin comisión calculable: service=%s code=%s", service_id, e.code)
        if service_id is not None:
            totals.invalid_service_ids.append(service_id)
        return

    totals.non_computable += breakdown.non_computable
    totals.taxable_base_21 += breakdown.taxable_base_21
    totals.taxable_base_10_5 += breakdown.taxable_base_10_5
    totals.commission_exempt += breakdown.commission_exempt
    totals.commission_21 += breakdown.commission_21
    totals.commission_10_5 += breakdown.commission_10_5
    totals.vat_on_commission_21 += breakdown.vat_on_commission_21
    totals.vat_on_commission_10_5 += breakdown.vat_on_commission_10_5
    totals.total_commission_without_vat += breakdown.total_commission_without_vat


def aggregate_by_currency(
    services: Iterable[Any],
    agency_transfer_fee_pct: Decimal,
) -> dict[str, CurrencyTotals]:
    """
    Agrupa y suma servicios por moneda normalizada (ISO 4217).

    Args:
        services: objetos con los atributos de `bookings.models.Service`
        agency_transfer_fee_pct: % de costos bancarios por defecto de la agencia

    Returns:
        {"ARS": CurrencyTotals(...), "USD": ...}
    """
    pct = q(to_decimal(agency_transfer_fee_pct))
    buckets: dict[str, CurrencyTotals] = {}
    for service in services:
        currency = normalize_currency(getattr(service, "currency", None))
        _add_service(buckets.setdefault(currency, CurrencyTotals()), service, pct)
    return buckets


__all__ = ["CurrencyTotals", "aggregate_by_currency"]
# Fin del archivo backend/app/modules/finance/aggregator.py

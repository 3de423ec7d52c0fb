# -*- coding: utf-8 -*-
"""
backend/app/modules/finance/commission.py

Descomposición del margen de un servicio (venta - costo) en comisión
exenta, comisión gravada al 21 % y al 10,5 %, con su IVA.

Dos modos, según el operador haya declarado IVA facturado:

Modo declarado (tax_21 + tax_105 > 0)
    taxableCost   = cost - exempt
    taxableMargin = margin * taxableCost / cost
    gross21       = taxableMargin * tax21 / (tax21 + tax105)   (idem 10,5)
    commission21  = gross21 / 1.21 ; vat21 = gross21 - commission21
    exempt        = margin - taxableMargin

Modo sin IVA declarado
    commission21 / commissionExempt = taxableCost / exempt
    1.21 * commission21 + commissionExempt = margin
    (si taxableCost <= 0, todo el margen es comisión exenta)

Todo el cálculo es Decimal, cuantizado a 10 decimales en cada paso; el
redondeo a 2 decimales ocurre solo al presentar (`as_dict`).

La comisión por transferencia (costos bancarios) se descuenta del total
sin IVA solo en presentación; nunca se guarda en el servicio.

Autor: TurisCore
Fecha: 2026-09-06
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Optional

from app.shared.utils.http_exceptions import DomainValidationError

logger = logging.getLogger(__name__)

WORKING_PLACES = Decimal("0.0000000001")
MONEY_PLACES = Decimal("0.01")

ZERO = Decimal("0")
RATE_21 = Decimal("0.21")
RATE_10_5 = Decimal("0.105")
FACTOR_21 = Decimal("1.21")
FACTOR_10_5 = Decimal("1.105")

# Mayor importe que entra en Numeric(18,2)
MONEY_MAX = Decimal("9999999999999999.99")


def q(value: Decimal) -> Decimal:
    """Cuantiza a la precisión de trabajo."""
    return value.quantize(WORKING_PLACES, rounding=ROUND_HALF_UP)


def money(value: Decimal) -> Decimal:
    """Redondeo de presentación (2 decimales)."""
    return value.quantize(MONEY_PLACES, rounding=ROUND_HALF_UP)


def _checked(parsed: Decimal, raw: Any) -> Decimal:
    if not parsed.is_finite():
        raise DomainValidationError(f"Importe inválido: {raw!r}", code="AMOUNT_INVALID")
    if abs(parsed) > MONEY_MAX:
        raise DomainValidationError(f"Importe fuera de rango: {raw!r}", code="AMOUNT_OUT_OF_RANGE")
    return parsed


def to_decimal(value: Any, default: Decimal = ZERO) -> Decimal:
    """
    Convierte números, Decimal o strings ("1.234,5" no; "1234,5" sí) a
    Decimal. None o vacío -> default.

    Raises:
        DomainValidationError: AMOUNT_INVALID si no es un número finito,
            AMOUNT_OUT_OF_RANGE si no entra en Numeric(18,2).
    """
    if value is None:
        return default
    if isinstance(value, Decimal):
        return _checked(value, value)
    if isinstance(value, bool):
        raise DomainValidationError("Importe inválido", code="AMOUNT_INVALID")
    if isinstance(value, (int, float)):
        return _checked(Decimal(str(value)), value)
    raw = str(value).strip().replace(",", ".")
    if not raw:
        return default
    try:
        parsed = Decimal(raw)
    except InvalidOperation as e:
        raise DomainValidationError(f"Importe inválido: {value!r}", code="AMOUNT_INVALID") from e
    return _checked(parsed, value)


@dataclass(frozen=True)
class ServiceAmounts:
    """Importes de entrada de un servicio (ya como Decimal)."""

    sale_price: Decimal
    cost_price: Decimal
    tax_21: Decimal = ZERO
    tax_105: Decimal = ZERO
    exempt: Decimal = ZERO
    other_taxes: Decimal = ZERO

    @classmethod
    def from_values(cls, **values: Any) -> "ServiceAmounts":
        return cls(**{f.name: to_decimal(values.get(f.name)) for f in fields(cls)})

    @classmethod
    def from_service(cls, service: Any) -> "ServiceAmounts":
        """Desde un ORM Service o cualquier objeto con los mismos atributos."""
        return cls.from_values(**{f.name: getattr(service, f.name, None) for f in fields(cls)})


@dataclass(frozen=True)
class CommissionBreakdown:
    non_computable: Decimal
    taxable_base_21: Decimal
    taxable_base_10_5: Decimal
    commission_exempt: Decimal
    commission_21: Decimal
    commission_10_5: Decimal
    vat_on_commission_21: Decimal
    vat_on_commission_10_5: Decimal
    total_commission_without_vat: Decimal

    _KEYS = {
        "non_computable": "nonComputable",
        "taxable_base_21": "taxableBase21",
        "taxable_base_10_5": "taxableBase10_5",
        "commission_exempt": "commissionExempt",
        "commission_21": "commission21",
        "commission_10_5": "commission10_5",
        "vat_on_commission_21": "vatOnCommission21",
        "vat_on_commission_10_5": "vatOnCommission10_5",
        "total_commission_without_vat": "totalCommissionWithoutVAT",
    }

    @property
    def gross_commission(self) -> Decimal:
        """Comisión con IVA: debe reconstruir el margen."""
        return (
            self.commission_exempt
            + self.commission_21 + self.vat_on_commission_21
            + self.commission_10_5 + self.vat_on_commission_10_5
        )

    def as_dict(self, *, rounded: bool = True) -> dict[str, Decimal]:
        out: dict[str, Decimal] = {}
        for attr, key in self._KEYS.items():
            value = getattr(self, attr)
            out[key] = money(value) if rounded else value
        return out


def compute_commission(amounts: ServiceAmounts) -> CommissionBreakdown:
    """
    Calcula la descomposición de comisión de un servicio.

    Raises:
        DomainValidationError: venta <= costo, o bases exentas + gravadas
            mayores al costo (nonComputable negativo), o importes fuera de
            la precisión de trabajo.
    """
    sale, cost = amounts.sale_price, amounts.cost_price

    if sale <= cost:
        raise DomainValidationError(
            "El precio de venta debe ser mayor al costo.",
            code="COMMISSION_SALE_NOT_ABOVE_COST",
        )

    try:
        return _split(amounts)
    except InvalidOperation as e:
        raise DomainValidationError(
            "Los importes del servicio exceden la precisión de cálculo.",
            code="AMOUNT_OUT_OF_RANGE",
        ) from e


def _split(amounts: ServiceAmounts) -> CommissionBreakdown:
    sale, cost = amounts.sale_price, amounts.cost_price
    tax21, tax105, exempt = amounts.tax_21, amounts.tax_105, amounts.exempt

    margin = q(sale - cost)
    base21 = q(tax21 / RATE_21)
    base10_5 = q(tax105 / RATE_10_5)
    computed_taxable = q(base21 * FACTOR_21 + base10_5 * FACTOR_10_5)
    non_computable = q(cost - (exempt + computed_taxable))

    if non_computable < ZERO:
        raise DomainValidationError(
            "Las bases exentas y gravadas superan el costo del servicio.",
            code="COMMISSION_BASES_EXCEED_COST",
        )

    taxable_cost = q(cost - exempt)
    commission21 = commission10_5 = vat21 = vat10_5 = ZERO

    if tax21 + tax105 > ZERO:
        taxable_margin = q(margin * taxable_cost / cost)
        declared = tax21 + tax105
        gross21 = q(taxable_margin * tax21 / declared)
        gross10_5 = q(taxable_margin * tax105 / declared)
        commission21 = q(gross21 / FACTOR_21)
        commission10_5 = q(gross10_5 / FACTOR_10_5)
        vat21 = q(gross21 - commission21)
        vat10_5 = q(gross10_5 - commission10_5)
        commission_exempt = q(margin - taxable_margin)
    elif taxable_cost > ZERO:
        commission21 = q(margin / (FACTOR_21 + exempt / taxable_cost))
        gross21 = q(commission21 * FACTOR_21)
        vat21 = q(gross21 - commission21)
        commission_exempt = q(margin - gross21)
    else:
        commission_exempt = margin

    total = q(commission21 + commission10_5 + commission_exempt)

    return CommissionBreakdown(
        non_computable=non_computable,
        taxable_base_21=base21,
        taxable_base_10_5=base10_5,
        commission_exempt=commission_exempt,
        commission_21=commission21,
        commission_10_5=commission10_5,
        vat_on_commission_21=vat21,
        vat_on_commission_10_5=vat10_5,
        total_commission_without_vat=total,
    )


def transfer_fee(
    sale_price: Decimal,
    *,
    agency_pct: Decimal,
    service_pct: Optional[Decimal] = None,
    fee_amount: Optional[Decimal] = None,
) -> Decimal:
    """
    Costo bancario de un servicio: monto explícito si existe, si no
    venta x porcentaje (el del servicio o, en su defecto, el de la agencia).
    """
    if fee_amount is not None:
        return q(to_decimal(fee_amount))
    pct = to_decimal(service_pct) if service_pct is not None else to_decimal(agency_pct)
    return q(to_decimal(sale_price) * pct)


__all__ = [
    "ServiceAmounts",
    "CommissionBreakdown",
    "compute_commission",
    "transfer_fee",
    "to_decimal",
    "money",
    "q",
    "MONEY_MAX",
]
# Fin del archivo backend/app/modules/finance/commission.py

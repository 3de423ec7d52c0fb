# -*- coding: utf-8 -*-
"""
backend/app/modules/finance/schemas.py

Esquemas Pydantic del módulo de finanzas (resumen de reserva y preview
de comisión). Los importes viajan como número JSON con 2 decimales.

Autor: TurisCore
Fecha: 2026-09-06
"""

from __future__ import annotations

from decimal import Decimal
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer

from .commission import MONEY_MAX

# Decimal en memoria, número en JSON
MoneyOut = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]
# Importes de entrada: lo que entra en Numeric(18,2); los decimales de más se redondean al persistir
MoneyIn = Annotated[Decimal, Field(ge=-MONEY_MAX, le=MONEY_MAX)]


class CommissionPreviewRequest(BaseModel):
    """Servicio ad-hoc para calcular su comisión sin persistirlo."""

    sale_price: MoneyIn = Field(description="Precio de venta.")
    cost_price: MoneyIn = Field(description="Costo del operador.")
    tax_21: MoneyIn = Field(default=Decimal("0"), ge=0)
    tax_105: MoneyIn = Field(default=Decimal("0"), ge=0)
    exempt: MoneyIn = Field(default=Decimal("0"), ge=0)
    other_taxes: MoneyIn = Field(default=Decimal("0"), ge=0)
    currency: Optional[str] = Field(default=None, max_length=16)
    transfer_fee_pct: Optional[Decimal] = Field(default=None, ge=0, lt=1)
    transfer_fee_amount: Optional[MoneyIn] = Field(default=None, ge=0)


class CommissionBreakdownOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    non_computable: MoneyOut = Field(alias="nonComputable")
    taxable_base_21: MoneyOut = Field(alias="taxableBase21")
    taxable_base_10_5: MoneyOut = Field(alias="taxableBase10_5")
    commission_exempt: MoneyOut = Field(alias="commissionExempt")
    commission_21: MoneyOut = Field(alias="commission21")
    commission_10_5: MoneyOut = Field(alias="commission10_5")
    vat_on_commission_21: MoneyOut = Field(alias="vatOnCommission21")
    vat_on_commission_10_5: MoneyOut = Field(alias="vatOnCommission10_5")
    total_commission_without_vat: MoneyOut = Field(alias="totalCommissionWithoutVAT")


class CommissionPreviewResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    currency: str
    breakdown: CommissionBreakdownOut
    transfer_fees_amount: MoneyOut = Field(alias="transferFeesAmount")
    net_commission: MoneyOut = Field(alias="netCommission")


class CurrencyTotalsOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    sale_price: MoneyOut
    cost_price: MoneyOut
    tax_21: MoneyOut
    tax_105: MoneyOut
    exempt: MoneyOut
    other_taxes: MoneyOut
    taxable_card_interest: MoneyOut = Field(alias="taxableCardInterest")
    vat_on_card_interest: MoneyOut = Field(alias="vatOnCardInterest")
    card_interest_raw: MoneyOut = Field(alias="cardInterestRaw")
    non_computable: MoneyOut = Field(alias="nonComputable")
    taxable_base_21: MoneyOut = Field(alias="taxableBase21")
    taxable_base_10_5: MoneyOut = Field(alias="taxableBase10_5")
    commission_exempt: MoneyOut = Field(alias="commissionExempt")
    commission_21: MoneyOut = Field(alias="commission21")
    commission_10_5: MoneyOut = Field(alias="commission10_5")
    vat_on_commission_21: MoneyOut = Field(alias="vatOnCommission21")
    vat_on_commission_10_5: MoneyOut = Field(alias="vatOnCommission10_5")
    total_commission_without_vat: MoneyOut = Field(alias="totalCommissionWithoutVAT")
    extra_costs_amount: MoneyOut
    extra_taxes_amount: MoneyOut
    transfer_fees_amount: MoneyOut = Field(alias="transferFeesAmount")
    net_commission: MoneyOut = Field(alias="netCommission")
    services_count: int
    invalid_service_ids: list[int] = Field(default_factory=list)


class DebtSummaryOut(BaseModel):
    sales_with_interest: dict[str, MoneyOut]
    paid: dict[str, MoneyOut]
    debt: dict[str, MoneyOut]


class BookingSummaryResponse(BaseModel):
    booking_id: int
    totals: dict[str, CurrencyTotalsOut]
    debt: DebtSummaryOut


__all__ = [
    "MoneyOut",
    "MoneyIn",
    "CommissionPreviewRequest",
    "CommissionBreakdownOut",
    "CommissionPreviewResponse",
    "CurrencyTotalsOut",
    "DebtSummaryOut",
    "BookingSummaryResponse",
]

# -*- coding: utf-8 -*-
"""
backend/tests/modules/finance/test_commission.py

Descomposición de comisión:
- escenario declarado 1000/700 con IVA 21 % = 63
- conservación del margen (comisión con IVA == venta - costo)
- modo sin IVA declarado y caso totalmente exento
- rechazos por datos inconsistentes
- costo bancario (transfer fee)
"""

from decimal import Decimal

import pytest

from app.modules.finance.commission import (
    MONEY_MAX,
    ServiceAmounts,
    compute_commission,
    money,
    to_decimal,
    transfer_fee,
)
from app.shared.utils.http_exceptions import DomainValidationError

CENT = Decimal("0.01")


def _amounts(**values) -> ServiceAmounts:
    return ServiceAmounts.from_values(**values)


def test_declared_mode_scenario_1000_700_tax21_63():
    result = compute_commission(_amounts(sale_price=1000, cost_price=700, tax_21=63))

    assert result.taxable_base_21 == Decimal("300")
    assert result.non_computable == Decimal("337")
    assert result.commission_exempt == Decimal("0")
    assert result.commission_10_5 == Decimal("0")
    # 300 con IVA -> 247,93 + 52,07
    assert money(result.commission_21) == Decimal("247.93")
    assert money(result.vat_on_commission_21) == Decimal("52.07")
    assert abs(result.commission_21 * Decimal("1.21") - Decimal("300")) < CENT
    assert result.total_commission_without_vat == result.commission_21


@pytest.mark.parametrize(
    "values",
    [
        dict(sale_price=1000, cost_price=700, tax_21=63),
        dict(sale_price=1500, cost_price=1000, tax_21=50, tax_105=21, exempt=100),
        dict(sale_price="1234,56", cost_price="987.65", tax_21="10.5", tax_105="5.25", exempt="50"),
        dict(sale_price=100.1, cost_price=99.9, tax_105=2),
    ],
)
def test_declared_mode_conserves_margin(values):
    amounts = _amounts(**values)
    result = compute_commission(amounts)
    margin = amounts.sale_price - amounts.cost_price

    assert abs(result.gross_commission - margin) <= CENT
    assert result.total_commission_without_vat == (
        result.commission_exempt + result.commission_21 + result.commission_10_5
    )


def test_no_declared_tax_mode_solves_ratio():
    # taxable 600 : exempt 200 -> c21 / cex = 3 ; 1.21 c21 + cex = 300
    result = compute_commission(_amounts(sale_price=1100, cost_price=800, exempt=200))

    assert result.commission_10_5 == Decimal("0")
    ratio = result.commission_21 / result.commission_exempt
    assert abs(ratio - Decimal("3")) < Decimal("0.0001")
    gross = result.commission_21 * Decimal("1.21") + result.commission_exempt
    assert abs(gross - Decimal("300")) <= CENT


def test_no_declared_tax_fully_exempt_cost():
    result = compute_commission(_amounts(sale_price=500, cost_price=400, exempt=400))

    assert result.commission_exempt == Decimal("100")
    assert result.commission_21 == Decimal("0")
    assert result.vat_on_commission_21 == Decimal("0")


def test_no_tax_at_all_goes_to_21_bracket():
    result = compute_commission(_amounts(sale_price=1210, cost_price=1000))

    assert abs(result.commission_exempt) <= CENT
    assert money(result.commission_21) == Decimal("173.55")


@pytest.mark.parametrize("sale, cost", [(700, 700), (500, 700)])
def test_rejects_sale_not_above_cost(sale, cost):
    with pytest.raises(DomainValidationError) as exc:
        compute_commission(_amounts(sale_price=sale, cost_price=cost))
    assert exc.value.code == "COMMISSION_SALE_NOT_ABOVE_COST"


def test_rejects_bases_exceeding_cost():
    with pytest.raises(DomainValidationError) as exc:
        compute_commission(_amounts(sale_price=1000, cost_price=700, tax_21=210, exempt=100))
    assert exc.value.code == "COMMISSION_BASES_EXCEED_COST"


def test_as_dict_rounds_only_at_presentation():
    result = compute_commission(_amounts(sale_price=1000, cost_price=700, tax_21=63))
    raw = result.as_dict(rounded=False)
    rounded = result.as_dict()

    assert raw["commission21"] != rounded["commission21"]
    assert rounded["commission21"] == Decimal("247.93")
    assert set(rounded) == {
        "nonComputable",
        "taxableBase21",
        "taxableBase10_5",
        "commissionExempt",
        "commission21",
        "commission10_5",
        "vatOnCommission21",
        "vatOnCommission10_5",
        "totalCommissionWithoutVAT",
    }


def test_to_decimal_accepts_comma_and_rejects_garbage():
    assert to_decimal("12,5") == Decimal("12.5")
    assert to_decimal(None) == Decimal("0")
    assert to_decimal("  ") == Decimal("0")
    with pytest.raises(DomainValidationError):
        to_decimal("doce")
    with pytest.raises(DomainValidationError):
        to_decimal(True)


@pytest.mark.parametrize("raw", ["1e16", "-1e20", Decimal("1E30"), 10**17])
def test_to_decimal_rejects_amounts_outside_money_column(raw):
    with pytest.raises(DomainValidationError) as exc:
        to_decimal(raw)
    assert exc.value.code == "AMOUNT_OUT_OF_RANGE"


def test_to_decimal_accepts_money_column_limit_and_rejects_non_finite():
    assert to_decimal("9999999999999999.99") == MONEY_MAX
    assert to_decimal(-MONEY_MAX) == -MONEY_MAX
    for raw in ("Infinity", "NaN", Decimal("-Infinity")):
        with pytest.raises(DomainValidationError) as exc:
            to_decimal(raw)
        assert exc.value.code == "AMOUNT_INVALID"


def test_commission_beyond_working_precision_is_a_domain_error():
    amounts = ServiceAmounts(sale_price=Decimal("1E30"), cost_price=Decimal("1"))

    with pytest.raises(DomainValidationError) as exc:
        compute_commission(amounts)
    assert exc.value.code == "AMOUNT_OUT_OF_RANGE"


def test_commission_at_money_column_limit_is_computed():
    breakdown = compute_commission(_amounts(sale_price=MONEY_MAX, cost_price="1000"))

    assert abs(breakdown.gross_commission - (MONEY_MAX - Decimal("1000"))) <= CENT


def test_transfer_fee_precedence():
    sale = Decimal("1000")
    agency = Decimal("0.024")

    assert transfer_fee(sale, agency_pct=agency) == Decimal("24")
    assert transfer_fee(sale, agency_pct=agency, service_pct=Decimal("0.01")) == Decimal("10")
    assert transfer_fee(
        sale, agency_pct=agency, service_pct=Decimal("0.01"), fee_amount=Decimal("7.5")
    ) == Decimal("7.5")

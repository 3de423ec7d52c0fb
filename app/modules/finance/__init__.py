# -*- coding: utf-8 -*-
"""
backend/app/modules/finance/__init__.py

Cálculos financieros puros (moneda, comisión, totales por moneda, deuda)
y sus rutas de lectura.
"""

from .currency import normalize_currency
from .commission import ServiceAmounts, CommissionBreakdown, compute_commission
from .aggregator import CurrencyTotals, aggregate_by_currency

__all__ = [
    "normalize_currency",
    "ServiceAmounts",
    "CommissionBreakdown",
    "compute_commission",
    "CurrencyTotals",
    "aggregate_by_currency",
]

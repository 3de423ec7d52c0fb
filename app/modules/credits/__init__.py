# -*- coding: utf-8 -*-
"""
backend/app/modules/credits/__init__.py

Cuenta corriente: cuentas de crédito por titular y moneda, y su ledger
de movimientos con saldo consistente.
"""

from .models import CreditAccount, CreditEntry
from .services import CreditAccountService, CreditEntryService

__all__ = ["CreditAccount", "CreditEntry", "CreditAccountService", "CreditEntryService"]

# -*- coding: utf-8 -*-
"""
backend/app/modules/credits/enums.py

Enums y reglas de signo de la cuenta corriente (créditos a favor de
clientes y operadores).

El signo de un movimiento lo decide su doc_type:
- investment  -> -1 (pago a operador que consume saldo)
- receipt     -> +1
- adjust_up   -> +1
- adjust_down -> -1
- cualquier otro (incluido "manual") -> +1

Autor: TurisCore
Fecha: 2026-09-07
"""

from enum import Enum
from typing import Optional


class CreditSubjectType(str, Enum):
    """Titular de la cuenta: pax o operador (exactamente uno)."""
    CLIENT = "CLIENT"
    OPERATOR = "OPERATOR"


DEFAULT_DOC_TYPE = "manual"

DOC_SIGN: dict[str, int] = {
    "investment": -1,
    "receipt": 1,
    "adjust_up": 1,
    "adjust_down": -1,
}


def normalize_doc_type(doc_type: Optional[str]) -> str:
    return (doc_type or "").strip().lower()


def sign_for_doc_type(doc_type: Optional[str]) -> int:
    return DOC_SIGN.get(normalize_doc_type(doc_type), 1)


__all__ = [
    "CreditSubjectType",
    "DEFAULT_DOC_TYPE",
    "DOC_SIGN",
    "normalize_doc_type",
    "sign_for_doc_type",
]

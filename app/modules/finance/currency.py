# -*- coding: utf-8 -*-
"""
backend/app/modules/finance/currency.py

Normalización de monedas escritas a mano ("U$D", "AR$", "$", "usd ")
a códigos ISO 4217. Todo agrupamiento o presentación de importes pasa
por `normalize_currency`, porque los datos de origen son texto libre.

Regla:
1. tabla literal de abreviaturas locales
2. primer tramo de 3 letras, validado contra ISO 4217
3. cualquier otra cosa -> "ARS"

Autor: TurisCore
Fecha: 2026-09-06
"""

from __future__ import annotations

import re
from typing import Any, Optional

DEFAULT_CURRENCY = "ARS"

_LITERALS: dict[str, str] = {
    "U$D": "USD",
    "U$S": "USD",
    "US$": "USD",
    "USD$": "USD",
    "DOLAR": "USD",
    "DOLARES": "USD",
    "DÓLAR": "USD",
    "DÓLARES": "USD",
    "AR$": "ARS",
    "$": "ARS",
    "PES": "ARS",
    "PESO": "ARS",
    "PESOS": "ARS",
    "€": "EUR",
    "EURO": "EUR",
    "EUROS": "EUR",
    "R$": "BRL",
}

# ISO 4217 vigentes (incluye fondos y metales que algunos sistemas emiten)
ISO_4217_CODES: frozenset[str] = frozenset("""
AED AFN ALL AMD ANG AOA ARS AUD AWG AZN BAM BBD BDT BGN BHD BIF BMD BND BOB
BOV BRL BSD BTN BWP BYN BZD CAD CDF CHE CHF CHW CLF CLP CNY COP COU CRC CUC
CUP CVE CZK DJF DKK DOP DZD EGP ERN ETB EUR FJD FKP GBP GEL GHS GIP GMD GNF
GTQ GYD HKD HNL HTG HUF IDR ILS INR IQD IRR ISK JMD JOD JPY KES KGS KHR KMF
KPW KRW KWD KYD KZT LAK LBP LKR LRD LSL LYD MAD MDL MGA MKD MMK MNT MOP MRU
MUR MVR MWK MXN MXV MYR MZN NAD NGN NIO NOK NPR NZD OMR PAB PEN PGK PHP PKR
PLN PYG QAR RON RSD RUB RWF SAR SBD SCR SDG SEK SGD SHP SLE SLL SOS SRD SSP
STN SVC SYP SZL THB TJS TMT TND TOP TRY TTD TWD TZS UAH UGX USD USN UYI UYU
UYW UZS VED VES VND VUV WST XAF XAG XAU XBA XBB XBC XBD XCD XDR XOF XPD XPF
XPT XSU XUA YER ZAR ZMW ZWL
""".split())

_THREE_LETTERS = re.compile(r"[A-Z]{3}")


def resolve_currency(token: Any) -> Optional[str]:
    """Código ISO 4217 reconocido en `token`, o None si no se reconoce."""
    if token is None:
        return None
    raw = str(token).strip().upper()
    if not raw:
        return None

    literal = _LITERALS.get(raw)
    if literal:
        return literal

    match = _THREE_LETTERS.search(raw)
    if match and match.group(0) in ISO_4217_CODES:
        return match.group(0)
    return None


def normalize_currency(token: Any) -> str:
    """
    Devuelve el código ISO 4217 más probable para `token` ("ARS" si no
    se reconoce).

    >>> normalize_currency("U$D")
    'USD'
    >>> normalize_currency(" usd ")
    'USD'
    >>> normalize_currency("???")
    'ARS'
    """
    return resolve_currency(token) or DEFAULT_CURRENCY


def is_iso_currency(code: Any) -> bool:
    return isinstance(code, str) and code.strip().upper() in ISO_4217_CODES


__all__ = ["DEFAULT_CURRENCY", "ISO_4217_CODES", "resolve_currency", "normalize_currency", "is_iso_currency"]
# Fin del archivo backend/app/modules/finance/currency.py

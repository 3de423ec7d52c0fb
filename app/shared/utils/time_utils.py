# -*- coding: utf-8 -*-
"""
backend/app/shared/utils/time_utils.py

Helpers de fecha/hora. Todo timestamp persistido es UTC; las fechas de
negocio (vencimientos, fecha valor) son `date` sin hora.

Autor: TurisCore
Fecha: 2026-09-05
"""

from __future__ import annotations

import re
from datetime import date, datetime, timezone
from typing import Optional

_YMD_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def parse_ymd(value: Optional[str]) -> Optional[date]:
    """
    Parsea 'YYYY-MM-DD' estricto. Devuelve None si el formato o la fecha
    no son válidos (p.ej. '2026-02-30').
    """
    if not isinstance(value, str):
        return None
    raw = value.strip()
    if not _YMD_RE.match(raw):
        return None
    try:
        return date.fromisoformat(raw)
    except ValueError:
        return None


def parse_date_loose(value: Optional[str]) -> Optional[date]:
    """
    Acepta 'YYYY-MM-DD' o un datetime ISO-8601 (se toma la fecha).
    """
    parsed = parse_ymd(value)
    if parsed is not None or not isinstance(value, str) or not value.strip():
        return parsed
    raw = value.strip()
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(raw).date()
    except ValueError:
        return None


def to_ymd(value: Optional[date]) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, datetime):
        value = value.date()
    return value.isoformat()


__all__ = ["utcnow", "parse_ymd", "parse_date_loose", "to_ymd"]
# Fin del archivo backend/app/shared/utils/time_utils.py

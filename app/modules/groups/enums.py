# -*- coding: utf-8 -*-
"""
backend/app/modules/groups/enums.py

Enums de grupales (viajes grupales): tipo, estado y destino de plantillas.

Autor: TurisCore
Fecha: 2026-09-08
"""

from enum import Enum
from typing import Optional


class TravelGroupType(str, Enum):
    AGENCIA = "AGENCIA"
    ESTUDIANTIL = "ESTUDIANTIL"
    PRECOMPRADO = "PRECOMPRADO"


class TravelGroupStatus(str, Enum):
    """Ciclo de vida: BORRADOR → PUBLICADA → CONFIRMADA → CERRADA (o CANCELADA)."""
    BORRADOR = "BORRADOR"
    PUBLICADA = "PUBLICADA"
    CONFIRMADA = "CONFIRMADA"
    CERRADA = "CERRADA"
    CANCELADA = "CANCELADA"


# Estados en los que la grupal ya no admite planes ni cobros masivos
LOCKED_GROUP_STATUSES = frozenset({TravelGroupStatus.CERRADA.value, TravelGroupStatus.CANCELADA.value})


def is_locked_group_status(status: Optional[str]) -> bool:
    return (status or "").strip().upper() in LOCKED_GROUP_STATUSES


def normalize_group_type(value: Optional[str]) -> Optional[str]:
    """'estudiantil' / ' Agencia ' → valor del enum; None si no matchea."""
    raw = (value or "").strip().upper()
    if not raw:
        return None
    try:
        return TravelGroupType(raw).value
    except ValueError:
        return None


__all__ = [
    "TravelGroupType",
    "TravelGroupStatus",
    "LOCKED_GROUP_STATUSES",
    "is_locked_group_status",
    "normalize_group_type",
]

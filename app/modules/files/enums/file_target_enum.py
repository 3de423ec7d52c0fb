# -*- coding: utf-8 -*-
"""
backend/app/modules/files/enums/file_target_enum.py

Destino de un archivo: exactamente uno entre reserva, pax o servicio.

Un archivo de pax puede llevar además la reserva como contexto; uno de
servicio no admite otro destino.

Autor: TurisCore
Fecha: 2026-09-10
"""

from enum import Enum


class FileTarget(str, Enum):
    BOOKING = "booking"
    CLIENT = "client"
    SERVICE = "service"


# Tipos MIME aceptados para subir
ALLOWED_FILE_MIME: frozenset[str] = frozenset({
    "application/pdf",
    "image/jpeg",
    "image/png",
    "image/webp",
})


__all__ = ["FileTarget", "ALLOWED_FILE_MIME"]

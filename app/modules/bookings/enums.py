# -*- coding: utf-8 -*-
"""
backend/app/modules/bookings/enums.py

Enums de reservas y cuotas de clientes.

Autor: TurisCore
Fecha: 2026-09-05
"""

from enum import Enum


class ClientPaymentStatus(str, Enum):
    """Estado de una cuota (ClientPayment)."""
    PENDIENTE = "PENDIENTE"
    PAGADA = "PAGADA"
    CANCELADA = "CANCELADA"


class ClientPaymentAuditAction(str, Enum):
    CREATED = "CREATED"
    STATUS_CHANGED = "STATUS_CHANGED"


# Estado de reserva que bloquea cambios salvo para administración
BOOKING_STATUS_BLOCKED = "bloqueada"


__all__ = [
    "ClientPaymentStatus",
    "ClientPaymentAuditAction",
    "BOOKING_STATUS_BLOCKED",
]

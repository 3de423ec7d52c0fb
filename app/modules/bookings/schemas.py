# -*- coding: utf-8 -*-
"""
backend/app/modules/bookings/schemas.py

Esquemas Pydantic de cuotas individuales de clientes.

Autor: TurisCore
Fecha: 2026-09-21
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.modules.finance.schemas import MoneyIn, MoneyOut


class _RequestModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class ClientPaymentCreateRequest(_RequestModel):
    """
    Alta de N cuotas para (reserva, cliente).

    Con `amounts` cada cuota lleva su importe y la suma debe coincidir
    con `amount`; sin `amounts` el total se reparte en `count` cuotas
    iguales al centavo. Siempre una fecha por cuota en `due_dates`.
    """

    booking_id: int = Field(alias="bookingId", gt=0)
    client_id: int = Field(alias="clientId", gt=0)
    service_id: Optional[int] = Field(default=None, alias="serviceId", gt=0)
    amount: Optional[MoneyIn] = None
    currency: Optional[str] = Field(default=None, max_length=16)
    count: int = Field(default=1, ge=1, le=60)
    amounts: Optional[list[MoneyIn]] = Field(default=None, max_length=60)
    due_dates: list[Any] = Field(default_factory=list, alias="dueDates", max_length=60)


class ClientPaymentSettleRequest(_RequestModel):
    payment_ids: Optional[list[Any]] = Field(default=None, alias="paymentIds")
    receipt_id: Optional[int] = Field(default=None, alias="receiptId")
    reason: Optional[str] = Field(default=None, max_length=255)


class ClientPaymentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id_client_payment: int
    agency_client_payment_id: Optional[int] = None
    booking_id: int
    client_id: int
    service_id: Optional[int] = None
    amount: MoneyOut
    currency: str
    due_date: date
    status: str
    derived_status: str
    is_overdue: bool
    status_reason: Optional[str] = None
    paid_at: Optional[datetime] = None
    paid_by: Optional[int] = None
    receipt_id: Optional[int] = None
    created_by: Optional[int] = None
    created_at: datetime


class ClientPaymentListResponse(BaseModel):
    payments: list[ClientPaymentOut]


class ClientPaymentSettleResponse(BaseModel):
    receipt_id: int
    settled_count: int
    payments: list[ClientPaymentOut]


__all__ = [
    "ClientPaymentCreateRequest",
    "ClientPaymentSettleRequest",
    "ClientPaymentOut",
    "ClientPaymentListResponse",
    "ClientPaymentSettleResponse",
]
# Fin del archivo backend/app/modules/bookings/schemas.py

# -*- coding: utf-8 -*-
"""
backend/app/modules/bookings/routes.py

Rutas de cuotas individuales de clientes.

Endpoints:
- GET  /client-payments?bookingId=   cuotas de una reserva
- POST /client-payments              alta de N cuotas (reserva, cliente)
- GET  /client-payments/{id}         detalle
- POST /client-payments/settle       liquidación contra un recibo

Autor: TurisCore
Fecha: 2026-09-21
"""

from __future__ import annotations

from typing import Iterable

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.auth_context import AuthContext, get_auth_context
from app.shared.database.database import get_async_session

from .models import ClientPayment
from .schemas import (
    ClientPaymentCreateRequest,
    ClientPaymentListResponse,
    ClientPaymentOut,
    ClientPaymentSettleRequest,
    ClientPaymentSettleResponse,
)
from .services import ClientPaymentService, derived_status

router = APIRouter(prefix="/client-payments", tags=["client-payments"])

_DERIVED_FIELDS = {"derived_status", "is_overdue"}


def get_client_payment_service() -> ClientPaymentService:
    return ClientPaymentService()


def _out(payment: ClientPayment) -> ClientPaymentOut:
    shown, overdue = derived_status(payment)
    data = {name: getattr(payment, name) for name in ClientPaymentOut.model_fields if name not in _DERIVED_FIELDS}
    return ClientPaymentOut(**data, derived_status=shown, is_overdue=overdue)


def _out_list(payments: Iterable[ClientPayment]) -> list[ClientPaymentOut]:
    return [_out(p) for p in payments]


@router.get("", response_model=ClientPaymentListResponse, summary="Cuotas de una reserva")
async def list_payments(
    booking_id: int = Query(..., alias="bookingId", gt=0),
    session: AsyncSession = Depends(get_async_session),
    auth: AuthContext = Depends(get_auth_context),
    service: ClientPaymentService = Depends(get_client_payment_service),
) -> ClientPaymentListResponse:
    payments = await service.list_for_booking(session, auth, booking_id)
    return ClientPaymentListResponse(payments=_out_list(payments))


@router.post(
    "",
    response_model=ClientPaymentListResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Crear cuotas",
)
async def create_payments(
    payload: ClientPaymentCreateRequest,
    session: AsyncSession = Depends(get_async_session),
    auth: AuthContext = Depends(get_auth_context),
    service: ClientPaymentService = Depends(get_client_payment_service),
) -> ClientPaymentListResponse:
    payments = await service.create_payments(session, auth, payload)
    return ClientPaymentListResponse(payments=_out_list(payments))


@router.post("/settle", response_model=ClientPaymentSettleResponse, summary="Liquidar cuotas con un recibo")
async def settle_payments(
    payload: ClientPaymentSettleRequest,
    session: AsyncSession = Depends(get_async_session),
    auth: AuthContext = Depends(get_auth_context),
    service: ClientPaymentService = Depends(get_client_payment_service),
) -> ClientPaymentSettleResponse:
    result = await service.settle(session, auth, payload)
    return ClientPaymentSettleResponse(
        receipt_id=result.receipt.id_receipt,
        settled_count=len(result.payments),
        payments=_out_list(result.payments),
    )


@router.get("/{payment_id}", response_model=ClientPaymentOut, summary="Detalle de cuota")
async def get_payment(
    payment_id: int = Path(..., gt=0),
    session: AsyncSession = Depends(get_async_session),
    auth: AuthContext = Depends(get_auth_context),
    service: ClientPaymentService = Depends(get_client_payment_service),
) -> ClientPaymentOut:
    return _out(await service.get_payment(session, auth, payment_id))


__all__ = ["router"]
# Fin del archivo backend/app/modules/bookings/routes.py

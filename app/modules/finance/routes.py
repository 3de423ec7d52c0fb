# -*- coding: utf-8 -*-
"""
backend/app/modules/finance/routes.py

Rutas de finanzas.

Endpoints:
- GET  /finance/bookings/{booking_id}/summary  totales por moneda + deuda
- POST /finance/commission/preview             comisión de un servicio ad-hoc

Autor: TurisCore
Fecha: 2026-09-06
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.auth_context import AuthContext, get_auth_context
from app.shared.config import settings
from app.shared.database.database import get_async_session
from app.shared.utils.http_exceptions import BadRequestException, DomainValidationError

from .commission import ServiceAmounts, money
from .schemas import (
    BookingSummaryResponse,
    CommissionBreakdownOut,
    CommissionPreviewRequest,
    CommissionPreviewResponse,
    CurrencyTotalsOut,
    DebtSummaryOut,
)
from .services import FinanceService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/finance", tags=["finance"])


@router.get(
    "/bookings/{booking_id}/summary",
    response_model=BookingSummaryResponse,
    summary="Resumen financiero de una reserva",
    description=(
        "Totales por moneda de los servicios (comisiones, IVA, costos bancarios) "
        "y deuda: venta con interés menos lo cobrado. Sin conversión entre monedas."
    ),
)
async def booking_summary(
    booking_id: int = Path(..., gt=0),
    session: AsyncSession = Depends(get_async_session),
    auth: AuthContext = Depends(get_auth_context),
) -> BookingSummaryResponse:
    summary = await FinanceService().booking_summary(
        session,
        booking_id=booking_id,
        id_agency=auth.id_agency,
        agency_transfer_fee_pct=settings.agency_transfer_fee_pct,
    )
    return BookingSummaryResponse(
        booking_id=summary.booking_id,
        totals={
            cur: CurrencyTotalsOut.model_validate(totals.as_dict())
            for cur, totals in sorted(summary.totals.items())
        },
        debt=DebtSummaryOut.model_validate(summary.debt.as_dict()),
    )


@router.post(
    "/commission/preview",
    response_model=CommissionPreviewResponse,
    summary="Calcular comisión de un servicio",
)
async def commission_preview(
    payload: CommissionPreviewRequest,
    auth: AuthContext = Depends(get_auth_context),
) -> CommissionPreviewResponse:
    try:
        amounts = ServiceAmounts.from_values(**payload.model_dump())
        preview = FinanceService.commission_preview(
            amounts,
            currency=payload.currency,
            agency_transfer_fee_pct=settings.agency_transfer_fee_pct,
            transfer_fee_pct=payload.transfer_fee_pct,
            transfer_fee_amount=payload.transfer_fee_amount,
        )
    except DomainValidationError as e:
        raise BadRequestException(
            str(e),
            code=e.code,
            solution="Revisá venta, costo e impuestos declarados del servicio.",
        )

    return CommissionPreviewResponse(
        currency=preview.currency,
        breakdown=CommissionBreakdownOut.model_validate(preview.breakdown.as_dict()),
        transfer_fees_amount=money(preview.transfer_fees_amount),
        net_commission=money(preview.net_commission),
    )

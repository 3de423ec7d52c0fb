# -*- coding: utf-8 -*-
"""
backend/app/modules/finance/services.py

Servicio de lectura financiera: resumen por moneda de una reserva
(totales de servicios + deuda) y preview de comisión de un servicio.

Solo lectura: no abre unidades de trabajo.

Autor: TurisCore
Fecha: 2026-09-06
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.bookings.models import Booking
from app.modules.bookings.repositories import (
    BookingRepository,
    ReceiptRepository,
    ServiceRepository,
)
from app.shared.utils.http_exceptions import ForbiddenException, NotFoundException
from .aggregator import CurrencyTotals, aggregate_by_currency
from .commission import CommissionBreakdown, ServiceAmounts, compute_commission, transfer_fee
from .currency import normalize_currency
from .debt_summary import DebtSummary, build_debt_summary

logger = logging.getLogger(__name__)


@dataclass
class BookingFinanceSummary:
    booking_id: int
    totals: dict[str, CurrencyTotals]
    debt: DebtSummary


@dataclass
class CommissionPreview:
    currency: str
    breakdown: CommissionBreakdown
    transfer_fees_amount: Decimal

    @property
    def net_commission(self) -> Decimal:
        return self.breakdown.total_commission_without_vat - self.transfer_fees_amount


class FinanceService:
    def __init__(
        self,
        bookings: Optional[BookingRepository] = None,
        services: Optional[ServiceRepository] = None,
        receipts: Optional[ReceiptRepository] = None,
    ):
        self.bookings = bookings or BookingRepository()
        self.services = services or ServiceRepository()
        self.receipts = receipts or ReceiptRepository()

    async def get_booking_for_agency(self, session: AsyncSession, booking_id: int, id_agency: int) -> Booking:
        booking = await self.bookings.get(session, booking_id)
        if booking is None:
            raise NotFoundException("Reserva no encontrada.", code="BOOKING_NOT_FOUND")
        if booking.id_agency != id_agency:
            raise ForbiddenException("La reserva pertenece a otra agencia.", code="BOOKING_FORBIDDEN")
        return booking

    async def booking_summary(
        self,
        session: AsyncSession,
        *,
        booking_id: int,
        id_agency: int,
        agency_transfer_fee_pct: Decimal,
    ) -> BookingFinanceSummary:
        booking = await self.get_booking_for_agency(session, booking_id, id_agency)
        services = await self.services.list_for_booking(session, booking.id_booking)
        receipts = await self.receipts.list_for_booking(session, booking.id_booking)

        totals = aggregate_by_currency(services, agency_transfer_fee_pct)
        debt = build_debt_summary(services, receipts)
        logger.debug(
            "Booking summary: booking=%s services=%d receipts=%d currencies=%s",
            booking.id_booking, len(services), len(receipts), sorted(totals),
        )
        return BookingFinanceSummary(booking_id=booking.id_booking, totals=totals, debt=debt)

    @staticmethod
    def commission_preview(
        amounts: ServiceAmounts,
        *,
        currency: Optional[str],
        agency_transfer_fee_pct: Decimal,
        transfer_fee_pct: Optional[Decimal] = None,
        transfer_fee_amount: Optional[Decimal] = None,
    ) -> CommissionPreview:
        breakdown = compute_commission(amounts)
        fee = transfer_fee(
            amounts.sale_price,
            agency_pct=agency_transfer_fee_pct,
            service_pct=transfer_fee_pct,
            fee_amount=transfer_fee_amount,
        )
        return CommissionPreview(
            currency=normalize_currency(currency),
            breakdown=breakdown,
            transfer_fees_amount=fee,
        )


__all__ = ["FinanceService", "BookingFinanceSummary", "CommissionPreview"]
# Fin del archivo backend/app/modules/finance/services.py

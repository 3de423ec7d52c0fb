# -*- coding: utf-8 -*-
"""
backend/app/modules/bookings/repositories.py

Repositorios de reservas, servicios, recibos y cuotas.

Todas las búsquedas de negocio filtran por id_agency: una fila de otra
agencia se comporta como inexistente.

Autor: TurisCore
Fecha: 2026-09-05
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional, Sequence

from sqlalchemy import select, tuple_
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.database.repository import BaseRepository
from .enums import ClientPaymentStatus
from .models import (
    Booking,
    Client,
    ClientPayment,
    ClientPaymentAudit,
    Operator,
    Receipt,
    Service,
)

logger = logging.getLogger(__name__)


class BookingRepository(BaseRepository[Booking]):
    def __init__(self) -> None:
        super().__init__(Booking)

    async def list_by_ids(
        self,
        session: AsyncSession,
        id_agency: int,
        booking_ids: Iterable[int],
    ) -> Sequence[Booking]:
        ids = list(set(booking_ids))
        if not ids:
            return []
        stmt = select(Booking).where(Booking.id_agency == id_agency, Booking.id_booking.in_(ids))
        return (await session.execute(stmt)).scalars().all()


class ClientRepository(BaseRepository[Client]):
    def __init__(self) -> None:
        super().__init__(Client)


class OperatorRepository(BaseRepository[Operator]):
    def __init__(self) -> None:
        super().__init__(Operator)


class ServiceRepository(BaseRepository[Service]):
    def __init__(self) -> None:
        super().__init__(Service)

    async def list_for_booking(self, session: AsyncSession, booking_id: int) -> Sequence[Service]:
        stmt = select(Service).where(Service.booking_id == booking_id).order_by(Service.id_service)
        return (await session.execute(stmt)).scalars().all()

    async def list_by_ids(
        self,
        session: AsyncSession,
        id_agency: int,
        service_ids: Iterable[int],
    ) -> Sequence[Service]:
        ids = list(set(service_ids))
        if not ids:
            return []
        stmt = select(Service).where(Service.id_agency == id_agency, Service.id_service.in_(ids))
        return (await session.execute(stmt)).scalars().all()


class ReceiptRepository(BaseRepository[Receipt]):
    def __init__(self) -> None:
        super().__init__(Receipt)

    async def list_for_booking(self, session: AsyncSession, booking_id: int) -> Sequence[Receipt]:
        stmt = select(Receipt).where(Receipt.booking_id == booking_id).order_by(Receipt.id_receipt)
        return (await session.execute(stmt)).scalars().all()


class ClientPaymentRepository(BaseRepository[ClientPayment]):
    """Cuotas + su bitácora de auditoría."""

    def __init__(self) -> None:
        super().__init__(ClientPayment)

    async def list_by_ids(
        self,
        session: AsyncSession,
        id_agency: int,
        payment_ids: Iterable[int],
        *,
        for_update: bool = False,
    ) -> Sequence[ClientPayment]:
        ids = list(set(payment_ids))
        if not ids:
            return []
        stmt = (
            select(ClientPayment)
            .where(ClientPayment.id_agency == id_agency, ClientPayment.id_client_payment.in_(ids))
            .order_by(ClientPayment.id_client_payment)
        )
        if for_update:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)
        return (await session.execute(stmt)).scalars().all()

    async def list_for_booking(
        self,
        session: AsyncSession,
        id_agency: int,
        booking_id: int,
    ) -> Sequence[ClientPayment]:
        stmt = (
            select(ClientPayment)
            .where(ClientPayment.id_agency == id_agency, ClientPayment.booking_id == booking_id)
            .order_by(ClientPayment.due_date, ClientPayment.id_client_payment)
        )
        return (await session.execute(stmt)).scalars().all()

    async def list_pending_for_pairs(
        self,
        session: AsyncSession,
        id_agency: int,
        pairs: Iterable[tuple[int, int]],
    ) -> Sequence[ClientPayment]:
        """Cuotas PENDIENTE de los pares (booking_id, client_id) indicados."""
        pair_list = sorted(set(pairs))
        if not pair_list:
            return []
        stmt = (
            select(ClientPayment)
            .where(
                ClientPayment.id_agency == id_agency,
                ClientPayment.status == ClientPaymentStatus.PENDIENTE.value,
                tuple_(ClientPayment.booking_id, ClientPayment.client_id).in_(pair_list),
            )
            .order_by(ClientPayment.due_date, ClientPayment.id_client_payment)
        )
        return (await session.execute(stmt)).scalars().all()

    async def add_audit(
        self,
        session: AsyncSession,
        payment: ClientPayment,
        *,
        action: str,
        from_status: Optional[str],
        to_status: Optional[str],
        reason: Optional[str],
        changed_by: Optional[int],
        data: Optional[dict[str, Any]] = None,
    ) -> ClientPaymentAudit:
        audit = ClientPaymentAudit(
            client_payment_id=payment.id_client_payment,
            id_agency=payment.id_agency,
            action=action,
            from_status=from_status,
            to_status=to_status,
            reason=reason,
            changed_by=changed_by,
            data=data,
        )
        session.add(audit)
        return audit


__all__ = [
    "BookingRepository",
    "ClientRepository",
    "OperatorRepository",
    "ServiceRepository",
    "ReceiptRepository",
    "ClientPaymentRepository",
]
# Fin del archivo backend/app/modules/bookings/repositories.py

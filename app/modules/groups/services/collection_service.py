# -*- coding: utf-8 -*-
"""
backend/app/modules/groups/services/collection_service.py

Cobro masivo de cuotas de una grupal.

Las cuotas se resuelven por id o por pasajeros (todas sus PENDIENTE).
Todas deben pertenecer a la grupal y estar PENDIENTE; si una sola no
cumple, se rechaza el lote completo.

Se agrupan en buckets por (reserva, cliente, moneda). Por bucket, en una
única transacción para todo el lote:
- opcionalmente un Recibo por la suma del bucket (unión de servicios)
- cada cuota → PAGADA con paid_at, paid_by, receipt_id
- un registro de auditoría por cuota

Autor: TurisCore
Fecha: 2026-09-08
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, time, timezone
from decimal import Decimal
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.bookings.enums import ClientPaymentAuditAction, ClientPaymentStatus
from app.modules.bookings.models import ClientPayment, Receipt
from app.modules.bookings.repositories import BookingRepository, ClientPaymentRepository
from app.modules.finance.commission import ZERO, money, to_decimal
from app.observability.collectors import group_payments_settled_total
from app.shared.auth_context import AuthContext
from app.shared.database import next_agency_counter, transactional
from app.shared.utils.http_exceptions import (
    BadRequestException,
    ConflictException,
    DomainValidationError,
    InternalServerException,
    NotFoundException,
)
from app.shared.utils.time_utils import parse_date_loose, utcnow

from ..repositories import TravelGroupPassengerRepository, TravelGroupRepository
from ..schemas import CollectRequest
from .common import distinct_positive_ints, load_group_for_write, to_positive_int

logger = logging.getLogger(__name__)

DEFAULT_AMOUNT_STRING = "COBRO MASIVO"
PAID_STATUS_REASON = "Cobro masivo de grupal"
PAID_AUDIT_REASON = "Cobro masivo grupal"

BucketKey = tuple[int, int, str]


@dataclass
class CollectionBucket:
    booking_id: int
    client_id: int
    currency: str
    payments: list[ClientPayment] = field(default_factory=list)
    receipt_id: Optional[int] = None

    @property
    def total(self) -> Decimal:
        return money(sum((p.amount for p in self.payments), ZERO))

    @property
    def service_ids(self) -> list[int]:
        return sorted({p.service_id for p in self.payments if p.service_id})

    @property
    def payment_ids(self) -> list[int]:
        return [p.id_client_payment for p in self.payments]


@dataclass
class CollectionResult:
    settled_count: int
    buckets: list[CollectionBucket]

    @property
    def receipts_count(self) -> int:
        return sum(1 for b in self.buckets if b.receipt_id is not None)


def bucket_payments(payments: list[ClientPayment]) -> list[CollectionBucket]:
    """
    Agrupa por (booking_id, client_id, MONEDA) preservando el orden de
    primera aparición.
    """
    buckets: dict[BucketKey, CollectionBucket] = {}
    for payment in payments:
        currency = (payment.currency or "").strip().upper()
        key = (payment.booking_id, payment.client_id, currency)
        bucket = buckets.get(key)
        if bucket is None:
            bucket = CollectionBucket(booking_id=payment.booking_id, client_id=payment.client_id, currency=currency)
            buckets[key] = bucket
        bucket.payments.append(payment)
    return list(buckets.values())


def _bad_request(message: str, code: str, solution: str) -> BadRequestException:
    return BadRequestException(message, code=code, solution=solution)


class CollectionService:
    """Cobro masivo por buckets."""

    def __init__(
        self,
        groups: Optional[TravelGroupRepository] = None,
        passengers: Optional[TravelGroupPassengerRepository] = None,
        bookings: Optional[BookingRepository] = None,
        payments: Optional[ClientPaymentRepository] = None,
    ):
        self.groups = groups or TravelGroupRepository()
        self.passengers = passengers or TravelGroupPassengerRepository()
        self.bookings = bookings or BookingRepository()
        self.payments = payments or ClientPaymentRepository()

    async def _resolve_payment_ids(
        self,
        session: AsyncSession,
        ctx: AuthContext,
        group_id: int,
        payload: CollectRequest,
    ) -> list[int]:
        payment_ids = distinct_positive_ints(payload.payment_ids)
        if payment_ids:
            return payment_ids

        passenger_ids = distinct_positive_ints(payload.passenger_ids)
        if not passenger_ids:
            return []

        passengers = await self.passengers.list_for_group(
            session, id_agency=ctx.id_agency, group_id=group_id, passenger_ids=passenger_ids
        )
        if not passengers:
            raise _bad_request(
                "No se encontraron pasajeros válidos para cobrar.",
                "GROUP_COLLECT_PASSENGERS_INVALID",
                "Seleccioná pasajeros de esta grupal y volvé a intentar.",
            )
        pairs = [(p.booking_id, p.client_id) for p in passengers if p.has_target]
        if not pairs:
            raise _bad_request(
                "Los pasajeros seleccionados no tienen pagos asociables.",
                "GROUP_COLLECT_NO_ASSOCIATED_PAYMENTS",
                "Verificá que tengan reservas y cuotas pendientes.",
            )
        pending = await self.payments.list_pending_for_pairs(session, ctx.id_agency, pairs)
        return [p.id_client_payment for p in pending]

    async def collect(
        self,
        session: AsyncSession,
        ctx: AuthContext,
        group_id: int,
        payload: CollectRequest,
    ) -> CollectionResult:
        group = await load_group_for_write(
            session,
            ctx,
            group_id,
            forbidden_message="No tenés permisos para cobrar en lote.",
            forbidden_code="GROUP_COLLECT_FORBIDDEN",
            locked_message="No se pueden cobrar pagos en grupales cerradas o canceladas.",
            locked_solution="Cambiá el estado de la grupal antes de cobrar.",
            groups=self.groups,
        )

        paid_at: datetime = utcnow()
        if payload.issue_date is not None and payload.issue_date.strip():
            issue = parse_date_loose(payload.issue_date)
            if issue is None:
                raise _bad_request(
                    "La fecha de emisión es inválida.",
                    "GROUP_COLLECT_ISSUE_DATE_INVALID",
                    "Ingresá una fecha válida con formato AAAA-MM-DD.",
                )
            paid_at = datetime.combine(issue, time.min, tzinfo=timezone.utc)

        concept = (payload.concept or "").strip() or f"Cobro masivo grupal {group.name}"
        amount_string = (payload.amount_string or "").strip() or DEFAULT_AMOUNT_STRING

        payment_method_id = to_positive_int(payload.payment_method_id)
        if payload.create_receipts and payment_method_id is None:
            raise _bad_request(
                "Para emitir recibos masivos debés indicar un método de cobro.",
                "GROUP_COLLECT_METHOD_REQUIRED",
                "Elegí un método de pago y volvé a intentar.",
            )
        account_id = to_positive_int(payload.account_id)

        fee_amount: Optional[Decimal] = None
        if payload.payment_fee_amount not in (None, ""):
            try:
                fee_amount = to_decimal(payload.payment_fee_amount)
            except DomainValidationError:
                fee_amount = None
            if fee_amount is None or fee_amount < ZERO:
                raise _bad_request(
                    "El costo adicional del cobro es inválido.",
                    "GROUP_COLLECT_FEE_INVALID",
                    "Ingresá un valor numérico mayor o igual a 0.",
                )
            fee_amount = money(fee_amount)

        payment_ids = await self._resolve_payment_ids(session, ctx, group.id_travel_group, payload)
        if not payment_ids:
            raise _bad_request(
                "No encontramos cuotas pendientes para cobrar.",
                "GROUP_COLLECT_EMPTY",
                "Seleccioná pasajeros con cuotas pendientes o indicá pagos válidos.",
            )

        payments = list(await self.payments.list_by_ids(session, ctx.id_agency, payment_ids))
        if len(payments) != len(payment_ids):
            raise NotFoundException(
                "Alguno de los pagos seleccionados no existe.",
                code="GROUP_COLLECT_PAYMENT_NOT_FOUND",
                solution="Refrescá la pantalla y volvé a seleccionar los pagos.",
            )

        bookings = await self.bookings.list_by_ids(session, ctx.id_agency, {p.booking_id for p in payments})
        group_of_booking = {b.id_booking: b.travel_group_id for b in bookings}
        for payment in payments:
            if group_of_booking.get(payment.booking_id) != group.id_travel_group:
                raise _bad_request(
                    "Hay pagos que no pertenecen a la grupal indicada.",
                    "GROUP_COLLECT_PAYMENT_SCOPE_INVALID",
                    "Seleccioná únicamente pagos de esta grupal.",
                )
        for payment in payments:
            if payment.status != ClientPaymentStatus.PENDIENTE.value:
                raise ConflictException(
                    "Solo se pueden cobrar cuotas en estado pendiente.",
                    code="GROUP_COLLECT_PAYMENT_STATUS_INVALID",
                    solution="Quitá pagos ya cobrados o cancelados de la selección.",
                    details={"id_client_payment": payment.id_client_payment, "status": payment.status},
                )

        buckets = bucket_payments(payments)

        try:
            async with transactional(session):
                for bucket in buckets:
                    if payload.create_receipts:
                        agency_receipt_id = await next_agency_counter(session, ctx.id_agency, "receipt")
                        receipt = Receipt(
                            id_agency=ctx.id_agency,
                            agency_receipt_id=agency_receipt_id,
                            receipt_number=f"A{ctx.id_agency}-{agency_receipt_id}",
                            issue_date=paid_at,
                            booking_id=bucket.booking_id,
                            concept=concept,
                            amount=bucket.total,
                            amount_string=amount_string,
                            amount_currency=bucket.currency,
                            currency=bucket.currency,
                            payment_fee_amount=fee_amount,
                            payment_fee_currency=bucket.currency if fee_amount is not None else None,
                            payment_method_id=payment_method_id,
                            account_id=account_id,
                            service_ids=bucket.service_ids,
                            client_ids=[bucket.client_id],
                        )
                        session.add(receipt)
                        await session.flush()
                        bucket.receipt_id = receipt.id_receipt

                    for payment in bucket.payments:
                        previous = payment.status
                        payment.status = ClientPaymentStatus.PAGADA.value
                        payment.status_reason = PAID_STATUS_REASON
                        payment.paid_at = paid_at
                        payment.paid_by = ctx.id_user
                        payment.receipt_id = bucket.receipt_id
                        await self.payments.add_audit(
                            session,
                            payment,
                            action=ClientPaymentAuditAction.STATUS_CHANGED.value,
                            from_status=previous,
                            to_status=ClientPaymentStatus.PAGADA.value,
                            reason=PAID_AUDIT_REASON,
                            changed_by=ctx.id_user,
                            data={"group_id": group.id_travel_group, "receipt_id": bucket.receipt_id},
                        )
                await session.flush()
        except SQLAlchemyError:
            logger.exception("Group collect failed: agency=%s group=%s", ctx.id_agency, group_id)
            raise InternalServerException(
                "No pudimos cobrar los pagos en lote.",
                code="GROUP_COLLECT_ERROR",
            )

        result = CollectionResult(settled_count=len(payments), buckets=buckets)
        group_payments_settled_total.inc(result.settled_count)
        logger.info(
            "Group collect settled: agency=%s group=%s payments=%s buckets=%s receipts=%s",
            ctx.id_agency, group.id_travel_group, result.settled_count, len(buckets), result.receipts_count,
        )
        return result


__all__ = ["CollectionService", "CollectionResult", "CollectionBucket", "bucket_payments"]
# Fin del archivo backend/app/modules/groups/services/collection_service.py

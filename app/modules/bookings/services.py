# -*- coding: utf-8 -*-
"""
backend/app/modules/bookings/services.py

Cuotas individuales de clientes (fuera de grupales).

Alta: N cuotas PENDIENTE para (reserva, cliente), con importes
explícitos o reparto equitativo al centavo (el resto va a las primeras
cuotas). Una fecha de vencimiento por cuota.

Liquidación: un conjunto de cuotas PENDIENTE de la misma reserva,
cliente y moneda pasa a PAGADA contra un recibo ya emitido cuyo importe
coincide con la suma (sin sobrepagos).

Cada transición deja un registro en la bitácora de auditoría, en la
misma transacción que el cambio de estado.

Autor: TurisCore
Fecha: 2026-09-21
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Iterable, Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.finance.commission import MONEY_PLACES, ZERO, money
from app.modules.finance.currency import resolve_currency
from app.observability.collectors import client_payments_total
from app.shared.auth_context import AuthContext
from app.shared.database import next_agency_counter, transactional
from app.shared.permissions import Action, can
from app.shared.utils.http_exceptions import (
    BadRequestException,
    ConflictException,
    ForbiddenException,
    InternalServerException,
    NotFoundException,
)
from app.shared.utils.time_utils import parse_date_loose, utcnow

from .enums import BOOKING_STATUS_BLOCKED, ClientPaymentAuditAction, ClientPaymentStatus
from .models import Booking, ClientPayment, Receipt
from .repositories import (
    BookingRepository,
    ClientPaymentRepository,
    ClientRepository,
    ReceiptRepository,
    ServiceRepository,
)
from .schemas import ClientPaymentCreateRequest, ClientPaymentSettleRequest

logger = logging.getLogger(__name__)

CREATE_AUDIT_REASON = "Alta de cuota"
RECEIPT_AMOUNT_TOLERANCE = Decimal("0.009")
DERIVED_OVERDUE = "VENCIDA"


def _bad_request(message: str, code: str, solution: Optional[str] = None) -> BadRequestException:
    return BadRequestException(message, code=code, solution=solution)


def distinct_ids(values: Optional[Iterable[Any]]) -> list[int]:
    """Ids enteros > 0 sin duplicados, en orden de llegada; descarta el resto."""
    out: list[int] = []
    for raw in values or []:
        if isinstance(raw, bool):
            continue
        try:
            number = int(str(raw).strip())
        except ValueError:
            continue
        if number > 0 and number not in out:
            out.append(number)
    return out


def split_in_cents(total: Decimal, count: int) -> list[Decimal]:
    """Reparte `total` en `count` partes iguales; los centavos sobrantes van primero."""
    cents = int((money(total) / MONEY_PLACES).to_integral_value())
    base, remainder = divmod(cents, count)
    return [Decimal(base + (1 if i < remainder else 0)) * MONEY_PLACES for i in range(count)]


def derived_status(payment: ClientPayment, today: Optional[date] = None) -> tuple[str, bool]:
    """(estado mostrado, vencida): una PENDIENTE con vencimiento pasado se ve VENCIDA."""
    if payment.status != ClientPaymentStatus.PENDIENTE.value:
        return payment.status, False
    overdue = payment.due_date < (today or utcnow().date())
    return (DERIVED_OVERDUE if overdue else payment.status), overdue


@dataclass
class SettleResult:
    receipt: Receipt
    payments: list[ClientPayment]


class ClientPaymentService:
    """Alta, consulta y liquidación de cuotas de un cliente en una reserva."""

    def __init__(
        self,
        bookings: Optional[BookingRepository] = None,
        clients: Optional[ClientRepository] = None,
        services: Optional[ServiceRepository] = None,
        receipts: Optional[ReceiptRepository] = None,
        payments: Optional[ClientPaymentRepository] = None,
    ) -> None:
        self.bookings = bookings or BookingRepository()
        self.clients = clients or ClientRepository()
        self.services = services or ServiceRepository()
        self.receipts = receipts or ReceiptRepository()
        self.payments = payments or ClientPaymentRepository()

    # ------------------------------------------------------------------
    # Lectura
    # ------------------------------------------------------------------
    async def get_payment(self, session: AsyncSession, ctx: AuthContext, payment_id: int) -> ClientPayment:
        payment = await self.payments.get_for_agency(session, payment_id, ctx.id_agency)
        if payment is None:
            raise NotFoundException("Cuota no encontrada.", code="CLIENT_PAYMENT_NOT_FOUND")
        return payment

    async def list_for_booking(
        self,
        session: AsyncSession,
        ctx: AuthContext,
        booking_id: int,
    ) -> Sequence[ClientPayment]:
        await self._load_booking(session, ctx, booking_id)
        return await self.payments.list_for_booking(session, ctx.id_agency, booking_id)

    async def _load_booking(self, session: AsyncSession, ctx: AuthContext, booking_id: int) -> Booking:
        booking = await self.bookings.get_for_agency(session, booking_id, ctx.id_agency)
        if booking is None:
            raise NotFoundException(
                "Reserva no encontrada.",
                code="CLIENT_PAYMENT_BOOKING_NOT_FOUND",
                solution="Verificá que la reserva pertenezca a tu agencia.",
            )
        return booking

    # ------------------------------------------------------------------
    # Alta
    # ------------------------------------------------------------------
    @staticmethod
    def _amounts_for(payload: ClientPaymentCreateRequest) -> list[Decimal]:
        if payload.amount is None:
            raise _bad_request("El monto total es requerido.", "CLIENT_PAYMENT_AMOUNT_REQUIRED")
        total = money(payload.amount)

        if payload.amounts is not None:
            if not payload.amounts:
                raise _bad_request("No se enviaron montos por cuota.", "CLIENT_PAYMENT_AMOUNTS_INVALID")
            parts = [money(a) for a in payload.amounts]
            for index, part in enumerate(parts, start=1):
                if part <= ZERO:
                    raise _bad_request(
                        f"El monto de la cuota N°{index} debe ser mayor a 0.",
                        "CLIENT_PAYMENT_AMOUNTS_INVALID",
                    )
            # tolerancia: menos de 1 centavo
            if abs(sum(parts, ZERO) - total) >= MONEY_PLACES:
                raise _bad_request(
                    "La suma de los montos por cuota no coincide con el monto total.",
                    "CLIENT_PAYMENT_AMOUNTS_MISMATCH",
                    "Revisá los montos o el total informado.",
                )
            return parts

        if total <= ZERO:
            raise _bad_request("El monto total debe ser mayor a 0.", "CLIENT_PAYMENT_AMOUNT_INVALID")
        parts = split_in_cents(total, payload.count)
        if any(part <= ZERO for part in parts):
            raise _bad_request(
                "El monto total no alcanza para la cantidad de cuotas.",
                "CLIENT_PAYMENT_AMOUNT_INVALID",
                "Reducí la cantidad de cuotas.",
            )
        return parts

    @staticmethod
    def _due_dates_for(raw: list, count: int) -> list[date]:
        if len(raw) != count:
            raise _bad_request(
                "Debés enviar exactamente una fecha de vencimiento por cuota.",
                "CLIENT_PAYMENT_DUE_DATES_INVALID",
            )
        parsed: list[date] = []
        for index, value in enumerate(raw, start=1):
            due = parse_date_loose(value) if isinstance(value, str) else None
            if due is None:
                raise _bad_request(
                    f"La fecha de la cuota N°{index} es inválida.",
                    "CLIENT_PAYMENT_DUE_DATES_INVALID",
                    "Usá el formato YYYY-MM-DD.",
                )
            parsed.append(due)
        return parsed

    async def create_payments(
        self,
        session: AsyncSession,
        ctx: AuthContext,
        payload: ClientPaymentCreateRequest,
    ) -> list[ClientPayment]:
        if not can(ctx.role, Action.CLIENT_PAYMENTS_WRITE):
            raise ForbiddenException(
                "No tenés permisos para crear cuotas de clientes.",
                code="CLIENT_PAYMENT_FORBIDDEN",
            )

        currency = resolve_currency(payload.currency)
        if currency is None:
            raise _bad_request(
                "La moneda es requerida y debe ser un código válido.",
                "CLIENT_PAYMENT_CURRENCY_INVALID",
            )
        amounts = self._amounts_for(payload)
        due_dates = self._due_dates_for(payload.due_dates, len(amounts))

        booking = await self._load_booking(session, ctx, payload.booking_id)
        if (booking.status or "").strip().lower() == BOOKING_STATUS_BLOCKED and not can(
            ctx.role, Action.BOOKING_OVERRIDE_BLOCKED
        ):
            raise ForbiddenException(
                "La reserva está bloqueada.",
                code="CLIENT_PAYMENT_BOOKING_LOCKED",
                solution="Pedí a gerencia o administración que desbloquee la reserva.",
            )
        client = await self.clients.get_for_agency(session, payload.client_id, ctx.id_agency)
        if client is None:
            raise NotFoundException(
                "Cliente no encontrado.",
                code="CLIENT_PAYMENT_CLIENT_NOT_FOUND",
                solution="Verificá que el pax pertenezca a tu agencia.",
            )
        if payload.service_id is not None:
            service = await self.services.get_for_agency(session, payload.service_id, ctx.id_agency)
            if service is None or service.booking_id != booking.id_booking:
                raise _bad_request(
                    "El servicio no pertenece a la reserva indicada.",
                    "CLIENT_PAYMENT_SERVICE_SCOPE_INVALID",
                )

        created: list[ClientPayment] = []
        try:
            async with transactional(session):
                for amount, due_date in zip(amounts, due_dates):
                    payment = ClientPayment(
                        id_agency=ctx.id_agency,
                        agency_client_payment_id=await next_agency_counter(
                            session, ctx.id_agency, "client_payment"
                        ),
                        booking_id=booking.id_booking,
                        client_id=client.id_client,
                        service_id=payload.service_id,
                        amount=amount,
                        currency=currency,
                        due_date=due_date,
                        status=ClientPaymentStatus.PENDIENTE.value,
                        created_by=ctx.id_user,
                    )
                    session.add(payment)
                    await session.flush()
                    await self.payments.add_audit(
                        session,
                        payment,
                        action=ClientPaymentAuditAction.CREATED.value,
                        from_status=None,
                        to_status=ClientPaymentStatus.PENDIENTE.value,
                        reason=CREATE_AUDIT_REASON,
                        changed_by=ctx.id_user,
                        data={"installment": len(created) + 1, "of": len(amounts)},
                    )
                    created.append(payment)
                await session.flush()
        except SQLAlchemyError:
            logger.exception(
                "Client payment create failed: agency=%s booking=%s client=%s",
                ctx.id_agency, payload.booking_id, payload.client_id,
            )
            raise InternalServerException("No pudimos crear las cuotas.", code="CLIENT_PAYMENT_CREATE_ERROR")

        client_payments_total.labels(operation="create").inc(len(created))
        logger.info(
            "Client payments created: agency=%s booking=%s client=%s count=%s currency=%s",
            ctx.id_agency, booking.id_booking, client.id_client, len(created), currency,
        )
        return created

    # ------------------------------------------------------------------
    # Liquidación
    # ------------------------------------------------------------------
    async def _validate_receipt(
        self,
        session: AsyncSession,
        ctx: AuthContext,
        receipt_id: int,
        payments: Sequence[ClientPayment],
    ) -> Receipt:
        first = payments[0]
        receipt = await self.receipts.get(session, receipt_id)
        if receipt is None:
            raise NotFoundException("Recibo no encontrado.", code="CLIENT_PAYMENT_RECEIPT_NOT_FOUND")
        if receipt.id_agency != ctx.id_agency:
            raise ForbiddenException("Recibo fuera de tu agencia.", code="CLIENT_PAYMENT_RECEIPT_FORBIDDEN")
        if receipt.booking_id != first.booking_id:
            raise _bad_request(
                "El recibo debe estar asociado a la misma reserva de las cuotas.",
                "CLIENT_PAYMENT_RECEIPT_SCOPE_INVALID",
            )
        if receipt.client_ids and first.client_id not in receipt.client_ids:
            raise _bad_request(
                "El recibo no está asociado al pax de las cuotas seleccionadas.",
                "CLIENT_PAYMENT_RECEIPT_SCOPE_INVALID",
            )
        if (receipt.amount_currency or "").strip().upper() != first.currency:
            raise _bad_request(
                "La moneda del recibo no coincide con la de las cuotas.",
                "CLIENT_PAYMENT_RECEIPT_CURRENCY_MISMATCH",
            )
        total = sum((p.amount for p in payments), ZERO)
        if abs(total - receipt.amount) > RECEIPT_AMOUNT_TOLERANCE:
            raise _bad_request(
                "El monto del recibo debe coincidir con la suma de las cuotas seleccionadas (sin sobrepagos).",
                "CLIENT_PAYMENT_RECEIPT_AMOUNT_MISMATCH",
                "Seleccioná cuotas que sumen el importe del recibo.",
            )
        return receipt

    @staticmethod
    def _ensure_settleable(payments: Sequence[ClientPayment]) -> None:
        first = payments[0]
        for payment in payments:
            if payment.status != ClientPaymentStatus.PENDIENTE.value:
                raise ConflictException(
                    "Solo podés liquidar cuotas en estado pendiente.",
                    code="CLIENT_PAYMENT_STATUS_INVALID",
                    solution="Quitá de la selección las cuotas pagadas o canceladas.",
                    details={"id_client_payment": payment.id_client_payment, "status": payment.status},
                )
            if payment.booking_id != first.booking_id:
                raise _bad_request(
                    "Todas las cuotas deben pertenecer a la misma reserva.",
                    "CLIENT_PAYMENT_SETTLE_SCOPE_INVALID",
                )
            if payment.client_id != first.client_id:
                raise _bad_request(
                    "Todas las cuotas deben pertenecer al mismo pax.",
                    "CLIENT_PAYMENT_SETTLE_SCOPE_INVALID",
                )
            if payment.currency != first.currency:
                raise _bad_request(
                    "Todas las cuotas seleccionadas deben tener la misma moneda.",
                    "CLIENT_PAYMENT_SETTLE_CURRENCY_MISMATCH",
                )

    async def settle(
        self,
        session: AsyncSession,
        ctx: AuthContext,
        payload: ClientPaymentSettleRequest,
    ) -> SettleResult:
        if not can(ctx.role, Action.CLIENT_PAYMENTS_WRITE):
            raise ForbiddenException(
                "No tenés permisos para liquidar cuotas.",
                code="CLIENT_PAYMENT_FORBIDDEN",
            )
        payment_ids = distinct_ids(payload.payment_ids)
        if not payment_ids:
            raise _bad_request("No se enviaron cuotas válidas.", "CLIENT_PAYMENT_IDS_INVALID")
        if not payload.receipt_id or payload.receipt_id <= 0:
            raise _bad_request("El recibo es requerido.", "CLIENT_PAYMENT_RECEIPT_INVALID")

        payments = await self.payments.list_by_ids(session, ctx.id_agency, payment_ids)
        if len(payments) != len(payment_ids):
            raise NotFoundException(
                "Alguna de las cuotas no existe.",
                code="CLIENT_PAYMENT_NOT_FOUND",
                solution="Refrescá la pantalla y volvé a seleccionar las cuotas.",
            )
        self._ensure_settleable(payments)
        receipt = await self._validate_receipt(session, ctx, payload.receipt_id, payments)

        mode = "bulk" if len(payment_ids) > 1 else "single"
        note = (payload.reason or "").strip() or (
            f"Pago registrado con recibo N° {receipt.receipt_number} para {len(payment_ids)} cuota(s)"
        )
        paid_at = receipt.issue_date or utcnow()

        try:
            async with transactional(session):
                locked = await self.payments.list_by_ids(session, ctx.id_agency, payment_ids, for_update=True)
                # otra liquidación pudo ganar entre la validación y el lock
                self._ensure_settleable(locked)
                for payment in locked:
                    previous = payment.status
                    payment.status = ClientPaymentStatus.PAGADA.value
                    payment.status_reason = note[:255]
                    payment.paid_at = paid_at
                    payment.paid_by = ctx.id_user
                    payment.receipt_id = receipt.id_receipt
                    await self.payments.add_audit(
                        session,
                        payment,
                        action=ClientPaymentAuditAction.STATUS_CHANGED.value,
                        from_status=previous,
                        to_status=ClientPaymentStatus.PAGADA.value,
                        reason=note[:255],
                        changed_by=ctx.id_user,
                        data={"receipt_id": receipt.id_receipt, "mode": mode},
                    )
                await session.flush()
        except SQLAlchemyError:
            logger.exception("Client payment settle failed: agency=%s receipt=%s", ctx.id_agency, receipt.id_receipt)
            raise InternalServerException("No pudimos liquidar las cuotas.", code="CLIENT_PAYMENT_SETTLE_ERROR")

        client_payments_total.labels(operation="settle").inc(len(locked))
        logger.info(
            "Client payments settled: agency=%s receipt=%s payments=%s mode=%s",
            ctx.id_agency, receipt.id_receipt, len(locked), mode,
        )
        return SettleResult(receipt=receipt, payments=list(locked))


__all__ = ["ClientPaymentService", "SettleResult", "derived_status", "split_in_cents"]
# Fin del archivo backend/app/modules/bookings/services.py

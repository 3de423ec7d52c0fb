# -*- coding: utf-8 -*-
"""
backend/app/modules/groups/services/payment_plan_service.py

Generación masiva de planes de pago para pasajeros de una grupal.

Las cuotas salen de filas manuales o de una plantilla (excluyentes). En
plantillas, cada cuota se fecha como `fecha base + due_in_days`, con
fecha base = template_base_date, o start_date de la grupal, o hoy.

Por pasajero, dentro de UNA transacción:
1. si replace_pending: cada cuota PENDIENTE de (reserva, cliente) pasa a
   CANCELADA con su registro de auditoría (reemplazo total, no merge)
2. cada cuota del plan se inserta como PENDIENTE con su auditoría

Toda validación ocurre antes de escribir.

Autor: TurisCore
Fecha: 2026-09-08
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal
from typing import Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.bookings.enums import ClientPaymentAuditAction, ClientPaymentStatus
from app.modules.bookings.models import ClientPayment
from app.modules.bookings.repositories import (
    BookingRepository,
    ClientPaymentRepository,
    ServiceRepository,
)
from app.modules.finance.commission import ZERO, money, to_decimal
from app.modules.finance.currency import resolve_currency
from app.observability.collectors import group_installments_created_total
from app.shared.auth_context import AuthContext
from app.shared.database import next_agency_counter, transactional
from app.shared.permissions import Action, can
from app.shared.utils.http_exceptions import (
    BadRequestException,
    DomainValidationError,
    ForbiddenException,
    InternalServerException,
    NotFoundException,
)
from app.shared.utils.time_utils import parse_date_loose, utcnow

from ..models import TravelGroup, TravelGroupPassenger
from ..repositories import PaymentTemplateRepository, TravelGroupPassengerRepository, TravelGroupRepository
from ..schemas import InstallmentIn, PaymentPlanRequest
from .common import distinct_positive_ints, load_group_for_write, parse_template_installments

logger = logging.getLogger(__name__)

CANCEL_STATUS_REASON = "Reemplazada por plan masivo de grupal"
CANCEL_AUDIT_REASON = "Reemplazada por plan masivo"
CREATE_AUDIT_REASON = "Plan masivo de grupal"


@dataclass(frozen=True)
class PlannedInstallment:
    due_date: date
    amount: Decimal
    currency: str
    service_id: Optional[int] = None


@dataclass
class PaymentPlanResult:
    created_count: int
    cancelled_pending_count: int
    passengers_count: int
    installments_per_passenger: int
    template_id: Optional[int]


def parse_manual_installments(rows: Optional[Sequence[InstallmentIn]]) -> Optional[list[PlannedInstallment]]:
    """Cuotas manuales; None si la lista falta, está vacía o tiene una fila inválida."""
    if not rows:
        return None
    out: list[PlannedInstallment] = []
    for row in rows:
        due = parse_date_loose(row.due_date)
        if due is None:
            return None
        try:
            amount = to_decimal(row.amount, default=ZERO)
        except DomainValidationError:
            return None
        if amount <= ZERO:
            return None
        currency = resolve_currency(row.currency)
        if currency is None:
            return None
        service_id = row.service_id if row.service_id and row.service_id > 0 else None
        out.append(PlannedInstallment(due_date=due, amount=money(amount), currency=currency, service_id=service_id))
    return out


def _bad_request(message: str, code: str, solution: str) -> BadRequestException:
    return BadRequestException(message, code=code, solution=solution)


class PaymentPlanService:
    """Planes de pago masivos por grupal."""

    def __init__(
        self,
        groups: Optional[TravelGroupRepository] = None,
        passengers: Optional[TravelGroupPassengerRepository] = None,
        templates: Optional[PaymentTemplateRepository] = None,
        bookings: Optional[BookingRepository] = None,
        services: Optional[ServiceRepository] = None,
        payments: Optional[ClientPaymentRepository] = None,
    ):
        self.groups = groups or TravelGroupRepository()
        self.passengers = passengers or TravelGroupPassengerRepository()
        self.templates = templates or PaymentTemplateRepository()
        self.bookings = bookings or BookingRepository()
        self.services = services or ServiceRepository()
        self.payments = payments or ClientPaymentRepository()

    async def _installments_from_template(
        self,
        session: AsyncSession,
        ctx: AuthContext,
        group: TravelGroup,
        template_id: int,
        raw_base_date: Optional[str],
    ) -> list[PlannedInstallment]:
        template = await self.templates.get_active(session, id_agency=ctx.id_agency, template_id=template_id)
        if template is None:
            raise NotFoundException(
                "No encontramos la plantilla de pago.",
                code="GROUP_PAYMENT_TEMPLATE_NOT_FOUND",
                solution="Verificá la plantilla seleccionada o refrescá la pantalla.",
            )
        if template.target_type and template.target_type != group.type:
            raise _bad_request(
                "La plantilla seleccionada no aplica al tipo de esta grupal.",
                "GROUP_PAYMENT_TEMPLATE_TYPE_MISMATCH",
                "Elegí una plantilla para este tipo de grupal o dejá cuotas manuales.",
            )
        if not template.is_available_to(ctx.id_user) and not can(ctx.role, Action.GROUPS_CONFIG):
            raise ForbiddenException(
                "No tenés permisos para usar esta plantilla de pago.",
                code="GROUP_PAYMENT_TEMPLATE_FORBIDDEN",
                solution="Solicitá acceso a esta plantilla o elegí otra disponible.",
            )

        rows = parse_template_installments(template.installments)
        if rows is None:
            raise _bad_request(
                "La plantilla tiene cuotas inválidas.",
                "GROUP_PAYMENT_TEMPLATE_INSTALLMENTS_INVALID",
                "Revisá la configuración de cuotas de esa plantilla.",
            )

        base_date: Optional[date] = None
        if raw_base_date is not None and raw_base_date.strip():
            base_date = parse_date_loose(raw_base_date)
            if base_date is None:
                raise _bad_request(
                    "La fecha base de la plantilla es inválida.",
                    "GROUP_TEMPLATE_BASE_DATE_INVALID",
                    "Ingresá una fecha válida con formato AAAA-MM-DD.",
                )
        effective = base_date or group.start_date or utcnow().date()

        return [
            PlannedInstallment(
                due_date=effective + timedelta(days=row.due_in_days),
                amount=row.amount,
                currency=row.currency,
            )
            for row in rows
        ]

    async def _validate_targets(
        self,
        session: AsyncSession,
        ctx: AuthContext,
        group: TravelGroup,
        passenger_ids: list[int],
        installments: list[PlannedInstallment],
    ) -> list[TravelGroupPassenger]:
        passengers = await self.passengers.list_for_group(
            session,
            id_agency=ctx.id_agency,
            group_id=group.id_travel_group,
            passenger_ids=passenger_ids,
        )
        if len(passengers) != len(passenger_ids):
            raise NotFoundException(
                "Alguno de los pasajeros seleccionados no pertenece a la grupal.",
                code="GROUP_PASSENGER_NOT_FOUND",
                solution="Refrescá la lista y volvé a seleccionar los pasajeros.",
            )

        targets = [p for p in passengers if p.has_target]
        if not targets:
            raise _bad_request(
                "Los pasajeros seleccionados no tienen reservas o clientes vinculados.",
                "GROUP_PASSENGER_TARGET_INVALID",
                "Revisá que cada pasajero tenga reserva y cliente asignados.",
            )

        booking_ids = sorted({p.booking_id for p in targets})
        bookings = await self.bookings.list_by_ids(session, ctx.id_agency, booking_ids)
        if len([b for b in bookings if b.travel_group_id == group.id_travel_group]) != len(booking_ids):
            raise _bad_request(
                "Algunas reservas vinculadas no son válidas para esta grupal.",
                "GROUP_BOOKING_SCOPE_INVALID",
                "Refrescá la pantalla y revisá las reservas de los pasajeros seleccionados.",
            )

        requested = sorted({i.service_id for i in installments if i.service_id is not None})
        if requested:
            services = await self.services.list_by_ids(session, ctx.id_agency, requested)
            valid = {s.id_service for s in services if s.booking_id in booking_ids}
            invalid = [sid for sid in requested if sid not in valid]
            if invalid:
                raise _bad_request(
                    f"Hay servicios inválidos para esta grupal: {', '.join(str(i) for i in invalid)}",
                    "GROUP_SERVICE_SCOPE_INVALID",
                    "Verificá los servicios vinculados a las reservas seleccionadas.",
                )
        return targets

    async def generate(
        self,
        session: AsyncSession,
        ctx: AuthContext,
        group_id: int,
        payload: PaymentPlanRequest,
    ) -> PaymentPlanResult:
        group = await load_group_for_write(
            session,
            ctx,
            group_id,
            forbidden_message="No tenés permisos para crear planes de pago en lote.",
            forbidden_code="GROUP_PAYMENT_PLAN_FORBIDDEN",
            locked_message="No se pueden crear planes en grupales cerradas o canceladas.",
            locked_solution="Cambiá el estado de la grupal antes de crear planes masivos.",
            groups=self.groups,
        )

        passenger_ids = distinct_positive_ints(payload.passenger_ids)
        if not passenger_ids:
            raise _bad_request(
                "No se enviaron pasajeros válidos.",
                "GROUP_PASSENGER_IDS_INVALID",
                "Seleccioná al menos un pasajero y volvé a intentar.",
            )

        template_id = payload.template_id if payload.template_id and payload.template_id > 0 else None
        installments = parse_manual_installments(payload.installments)
        if installments and template_id:
            raise _bad_request(
                "No se pueden usar cuotas manuales y plantilla al mismo tiempo.",
                "GROUP_PAYMENT_PLAN_SOURCE_CONFLICT",
                "Elegí una sola opción: cuotas manuales o plantilla.",
            )
        if installments is None and template_id:
            installments = await self._installments_from_template(
                session, ctx, group, template_id, payload.template_base_date
            )
        if not installments:
            raise _bad_request(
                "No se enviaron cuotas válidas para generar el plan de pago.",
                "GROUP_PAYMENT_PLAN_INVALID",
                "Completá cuotas manuales válidas o elegí una plantilla con cuotas configuradas.",
            )

        targets = await self._validate_targets(session, ctx, group, passenger_ids, installments)

        created = 0
        cancelled = 0
        try:
            async with transactional(session):
                for passenger in targets:
                    if payload.replace_pending:
                        pending = await self.payments.list_pending_for_pairs(
                            session, ctx.id_agency, [(passenger.booking_id, passenger.client_id)]
                        )
                        for payment in pending:
                            previous = payment.status
                            payment.status = ClientPaymentStatus.CANCELADA.value
                            payment.status_reason = CANCEL_STATUS_REASON
                            await self.payments.add_audit(
                                session,
                                payment,
                                action=ClientPaymentAuditAction.STATUS_CHANGED.value,
                                from_status=previous,
                                to_status=ClientPaymentStatus.CANCELADA.value,
                                reason=CANCEL_AUDIT_REASON,
                                changed_by=ctx.id_user,
                            )
                        cancelled += len(pending)

                    for item in installments:
                        payment = ClientPayment(
                            id_agency=ctx.id_agency,
                            agency_client_payment_id=await next_agency_counter(
                                session, ctx.id_agency, "client_payment"
                            ),
                            booking_id=passenger.booking_id,
                            client_id=passenger.client_id,
                            service_id=item.service_id,
                            amount=item.amount,
                            currency=item.currency,
                            due_date=item.due_date,
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
                            data={
                                "group_id": group.id_travel_group,
                                "passenger_id": passenger.id_travel_group_passenger,
                            },
                        )
                        created += 1
                await session.flush()
        except SQLAlchemyError:
            logger.exception("Group payment plan failed: agency=%s group=%s", ctx.id_agency, group_id)
            raise InternalServerException(
                "No pudimos crear los planes de pago en lote.",
                code="GROUP_PAYMENT_PLAN_ERROR",
            )

        group_installments_created_total.inc(created)
        logger.info(
            "Group payment plan generated: agency=%s group=%s passengers=%s created=%s cancelled=%s template=%s",
            ctx.id_agency, group.id_travel_group, len(targets), created, cancelled, template_id,
        )
        return PaymentPlanResult(
            created_count=created,
            cancelled_pending_count=cancelled,
            passengers_count=len(targets),
            installments_per_passenger=len(installments),
            template_id=template_id,
        )


__all__ = ["PaymentPlanService", "PaymentPlanResult", "PlannedInstallment", "parse_manual_installments"]
# Fin del archivo backend/app/modules/groups/services/payment_plan_service.py

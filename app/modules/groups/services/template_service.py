# -*- coding: utf-8 -*-
"""
backend/app/modules/groups/services/template_service.py

ABM de plantillas de pago de grupales (configuración por agencia).

- listar: roles con escritura de grupales; quien no gestiona
  configuración solo ve plantillas activas sin asignar o asignadas a él
- crear / editar / desactivar: roles de configuración
- la baja es lógica (is_active = False): los planes ya generados copiaron
  los valores y no dependen de la plantilla

Autor: TurisCore
Fecha: 2026-09-09
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.finance.commission import money
from app.shared.auth_context import AuthContext
from app.shared.database import next_agency_counter, transactional
from app.shared.permissions import Action, can
from app.shared.utils.http_exceptions import (
    BadRequestException,
    ForbiddenException,
    InternalServerException,
    NotFoundException,
)

from ..enums import normalize_group_type
from ..models import TravelGroupPaymentTemplate
from ..repositories import PaymentTemplateRepository
from ..schemas import (
    PaymentTemplateCreateRequest,
    PaymentTemplateUpdateRequest,
    TemplateInstallmentIn,
)
from .common import TemplateInstallment, distinct_positive_ints

logger = logging.getLogger(__name__)


def _installments_json(rows: Sequence[TemplateInstallmentIn]) -> list[dict]:
    return [
        TemplateInstallment(due_in_days=r.due_in_days, amount=money(r.amount), currency=r.currency).as_json()
        for r in rows
    ]


def _target_type(raw: Optional[str]) -> Optional[str]:
    """'' o None → aplica a todos los tipos; otro valor debe ser un tipo válido."""
    if raw is None or not raw.strip():
        return None
    target = normalize_group_type(raw)
    if target is None:
        raise BadRequestException(
            "El tipo de grupal de destino es inválido.",
            code="GROUP_TEMPLATE_TARGET_TYPE_INVALID",
            solution="Elegí Agencia, Estudiantil, Precomprado o dejalo vacío para todos.",
        )
    return target


class PaymentTemplateService:
    def __init__(self, templates: Optional[PaymentTemplateRepository] = None):
        self.templates = templates or PaymentTemplateRepository()

    @staticmethod
    def _require(ctx: AuthContext, action: Action, message: str, code: str) -> None:
        if not can(ctx.role, action):
            raise ForbiddenException(
                message,
                code=code,
                solution="Solicitá permisos de configuración a un administrador.",
            )

    async def list_templates(
        self,
        session: AsyncSession,
        ctx: AuthContext,
        *,
        target_type: Optional[str] = None,
        include_inactive: bool = False,
    ) -> list[TravelGroupPaymentTemplate]:
        self._require(ctx, Action.GROUPS_WRITE, "No tenés permisos para ver plantillas.", "GROUP_TEMPLATE_LIST_FORBIDDEN")
        is_manager = can(ctx.role, Action.GROUPS_CONFIG)
        rows = await self.templates.list_for_agency(
            session,
            id_agency=ctx.id_agency,
            target_type=normalize_group_type(target_type),
            include_inactive=include_inactive and is_manager,
        )
        if is_manager:
            return list(rows)
        return [t for t in rows if t.is_available_to(ctx.id_user)]

    async def get_template(self, session: AsyncSession, ctx: AuthContext, template_id: int) -> TravelGroupPaymentTemplate:
        self._require(ctx, Action.GROUPS_WRITE, "No tenés permisos para ver plantillas.", "GROUP_TEMPLATE_LIST_FORBIDDEN")
        template = await self.templates.get_for_agency(session, template_id, ctx.id_agency)
        if template is None:
            raise NotFoundException(
                "No encontramos la plantilla solicitada.",
                code="GROUP_TEMPLATE_NOT_FOUND",
                solution="Refrescá la pantalla y volvé a intentar.",
            )
        return template

    async def create_template(
        self,
        session: AsyncSession,
        ctx: AuthContext,
        payload: PaymentTemplateCreateRequest,
    ) -> TravelGroupPaymentTemplate:
        self._require(ctx, Action.GROUPS_CONFIG, "No tenés permisos para crear plantillas.", "GROUP_TEMPLATE_CREATE_FORBIDDEN")

        name = payload.name.strip()
        if not name:
            raise BadRequestException(
                "El nombre de la plantilla es obligatorio.",
                code="GROUP_TEMPLATE_NAME_REQUIRED",
                solution="Ingresá un nombre corto y descriptivo.",
            )
        target = _target_type(payload.target_type)

        try:
            async with transactional(session):
                template = TravelGroupPaymentTemplate(
                    id_agency=ctx.id_agency,
                    agency_travel_group_payment_template_id=await next_agency_counter(
                        session, ctx.id_agency, "travel_group_payment_template"
                    ),
                    created_by=ctx.id_user,
                    name=name,
                    description=(payload.description or "").strip() or None,
                    target_type=target,
                    payment_mode=(payload.payment_mode or "").strip() or None,
                    is_active=payload.is_active,
                    is_preloaded=False,
                    assigned_user_ids=distinct_positive_ints(payload.assigned_user_ids),
                    installments=_installments_json(payload.installments),
                    extra=payload.metadata,
                )
                session.add(template)
                await session.flush()
        except SQLAlchemyError:
            logger.exception("Payment template create failed: agency=%s", ctx.id_agency)
            raise InternalServerException("No pudimos crear la plantilla de pago.", code="GROUP_TEMPLATE_CREATE_ERROR")

        logger.info(
            "Payment template created: agency=%s template=%s installments=%s",
            ctx.id_agency, template.id_travel_group_payment_template, len(template.installments),
        )
        return template

    async def update_template(
        self,
        session: AsyncSession,
        ctx: AuthContext,
        template_id: int,
        payload: PaymentTemplateUpdateRequest,
    ) -> TravelGroupPaymentTemplate:
        self._require(ctx, Action.GROUPS_CONFIG, "No tenés permisos para editar plantillas.", "GROUP_TEMPLATE_UPDATE_FORBIDDEN")
        template = await self.get_template(session, ctx, template_id)

        sent = payload.model_fields_set
        patch: dict[str, object] = {}
        if "name" in sent:
            name = (payload.name or "").strip()
            if not name:
                raise BadRequestException(
                    "El nombre de la plantilla es inválido.",
                    code="GROUP_TEMPLATE_NAME_INVALID",
                    solution="Ingresá un nombre de hasta 120 caracteres.",
                )
            patch["name"] = name
        if "description" in sent:
            patch["description"] = (payload.description or "").strip() or None
        if "payment_mode" in sent:
            patch["payment_mode"] = (payload.payment_mode or "").strip() or None
        if "target_type" in sent:
            patch["target_type"] = _target_type(payload.target_type)
        if "is_active" in sent:
            if payload.is_active is None:
                raise BadRequestException(
                    "El estado activo/inactivo es inválido.",
                    code="GROUP_TEMPLATE_ACTIVE_FLAG_INVALID",
                    solution="Enviá un valor booleano: true o false.",
                )
            patch["is_active"] = payload.is_active
        if "assigned_user_ids" in sent:
            patch["assigned_user_ids"] = distinct_positive_ints(payload.assigned_user_ids)
        if "installments" in sent:
            if not payload.installments:
                raise BadRequestException(
                    "Las cuotas de la plantilla son inválidas.",
                    code="GROUP_TEMPLATE_INSTALLMENTS_INVALID",
                    solution="Revisá días desde la fecha base, monto y moneda en cada cuota.",
                )
            patch["installments"] = _installments_json(payload.installments)
        if "metadata" in sent:
            patch["extra"] = payload.metadata

        if not patch:
            raise BadRequestException(
                "No se detectaron cambios para guardar.",
                code="GROUP_TEMPLATE_NO_CHANGES",
                solution="Modificá al menos un campo antes de guardar.",
            )

        try:
            async with transactional(session):
                for key, value in patch.items():
                    setattr(template, key, value)
                await session.flush()
        except SQLAlchemyError:
            logger.exception("Payment template update failed: template=%s", template_id)
            raise InternalServerException("No pudimos actualizar la plantilla.", code="GROUP_TEMPLATE_UPDATE_ERROR")

        logger.info("Payment template updated: template=%s fields=%s", template_id, sorted(patch))
        return template

    async def deactivate_template(self, session: AsyncSession, ctx: AuthContext, template_id: int) -> None:
        self._require(ctx, Action.GROUPS_CONFIG, "No tenés permisos para eliminar plantillas.", "GROUP_TEMPLATE_DELETE_FORBIDDEN")
        template = await self.get_template(session, ctx, template_id)
        try:
            async with transactional(session):
                template.is_active = False
                await session.flush()
        except SQLAlchemyError:
            logger.exception("Payment template delete failed: template=%s", template_id)
            raise InternalServerException("No pudimos eliminar la plantilla.", code="GROUP_TEMPLATE_DELETE_ERROR")
        logger.info("Payment template deactivated: template=%s", template_id)


__all__ = ["PaymentTemplateService"]
# Fin del archivo backend/app/modules/groups/services/template_service.py

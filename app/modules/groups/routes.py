# -*- coding: utf-8 -*-
"""
backend/app/modules/groups/routes.py

Rutas de grupales.

Endpoints:
- POST   /groups/{id}/bulk/payment-plans              plan de cuotas masivo
- POST   /groups/{id}/bulk/collect                    cobro masivo por buckets
- GET    /groups/config/payment-templates             listar plantillas
- POST   /groups/config/payment-templates             crear plantilla
- GET    /groups/config/payment-templates/{id}        detalle
- PUT    /groups/config/payment-templates/{id}        editar
- DELETE /groups/config/payment-templates/{id}        desactivar

Autor: TurisCore
Fecha: 2026-09-08
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.auth_context import AuthContext, get_auth_context
from app.shared.database.database import get_async_session

from .schemas import (
    CollectBucketOut,
    CollectRequest,
    CollectResponse,
    OkResponse,
    PaymentPlanRequest,
    PaymentPlanResponse,
    PaymentTemplateCreateRequest,
    PaymentTemplateListResponse,
    PaymentTemplateOut,
    PaymentTemplateUpdateRequest,
)
from .services import CollectionService, PaymentPlanService, PaymentTemplateService

router = APIRouter(prefix="/groups", tags=["groups"])


# ---------------------------------------------------------------------------
# Operaciones masivas
# ---------------------------------------------------------------------------
@router.post(
    "/{group_id}/bulk/payment-plans",
    response_model=PaymentPlanResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Generar planes de pago en lote",
)
async def bulk_payment_plans(
    payload: PaymentPlanRequest,
    group_id: int = Path(..., gt=0),
    session: AsyncSession = Depends(get_async_session),
    auth: AuthContext = Depends(get_auth_context),
) -> PaymentPlanResponse:
    result = await PaymentPlanService().generate(session, auth, group_id, payload)
    return PaymentPlanResponse(
        created_count=result.created_count,
        cancelled_pending_count=result.cancelled_pending_count,
        passengers_count=result.passengers_count,
        installments_per_passenger=result.installments_per_passenger,
        template_id=result.template_id,
    )


@router.post(
    "/{group_id}/bulk/collect",
    response_model=CollectResponse,
    summary="Cobrar cuotas en lote",
    description="Un recibo por (reserva, cliente, moneda) cuando createReceipts es true.",
)
async def bulk_collect(
    payload: CollectRequest,
    group_id: int = Path(..., gt=0),
    session: AsyncSession = Depends(get_async_session),
    auth: AuthContext = Depends(get_auth_context),
) -> CollectResponse:
    result = await CollectionService().collect(session, auth, group_id, payload)
    return CollectResponse(
        settled_count=result.settled_count,
        receipts_count=result.receipts_count,
        buckets=[
            CollectBucketOut(
                booking_id=b.booking_id,
                client_id=b.client_id,
                currency=b.currency,
                receipt_id=b.receipt_id,
                payment_ids=b.payment_ids,
            )
            for b in result.buckets
        ],
    )


# ---------------------------------------------------------------------------
# Configuración: plantillas de pago
# ---------------------------------------------------------------------------
@router.get("/config/payment-templates", response_model=PaymentTemplateListResponse)
async def list_payment_templates(
    target_type: Optional[str] = Query(None, max_length=16),
    include_inactive: bool = Query(False),
    session: AsyncSession = Depends(get_async_session),
    auth: AuthContext = Depends(get_auth_context),
) -> PaymentTemplateListResponse:
    rows = await PaymentTemplateService().list_templates(
        session, auth, target_type=target_type, include_inactive=include_inactive
    )
    return PaymentTemplateListResponse(items=[PaymentTemplateOut.model_validate(t) for t in rows])


@router.post(
    "/config/payment-templates",
    response_model=PaymentTemplateOut,
    status_code=status.HTTP_201_CREATED,
)
async def create_payment_template(
    payload: PaymentTemplateCreateRequest,
    session: AsyncSession = Depends(get_async_session),
    auth: AuthContext = Depends(get_auth_context),
) -> PaymentTemplateOut:
    template = await PaymentTemplateService().create_template(session, auth, payload)
    return PaymentTemplateOut.model_validate(template)


@router.get("/config/payment-templates/{template_id}", response_model=PaymentTemplateOut)
async def get_payment_template(
    template_id: int = Path(..., gt=0),
    session: AsyncSession = Depends(get_async_session),
    auth: AuthContext = Depends(get_auth_context),
) -> PaymentTemplateOut:
    template = await PaymentTemplateService().get_template(session, auth, template_id)
    return PaymentTemplateOut.model_validate(template)


@router.put("/config/payment-templates/{template_id}", response_model=PaymentTemplateOut)
async def update_payment_template(
    payload: PaymentTemplateUpdateRequest,
    template_id: int = Path(..., gt=0),
    session: AsyncSession = Depends(get_async_session),
    auth: AuthContext = Depends(get_auth_context),
) -> PaymentTemplateOut:
    template = await PaymentTemplateService().update_template(session, auth, template_id, payload)
    return PaymentTemplateOut.model_validate(template)


@router.delete("/config/payment-templates/{template_id}", response_model=OkResponse)
async def delete_payment_template(
    template_id: int = Path(..., gt=0),
    session: AsyncSession = Depends(get_async_session),
    auth: AuthContext = Depends(get_auth_context),
) -> OkResponse:
    await PaymentTemplateService().deactivate_template(session, auth, template_id)
    return OkResponse()


# Fin del archivo backend/app/modules/groups/routes.py

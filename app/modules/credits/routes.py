# -*- coding: utf-8 -*-
"""
backend/app/modules/credits/routes.py

Rutas de cuenta corriente (créditos a favor de pax y operadores).

Endpoints:
- GET    /credit/entry                  listado paginado por cursor
- POST   /credit/entry                  alta de movimiento (ajusta saldo)
- GET    /credit/entry/{id}             detalle
- PUT    /credit/entry/{id}             edición de metadatos
- DELETE /credit/entry/{id}             baja reversible (saldo -= importe)
- GET    /credit/account                listado de cuentas
- POST   /credit/account                alta de cuenta (saldo inicial opcional)
- GET    /credit/account/{id}           saldo + últimos movimientos
- PUT    /credit/account/{id}           habilitar/deshabilitar, límite
- DELETE /credit/account/{id}           solo sin movimientos
- POST   /credit/account/{id}/adjust    ajuste de saldo a un objetivo

Autor: TurisCore
Fecha: 2026-09-07
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.auth_context import AuthContext, get_auth_context
from app.shared.database.database import get_async_session

from .enums import CreditSubjectType
from .repositories import CreditAccountFilters, CreditEntryFilters
from .schemas import (
    CreditAccountAdjustRequest,
    CreditAccountAdjustResponse,
    CreditAccountCreateRequest,
    CreditAccountDeleteResponse,
    CreditAccountDetailOut,
    CreditAccountListResponse,
    CreditAccountOut,
    CreditAccountUpdateRequest,
    CreditEntryBaseOut,
    CreditEntryCreateRequest,
    CreditEntryDeleteResponse,
    CreditEntryListResponse,
    CreditEntryOut,
    CreditEntryUpdateRequest,
)
from .services import CreditAccountService, CreditEntryService

router = APIRouter(prefix="/credit", tags=["credits"])


def get_credit_service() -> CreditEntryService:
    return CreditEntryService()


def get_account_service() -> CreditAccountService:
    return CreditAccountService()


@router.get("/entry", response_model=CreditEntryListResponse, summary="Listar movimientos")
async def list_entries(
    account_id: Optional[int] = Query(None, gt=0),
    client_id: Optional[int] = Query(None, gt=0),
    operator_id: Optional[int] = Query(None, gt=0),
    currency: Optional[str] = Query(None, max_length=16),
    doc_type: Optional[str] = Query(None, max_length=32),
    subject_type: Optional[CreditSubjectType] = Query(None),
    investment_id: Optional[int] = Query(None, gt=0),
    take: int = Query(50, ge=1, le=200),
    cursor: Optional[int] = Query(None, gt=0),
    session: AsyncSession = Depends(get_async_session),
    auth: AuthContext = Depends(get_auth_context),
    service: CreditEntryService = Depends(get_credit_service),
) -> CreditEntryListResponse:
    filters = CreditEntryFilters(
        account_id=account_id,
        client_id=client_id,
        operator_id=operator_id,
        currency=currency,
        doc_type=(doc_type or "").strip() or None,
        subject_type=subject_type,
        investment_id=investment_id,
    )
    items, next_cursor = await service.list_entries(
        session, auth, filters=filters, take=take, cursor=cursor
    )
    return CreditEntryListResponse(
        items=[CreditEntryOut.model_validate(e) for e in items],
        next_cursor=next_cursor,
    )


@router.post(
    "/entry",
    response_model=CreditEntryOut,
    status_code=status.HTTP_201_CREATED,
    summary="Crear movimiento",
    description="El signo lo define doc_type; el saldo de la cuenta se ajusta en la misma transacción.",
)
async def create_entry(
    payload: CreditEntryCreateRequest,
    session: AsyncSession = Depends(get_async_session),
    auth: AuthContext = Depends(get_auth_context),
    service: CreditEntryService = Depends(get_credit_service),
) -> CreditEntryOut:
    entry = await service.create_entry(session, auth, payload)
    return CreditEntryOut.model_validate(entry)


@router.get("/entry/{entry_id}", response_model=CreditEntryOut, summary="Detalle de movimiento")
async def get_entry(
    entry_id: int = Path(..., gt=0),
    session: AsyncSession = Depends(get_async_session),
    auth: AuthContext = Depends(get_auth_context),
    service: CreditEntryService = Depends(get_credit_service),
) -> CreditEntryOut:
    return CreditEntryOut.model_validate(await service.get_entry(session, auth, entry_id))


@router.put("/entry/{entry_id}", response_model=CreditEntryOut, summary="Editar movimiento")
async def update_entry(
    payload: CreditEntryUpdateRequest,
    entry_id: int = Path(..., gt=0),
    session: AsyncSession = Depends(get_async_session),
    auth: AuthContext = Depends(get_auth_context),
    service: CreditEntryService = Depends(get_credit_service),
) -> CreditEntryOut:
    entry = await service.update_entry(session, auth, entry_id, payload)
    return CreditEntryOut.model_validate(entry)


@router.delete("/entry/{entry_id}", response_model=CreditEntryDeleteResponse, summary="Eliminar movimiento")
async def delete_entry(
    entry_id: int = Path(..., gt=0),
    session: AsyncSession = Depends(get_async_session),
    auth: AuthContext = Depends(get_auth_context),
    service: CreditEntryService = Depends(get_credit_service),
) -> CreditEntryDeleteResponse:
    deleted = await service.delete_entry(session, auth, entry_id)
    return CreditEntryDeleteResponse(
        message="Movimiento eliminado",
        id_entry=deleted.id_entry,
        account_id=deleted.account_id,
        balance=deleted.balance,
    )


# ----------------------------------------------------------------------
# Cuentas
# ----------------------------------------------------------------------
@router.get("/account", response_model=CreditAccountListResponse, summary="Listar cuentas")
async def list_accounts(
    client_id: Optional[int] = Query(None, gt=0),
    operator_id: Optional[int] = Query(None, gt=0),
    currency: Optional[str] = Query(None, max_length=16),
    enabled: Optional[bool] = Query(None),
    take: int = Query(24, ge=1, le=100),
    cursor: Optional[int] = Query(None, gt=0),
    session: AsyncSession = Depends(get_async_session),
    auth: AuthContext = Depends(get_auth_context),
    service: CreditAccountService = Depends(get_account_service),
) -> CreditAccountListResponse:
    filters = CreditAccountFilters(
        client_id=client_id,
        operator_id=operator_id,
        currency=currency,
        enabled=enabled,
    )
    items, next_cursor = await service.list_accounts(
        session, auth, filters=filters, take=take, cursor=cursor
    )
    return CreditAccountListResponse(
        items=[CreditAccountOut.model_validate(a) for a in items],
        next_cursor=next_cursor,
    )


@router.post(
    "/account",
    response_model=CreditAccountOut,
    status_code=status.HTTP_201_CREATED,
    summary="Crear cuenta",
    description="Idempotente por titular y moneda: si la cuenta ya existe se devuelve con 200.",
)
async def create_account(
    payload: CreditAccountCreateRequest,
    response: Response,
    session: AsyncSession = Depends(get_async_session),
    auth: AuthContext = Depends(get_auth_context),
    service: CreditAccountService = Depends(get_account_service),
) -> CreditAccountOut:
    account, created = await service.create_account(session, auth, payload)
    if not created:
        response.status_code = status.HTTP_200_OK
    return CreditAccountOut.model_validate(account)


@router.get("/account/{account_id}", response_model=CreditAccountDetailOut, summary="Detalle de cuenta")
async def get_account(
    account_id: int = Path(..., gt=0),
    session: AsyncSession = Depends(get_async_session),
    auth: AuthContext = Depends(get_auth_context),
    service: CreditAccountService = Depends(get_account_service),
) -> CreditAccountDetailOut:
    account = await service.get_account(session, auth, account_id)
    recent = await service.recent_entries(session, auth, account)
    detail = CreditAccountDetailOut.model_validate(account)
    detail.recent_entries = [CreditEntryBaseOut.model_validate(e) for e in recent]
    return detail


@router.put("/account/{account_id}", response_model=CreditAccountOut, summary="Editar cuenta")
async def update_account(
    payload: CreditAccountUpdateRequest,
    account_id: int = Path(..., gt=0),
    session: AsyncSession = Depends(get_async_session),
    auth: AuthContext = Depends(get_auth_context),
    service: CreditAccountService = Depends(get_account_service),
) -> CreditAccountOut:
    account = await service.update_account(session, auth, account_id, payload)
    return CreditAccountOut.model_validate(account)


@router.delete("/account/{account_id}", response_model=CreditAccountDeleteResponse, summary="Eliminar cuenta")
async def delete_account(
    account_id: int = Path(..., gt=0),
    session: AsyncSession = Depends(get_async_session),
    auth: AuthContext = Depends(get_auth_context),
    service: CreditAccountService = Depends(get_account_service),
) -> CreditAccountDeleteResponse:
    deleted_id = await service.delete_account(session, auth, account_id)
    return CreditAccountDeleteResponse(message="Cuenta eliminada", id_credit_account=deleted_id)


@router.post(
    "/account/{account_id}/adjust",
    response_model=CreditAccountAdjustResponse,
    summary="Ajustar saldo",
    description="Lleva el saldo al objetivo con un movimiento adjust_up/adjust_down por la diferencia.",
)
async def adjust_account(
    payload: CreditAccountAdjustRequest,
    account_id: int = Path(..., gt=0),
    session: AsyncSession = Depends(get_async_session),
    auth: AuthContext = Depends(get_auth_context),
    service: CreditAccountService = Depends(get_account_service),
) -> CreditAccountAdjustResponse:
    result = await service.adjust_balance(session, auth, account_id, payload)
    return CreditAccountAdjustResponse(
        changed=result.changed,
        account=CreditAccountOut.model_validate(result.account),
        entry=CreditEntryBaseOut.model_validate(result.entry) if result.entry is not None else None,
        previous_balance=result.previous_balance,
        target_balance=result.target_balance,
        delta=result.delta,
    )


# Fin del archivo backend/app/modules/credits/routes.py

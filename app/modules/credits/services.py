# -*- coding: utf-8 -*-
"""
backend/app/modules/credits/services.py

Servicio de cuenta corriente (ledger de créditos a favor).

Provee lógica de negocio para:
- alta de movimiento con signo por doc_type + ajuste de saldo
- edición de metadatos (concepto, fecha valor, doc_type, referencia);
  si el nuevo doc_type invierte el signo, se invierte el importe y se
  corrige el saldo en la misma transacción
- baja reversible: saldo -= importe y borrado del movimiento, prohibida
  para movimientos vinculados a otro documento
- listados paginados por cursor
- cuentas: alta con saldo inicial, habilitación y límite, baja de
  cuentas sin movimientos y ajuste del saldo a un objetivo con un único
  movimiento compensatorio (adjust_up / adjust_down)

Invariante: CreditAccount.balance == Σ CreditEntry.amount.

Toda validación ocurre antes de abrir la unidad de trabajo; dentro de
ella cuenta y movimiento se releen con bloqueo de fila.

Autor: TurisCore
Fecha: 2026-09-07
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.bookings.repositories import ClientRepository, OperatorRepository
from app.modules.finance.commission import ZERO, money
from app.modules.finance.currency import is_iso_currency, resolve_currency
from app.observability.collectors import credit_entries_total
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
from app.shared.utils.time_utils import parse_ymd

from .enums import DEFAULT_DOC_TYPE, sign_for_doc_type
from .models import CreditAccount, CreditEntry
from .repositories import (
    CreditAccountFilters,
    CreditAccountRepository,
    CreditEntryFilters,
    CreditEntryRepository,
)
from .schemas import (
    CreditAccountAdjustRequest,
    CreditAccountCreateRequest,
    CreditAccountUpdateRequest,
    CreditEntryCreateRequest,
    CreditEntryUpdateRequest,
)

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("concept", "value_date", "doc_type", "reference")


@dataclass
class DeletedEntry:
    id_entry: int
    account_id: int
    balance: Decimal


def _bad_request(message: str, code: str, solution: Optional[str] = None) -> BadRequestException:
    return BadRequestException(message, code=code, solution=solution)


def _currency_filter(raw: Optional[str]) -> Optional[str]:
    """Moneda de un filtro de listado: ISO tal cual o alias resuelto ("u$d" -> USD)."""
    token = (raw or "").strip().upper()
    if not token:
        return None
    if is_iso_currency(token):
        return token
    code = resolve_currency(token)
    if code is None:
        raise _bad_request(f"Moneda inválida: {raw}.", "CREDIT_CURRENCY_INVALID")
    return code


class CreditEntryService:
    """
    Servicio para movimientos de cuenta corriente.
    """

    def __init__(
        self,
        accounts: Optional[CreditAccountRepository] = None,
        entries: Optional[CreditEntryRepository] = None,
        clients: Optional[ClientRepository] = None,
        operators: Optional[OperatorRepository] = None,
    ):
        self.accounts = accounts or CreditAccountRepository()
        self.entries = entries or CreditEntryRepository()
        self.clients = clients or ClientRepository()
        self.operators = operators or OperatorRepository()

    # ------------------------------------------------------------------
    # Autorización
    # ------------------------------------------------------------------
    @staticmethod
    def ensure_can(ctx: AuthContext, action: Action) -> None:
        if not can(ctx.role, action):
            raise ForbiddenException(
                "Tu rol no tiene permisos para esta operación de cuenta corriente.",
                code="CREDIT_FORBIDDEN",
                solution="Pedí a gerencia o administración que realice la operación.",
            )

    async def get_entry(self, session: AsyncSession, ctx: AuthContext, entry_id: int) -> CreditEntry:
        """Movimiento de la agencia del usuario (404 si no existe, 403 si es de otra)."""
        self.ensure_can(ctx, Action.CREDITS_ACCESS)
        entry = await self.entries.get(session, entry_id)
        if entry is None:
            raise NotFoundException("Movimiento no encontrado.", code="CREDIT_ENTRY_NOT_FOUND")
        if entry.id_agency != ctx.id_agency:
            raise ForbiddenException("No autorizado para esta agencia.", code="CREDIT_ENTRY_FORBIDDEN")
        return entry

    async def get_account(self, session: AsyncSession, ctx: AuthContext, account_id: int) -> CreditAccount:
        self.ensure_can(ctx, Action.CREDITS_ACCESS)
        account = await self.accounts.get(session, account_id)
        if account is None:
            raise NotFoundException("Cuenta no encontrada.", code="CREDIT_ACCOUNT_NOT_FOUND")
        if account.id_agency != ctx.id_agency:
            raise ForbiddenException("No autorizado para esta cuenta.", code="CREDIT_ACCOUNT_FORBIDDEN")
        return account

    # ------------------------------------------------------------------
    # Listado
    # ------------------------------------------------------------------
    async def list_entries(
        self,
        session: AsyncSession,
        ctx: AuthContext,
        *,
        filters: CreditEntryFilters,
        take: int,
        cursor: Optional[int] = None,
    ) -> tuple[Sequence[CreditEntry], Optional[int]]:
        self.ensure_can(ctx, Action.CREDITS_ACCESS)
        filters.currency = _currency_filter(filters.currency)
        return await self.entries.list_page(
            session,
            id_agency=ctx.id_agency,
            filters=filters,
            take=take,
            cursor=cursor,
        )

    # ------------------------------------------------------------------
    # Alta
    # ------------------------------------------------------------------
    async def _ensure_subject(
        self,
        session: AsyncSession,
        ctx: AuthContext,
        client_id: Optional[int],
        operator_id: Optional[int],
    ) -> None:
        """Titular: exactamente uno de pax u operador, de la agencia del usuario."""
        has_client = client_id is not None
        has_operator = operator_id is not None
        if has_client == has_operator:
            raise _bad_request(
                "Debe indicar client_id u operator_id (uno solo).",
                "CREDIT_SUBJECT_INVALID",
            )

        if has_client:
            client = await self.clients.get_for_agency(session, client_id, ctx.id_agency)
            if client is None:
                raise _bad_request("Pax inválido para tu agencia.", "CREDIT_CLIENT_INVALID")
        else:
            operator = await self.operators.get_for_agency(session, operator_id, ctx.id_agency)
            if operator is None:
                raise _bad_request("Operador inválido para tu agencia.", "CREDIT_OPERATOR_INVALID")

    async def _resolve_account(
        self,
        session: AsyncSession,
        ctx: AuthContext,
        payload: CreditEntryCreateRequest,
        currency: str,
    ) -> Optional[CreditAccount]:
        """
        Cuenta destino ya existente, o None si hay que crearla para el
        titular indicado (se crea dentro de la unidad de trabajo).
        """
        if payload.account_id is not None:
            account = await self.accounts.get(session, payload.account_id)
            if account is None:
                raise NotFoundException("Cuenta no encontrada.", code="CREDIT_ACCOUNT_NOT_FOUND")
            if account.id_agency != ctx.id_agency:
                raise ForbiddenException("No autorizado para esta cuenta.", code="CREDIT_ACCOUNT_FORBIDDEN")
            if account.currency != currency:
                raise _bad_request(
                    f"La moneda del movimiento ({currency}) no coincide con la de la cuenta ({account.currency}).",
                    "CREDIT_ACCOUNT_CURRENCY_MISMATCH",
                )
            if not account.enabled:
                raise _bad_request("La cuenta está deshabilitada.", "CREDIT_ACCOUNT_DISABLED")
            return account

        await self._ensure_subject(session, ctx, payload.client_id, payload.operator_id)
        account = await self.accounts.find_for_subject(
            session,
            id_agency=ctx.id_agency,
            currency=currency,
            client_id=payload.client_id,
            operator_id=payload.operator_id,
        )
        if account is not None and not account.enabled:
            raise _bad_request("La cuenta está deshabilitada.", "CREDIT_ACCOUNT_DISABLED")
        return account

    async def create_entry(
        self,
        session: AsyncSession,
        ctx: AuthContext,
        payload: CreditEntryCreateRequest,
    ) -> CreditEntry:
        self.ensure_can(ctx, Action.CREDITS_ACCESS)

        if payload.amount is None or not payload.amount.is_finite() or payload.amount <= ZERO:
            raise _bad_request("amount es obligatorio y debe ser > 0.", "CREDIT_AMOUNT_INVALID")
        amount_abs = money(abs(payload.amount))
        if amount_abs <= ZERO:
            raise _bad_request("amount es obligatorio y debe ser > 0.", "CREDIT_AMOUNT_INVALID")

        raw_currency = (payload.currency or "").strip()
        if not raw_currency:
            raise _bad_request("currency es obligatorio.", "CREDIT_CURRENCY_REQUIRED")
        currency = resolve_currency(raw_currency)
        if currency is None:
            raise _bad_request(f"Moneda inválida: {raw_currency}.", "CREDIT_CURRENCY_INVALID")

        concept = (payload.concept or "").strip()
        if not concept:
            raise _bad_request("concept es obligatorio.", "CREDIT_CONCEPT_REQUIRED")

        doc_type = (payload.doc_type or "").strip() or DEFAULT_DOC_TYPE
        value_date = None
        if payload.value_date:
            value_date = parse_ymd(payload.value_date)
            if value_date is None:
                raise _bad_request("value_date inválida (YYYY-MM-DD).", "CREDIT_VALUE_DATE_INVALID")

        account = await self._resolve_account(session, ctx, payload, currency)
        signed = amount_abs * sign_for_doc_type(doc_type)

        try:
            async with transactional(session):
                if account is None:
                    account = CreditAccount(
                        id_agency=ctx.id_agency,
                        agency_credit_account_id=await next_agency_counter(
                            session, ctx.id_agency, "credit_account"
                        ),
                        client_id=payload.client_id,
                        operator_id=payload.operator_id,
                        currency=currency,
                        balance=ZERO,
                        enabled=True,
                    )
                    session.add(account)
                    await session.flush()
                else:
                    account = await self.accounts.get_for_update(session, account.id_credit_account)
                    if account is None:
                        raise ConflictException(
                            "La cuenta dejó de existir durante la operación.",
                            code="CREDIT_ACCOUNT_CHANGED",
                        )

                entry = CreditEntry(
                    id_agency=ctx.id_agency,
                    agency_credit_entry_id=await next_agency_counter(session, ctx.id_agency, "credit_entry"),
                    account=account,
                    created_by=ctx.id_user,
                    concept=concept,
                    amount=signed,
                    currency=currency,
                    doc_type=doc_type,
                    reference=(payload.reference or "").strip() or None,
                    value_date=value_date,
                    booking_id=payload.booking_id,
                    receipt_id=payload.receipt_id,
                    investment_id=payload.investment_id,
                    operator_due_id=payload.operator_due_id,
                )
                account.balance = money(account.balance + signed)
                session.add(entry)
                await session.flush()
        except SQLAlchemyError:
            logger.exception("Credit entry create failed: agency=%s", ctx.id_agency)
            raise InternalServerException("Error al crear movimiento.", code="CREDIT_ENTRY_ERROR")

        credit_entries_total.labels(operation="create").inc()
        logger.info(
            "Credit entry created: agency=%s account=%s entry=%s amount=%+.2f balance=%.2f doc_type=%s",
            ctx.id_agency, account.id_credit_account, entry.id_entry, signed, account.balance, doc_type,
        )
        return entry

    # ------------------------------------------------------------------
    # Edición
    # ------------------------------------------------------------------
    async def update_entry(
        self,
        session: AsyncSession,
        ctx: AuthContext,
        entry_id: int,
        payload: CreditEntryUpdateRequest,
    ) -> CreditEntry:
        self.ensure_can(ctx, Action.CREDIT_ENTRY_EDIT)
        entry = await self.get_entry(session, ctx, entry_id)

        present = [f for f in UPDATABLE_FIELDS if f in payload.model_fields_set]
        changes: dict[str, object] = {}

        if "concept" in present:
            concept = (payload.concept or "").strip()
            if not concept:
                raise _bad_request("concept no puede ser vacío.", "CREDIT_CONCEPT_REQUIRED")
            changes["concept"] = concept

        if "value_date" in present:
            raw = (payload.value_date or "").strip()
            if not raw:
                changes["value_date"] = None
            else:
                parsed = parse_ymd(raw)
                if parsed is None:
                    raise _bad_request("value_date inválida (YYYY-MM-DD).", "CREDIT_VALUE_DATE_INVALID")
                changes["value_date"] = parsed

        if "doc_type" in present:
            changes["doc_type"] = (payload.doc_type or "").strip() or DEFAULT_DOC_TYPE

        if "reference" in present:
            changes["reference"] = (payload.reference or "").strip() or None

        if not changes:
            raise _bad_request(
                "No hay campos para actualizar",
                "CREDIT_UPDATE_EMPTY",
                "Enviá concept, value_date, doc_type o reference.",
            )

        try:
            async with transactional(session):
                fresh = await self.entries.get_for_update(session, entry.id_entry)
                if fresh is None:
                    raise ConflictException(
                        "El movimiento dejó de existir durante la operación.",
                        code="CREDIT_ENTRY_CHANGED",
                    )

                old_sign = sign_for_doc_type(fresh.doc_type)
                new_sign = sign_for_doc_type(changes.get("doc_type", fresh.doc_type))  # type: ignore[arg-type]
                if old_sign != new_sign:
                    account = await self.accounts.get_for_update(session, fresh.account_id)
                    if account is None:
                        raise ConflictException(
                            "La cuenta dejó de existir durante la operación.",
                            code="CREDIT_ACCOUNT_CHANGED",
                        )
                    flipped = -fresh.amount
                    account.balance = money(account.balance + (flipped - fresh.amount))
                    fresh.amount = flipped
                    logger.info(
                        "Credit entry sign flipped: entry=%s account=%s amount=%+.2f balance=%.2f",
                        fresh.id_entry, account.id_credit_account, flipped, account.balance,
                    )

                for field, value in changes.items():
                    setattr(fresh, field, value)
                await session.flush()
        except SQLAlchemyError:
            logger.exception("Credit entry update failed: entry=%s", entry_id)
            raise InternalServerException("Error actualizando el movimiento.", code="CREDIT_ENTRY_ERROR")

        credit_entries_total.labels(operation="update").inc()
        logger.info("Credit entry updated: entry=%s fields=%s", fresh.id_entry, sorted(changes))
        return fresh

    # ------------------------------------------------------------------
    # Baja
    # ------------------------------------------------------------------
    async def delete_entry(self, session: AsyncSession, ctx: AuthContext, entry_id: int) -> DeletedEntry:
        self.ensure_can(ctx, Action.CREDIT_ENTRY_DELETE)
        entry = await self.get_entry(session, ctx, entry_id)

        if entry.is_linked:
            raise ConflictException(
                "No se puede eliminar: el movimiento está vinculado a otro documento.",
                code="CREDIT_ENTRY_LINKED",
                solution="Revertí desde el flujo original o generá un contra-asiento.",
            )

        try:
            async with transactional(session):
                fresh = await self.entries.get_for_update(session, entry.id_entry)
                if fresh is None or fresh.is_linked:
                    raise ConflictException(
                        "El movimiento cambió durante la operación.",
                        code="CREDIT_ENTRY_CHANGED",
                    )
                account = await self.accounts.get_for_update(session, fresh.account_id)
                if account is None:
                    raise ConflictException(
                        "La cuenta dejó de existir durante la operación.",
                        code="CREDIT_ACCOUNT_CHANGED",
                    )

                account.balance = money(account.balance - fresh.amount)
                result = DeletedEntry(
                    id_entry=fresh.id_entry,
                    account_id=account.id_credit_account,
                    balance=account.balance,
                )
                await self.entries.delete(session, fresh)
        except SQLAlchemyError:
            logger.exception("Credit entry delete failed: entry=%s", entry_id)
            raise InternalServerException("Error eliminando el movimiento.", code="CREDIT_ENTRY_ERROR")

        credit_entries_total.labels(operation="delete").inc()
        logger.info(
            "Credit entry deleted: agency=%s account=%s entry=%s balance=%.2f",
            ctx.id_agency, result.account_id, result.id_entry, result.balance,
        )
        return result


@dataclass
class AdjustResult:
    changed: bool
    account: CreditAccount
    entry: Optional[CreditEntry]
    previous_balance: Decimal
    target_balance: Decimal
    delta: Decimal


class CreditAccountService(CreditEntryService):
    """
    Servicio para cuentas corrientes: alta con saldo inicial, habilitación,
    límite de crédito y ajuste de saldo a un objetivo.

    Todo cambio de saldo pasa por un movimiento, así que el saldo inicial
    y los ajustes también dejan asiento.
    """

    RECENT_ENTRIES = 20

    async def list_accounts(
        self,
        session: AsyncSession,
        ctx: AuthContext,
        *,
        filters: CreditAccountFilters,
        take: int,
        cursor: Optional[int] = None,
    ) -> tuple[Sequence[CreditAccount], Optional[int]]:
        self.ensure_can(ctx, Action.CREDITS_ACCESS)
        filters.currency = _currency_filter(filters.currency)
        return await self.accounts.list_page(
            session,
            id_agency=ctx.id_agency,
            filters=filters,
            take=take,
            cursor=cursor,
        )

    async def recent_entries(
        self,
        session: AsyncSession,
        ctx: AuthContext,
        account: CreditAccount,
    ) -> Sequence[CreditEntry]:
        return await self.entries.recent_for_account(
            session,
            id_agency=ctx.id_agency,
            account_id=account.id_credit_account,
            limit=self.RECENT_ENTRIES,
        )

    async def create_account(
        self,
        session: AsyncSession,
        ctx: AuthContext,
        payload: CreditAccountCreateRequest,
    ) -> tuple[CreditAccount, bool]:
        """
        Alta idempotente por (agencia, titular, moneda).

        Returns:
            (cuenta, creada). Si ya existía se devuelve tal cual y no se
            toca su saldo.
        """
        self.ensure_can(ctx, Action.CREDITS_ACCESS)

        raw_currency = (payload.currency or "").strip()
        if not raw_currency:
            raise _bad_request("currency es obligatorio.", "CREDIT_CURRENCY_REQUIRED")
        currency = resolve_currency(raw_currency)
        if currency is None:
            raise _bad_request(f"Moneda inválida: {raw_currency}.", "CREDIT_CURRENCY_INVALID")

        await self._ensure_subject(session, ctx, payload.client_id, payload.operator_id)

        existing = await self.accounts.find_for_subject(
            session,
            id_agency=ctx.id_agency,
            currency=currency,
            client_id=payload.client_id,
            operator_id=payload.operator_id,
        )
        if existing is not None:
            return existing, False

        initial = money(payload.initial_balance or ZERO)

        try:
            async with transactional(session):
                account = CreditAccount(
                    id_agency=ctx.id_agency,
                    agency_credit_account_id=await next_agency_counter(
                        session, ctx.id_agency, "credit_account"
                    ),
                    client_id=payload.client_id,
                    operator_id=payload.operator_id,
                    currency=currency,
                    balance=ZERO,
                    credit_limit=money(payload.credit_limit) if payload.credit_limit is not None else None,
                    enabled=True if payload.enabled is None else payload.enabled,
                )
                session.add(account)
                await session.flush()

                if initial != ZERO:
                    await self._post_adjustment(
                        session,
                        ctx,
                        account,
                        initial,
                        concept="Saldo inicial",
                        reference="INITIAL-BALANCE",
                    )
        except SQLAlchemyError:
            logger.exception("Credit account create failed: agency=%s", ctx.id_agency)
            raise InternalServerException("Error al crear cuenta de crédito.", code="CREDIT_ACCOUNT_ERROR")

        logger.info(
            "Credit account created: agency=%s account=%s %s currency=%s balance=%.2f",
            ctx.id_agency, account.id_credit_account, account.subject_type, currency, account.balance,
        )
        return account, True

    async def update_account(
        self,
        session: AsyncSession,
        ctx: AuthContext,
        account_id: int,
        payload: CreditAccountUpdateRequest,
    ) -> CreditAccount:
        """Habilita/deshabilita la cuenta o cambia su límite (`credit_limit: null` lo quita)."""
        account = await self.get_account(session, ctx, account_id)

        changes: dict[str, object] = {}
        if "enabled" in payload.model_fields_set and payload.enabled is not None:
            changes["enabled"] = payload.enabled
        if "credit_limit" in payload.model_fields_set:
            changes["credit_limit"] = money(payload.credit_limit) if payload.credit_limit is not None else None
        if not changes:
            raise _bad_request(
                "Nada para actualizar.",
                "CREDIT_UPDATE_EMPTY",
                "Enviá enabled o credit_limit.",
            )

        try:
            async with transactional(session):
                fresh = await self.accounts.get_for_update(session, account.id_credit_account)
                if fresh is None:
                    raise ConflictException(
                        "La cuenta dejó de existir durante la operación.",
                        code="CREDIT_ACCOUNT_CHANGED",
                    )
                for field, value in changes.items():
                    setattr(fresh, field, value)
                await session.flush()
        except SQLAlchemyError:
            logger.exception("Credit account update failed: account=%s", account_id)
            raise InternalServerException("Error al actualizar la cuenta.", code="CREDIT_ACCOUNT_ERROR")

        logger.info("Credit account updated: account=%s fields=%s", fresh.id_credit_account, sorted(changes))
        return fresh

    async def delete_account(self, session: AsyncSession, ctx: AuthContext, account_id: int) -> int:
        """Solo cuentas sin movimientos; con historial se deshabilitan."""
        account = await self.get_account(session, ctx, account_id)
        if await self.accounts.count_entries(session, account.id_credit_account) > 0:
            raise ConflictException(
                "No se puede eliminar: la cuenta tiene movimientos.",
                code="CREDIT_ACCOUNT_HAS_ENTRIES",
                solution="Deshabilitá la cuenta en lugar de eliminarla.",
            )

        try:
            async with transactional(session):
                await self.accounts.delete(session, account)
        except SQLAlchemyError:
            logger.exception("Credit account delete failed: account=%s", account_id)
            raise InternalServerException("Error al eliminar la cuenta.", code="CREDIT_ACCOUNT_ERROR")

        logger.info("Credit account deleted: agency=%s account=%s", ctx.id_agency, account_id)
        return account_id

    async def adjust_balance(
        self,
        session: AsyncSession,
        ctx: AuthContext,
        account_id: int,
        payload: CreditAccountAdjustRequest,
    ) -> AdjustResult:
        """
        Lleva el saldo a `target_balance` con un único movimiento por la
        diferencia: adjust_up si sube, adjust_down si baja. Sin diferencia
        no se genera asiento.

        El saldo actual se lee con la fila bloqueada, así que la diferencia
        se calcula contra el último saldo confirmado.
        """
        self.ensure_can(ctx, Action.CREDIT_ENTRY_EDIT)

        if payload.target_balance is None:
            raise _bad_request(
                "target_balance es obligatorio y debe ser un número válido.",
                "CREDIT_ADJUST_TARGET_REQUIRED",
            )
        reason = (payload.reason or "").strip()
        if not reason:
            raise _bad_request("reason es obligatorio.", "CREDIT_ADJUST_REASON_REQUIRED")
        value_date = None
        if payload.value_date:
            value_date = parse_ymd(payload.value_date)
            if value_date is None:
                raise _bad_request("value_date inválida (YYYY-MM-DD).", "CREDIT_VALUE_DATE_INVALID")

        account = await self.get_account(session, ctx, account_id)
        target = money(payload.target_balance)

        try:
            async with transactional(session):
                fresh = await self.accounts.get_for_update(session, account.id_credit_account)
                if fresh is None:
                    raise ConflictException(
                        "La cuenta dejó de existir durante la operación.",
                        code="CREDIT_ACCOUNT_CHANGED",
                    )
                previous = money(fresh.balance)
                delta = money(target - previous)
                entry = None
                if delta != ZERO:
                    entry = await self._post_adjustment(
                        session,
                        ctx,
                        fresh,
                        delta,
                        concept=f"Ajuste manual: {reason}",
                        reference=(payload.reference or "").strip() or "MANUAL-ADJUST",
                        value_date=value_date,
                    )
        except SQLAlchemyError:
            logger.exception("Credit account adjust failed: account=%s", account_id)
            raise InternalServerException("Error al ajustar el saldo.", code="CREDIT_ACCOUNT_ERROR")

        if entry is not None:
            credit_entries_total.labels(operation="adjust").inc()
        logger.info(
            "Credit account adjusted: agency=%s account=%s previous=%.2f target=%.2f delta=%+.2f entry=%s",
            ctx.id_agency, fresh.id_credit_account, previous, target, delta,
            entry.id_entry if entry is not None else None,
        )
        return AdjustResult(
            changed=entry is not None,
            account=fresh,
            entry=entry,
            previous_balance=previous,
            target_balance=target,
            delta=delta,
        )

    async def _post_adjustment(
        self,
        session: AsyncSession,
        ctx: AuthContext,
        account: CreditAccount,
        delta: Decimal,
        *,
        concept: str,
        reference: str,
        value_date: Optional[date] = None,
    ) -> CreditEntry:
        """Movimiento compensatorio por `delta` dentro de la unidad de trabajo abierta."""
        doc_type = "adjust_up" if delta > ZERO else "adjust_down"
        signed = abs(delta) * sign_for_doc_type(doc_type)
        entry = CreditEntry(
            id_agency=ctx.id_agency,
            agency_credit_entry_id=await next_agency_counter(session, ctx.id_agency, "credit_entry"),
            account=account,
            created_by=ctx.id_user,
            concept=concept,
            amount=signed,
            currency=account.currency,
            doc_type=doc_type,
            reference=reference,
            value_date=value_date,
        )
        account.balance = money(account.balance + signed)
        session.add(entry)
        await session.flush()
        return entry


__all__ = [
    "AdjustResult",
    "CreditAccountService",
    "CreditEntryService",
    "DeletedEntry",
    "UPDATABLE_FIELDS",
]
# Fin del archivo backend/app/modules/credits/services.py

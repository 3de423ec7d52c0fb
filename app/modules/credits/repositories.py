# -*- coding: utf-8 -*-
"""
backend/app/modules/credits/repositories.py

Repositorios para la cuenta corriente.

Autor: TurisCore
Fecha: 2026-09-07
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from sqlalchemy import and_, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.database.repository import BaseRepository
from .enums import CreditSubjectType
from .models import CreditAccount, CreditEntry

logger = logging.getLogger(__name__)


class CreditAccountRepository(BaseRepository[CreditAccount]):
    """Repositorio de cuentas corrientes."""

    def __init__(self) -> None:
        super().__init__(CreditAccount)

    async def get_for_update(self, session: AsyncSession, account_id: int) -> Optional[CreditAccount]:
        """
        Relee la cuenta bloqueando la fila (FOR UPDATE en Postgres).

        populate_existing: el saldo en memoria puede venir de una lectura
        previa a la transacción.
        """
        stmt = (
            select(CreditAccount)
            .where(CreditAccount.id_credit_account == account_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return (await session.execute(stmt)).scalar_one_or_none()

    async def find_for_subject(
        self,
        session: AsyncSession,
        *,
        id_agency: int,
        currency: str,
        client_id: Optional[int] = None,
        operator_id: Optional[int] = None,
    ) -> Optional[CreditAccount]:
        stmt = select(CreditAccount).where(
            CreditAccount.id_agency == id_agency,
            CreditAccount.currency == currency,
        )
        if client_id is not None:
            stmt = stmt.where(CreditAccount.client_id == client_id, CreditAccount.operator_id.is_(None))
        else:
            stmt = stmt.where(CreditAccount.operator_id == operator_id, CreditAccount.client_id.is_(None))
        stmt = stmt.order_by(CreditAccount.id_credit_account).limit(1)
        return (await session.execute(stmt)).scalar_one_or_none()

    async def list_page(
        self,
        session: AsyncSession,
        *,
        id_agency: int,
        filters: CreditAccountFilters,
        take: int,
        cursor: Optional[int] = None,
    ) -> tuple[Sequence[CreditAccount], Optional[int]]:
        """Página de cuentas (updated_at desc, id desc); cursor = id de la última cuenta."""
        stmt = select(CreditAccount).where(CreditAccount.id_agency == id_agency)
        if filters.client_id is not None:
            stmt = stmt.where(CreditAccount.client_id == filters.client_id)
        if filters.operator_id is not None:
            stmt = stmt.where(CreditAccount.operator_id == filters.operator_id)
        if filters.currency:
            stmt = stmt.where(CreditAccount.currency == filters.currency)
        if filters.enabled is not None:
            stmt = stmt.where(CreditAccount.enabled == filters.enabled)

        if cursor is not None:
            anchor = await session.get(CreditAccount, cursor)
            if anchor is not None and anchor.id_agency == id_agency:
                stmt = stmt.where(
                    or_(
                        CreditAccount.updated_at < anchor.updated_at,
                        and_(
                            CreditAccount.updated_at == anchor.updated_at,
                            CreditAccount.id_credit_account < anchor.id_credit_account,
                        ),
                    )
                )

        stmt = stmt.order_by(
            CreditAccount.updated_at.desc(), CreditAccount.id_credit_account.desc()
        ).limit(take + 1)
        rows = (await session.execute(stmt)).scalars().all()

        has_more = len(rows) > take
        items = rows[:take]
        next_cursor = items[-1].id_credit_account if has_more and items else None
        return items, next_cursor

    async def count_entries(self, session: AsyncSession, account_id: int) -> int:
        stmt = select(func.count(CreditEntry.id_entry)).where(CreditEntry.account_id == account_id)
        return int(await session.scalar(stmt) or 0)


@dataclass
class CreditAccountFilters:
    client_id: Optional[int] = None
    operator_id: Optional[int] = None
    currency: Optional[str] = None
    enabled: Optional[bool] = None


@dataclass
class CreditEntryFilters:
    account_id: Optional[int] = None
    client_id: Optional[int] = None
    operator_id: Optional[int] = None
    currency: Optional[str] = None
    doc_type: Optional[str] = None
    subject_type: Optional[CreditSubjectType] = None
    investment_id: Optional[int] = None


class CreditEntryRepository(BaseRepository[CreditEntry]):
    """Repositorio de movimientos."""

    def __init__(self) -> None:
        super().__init__(CreditEntry)

    async def get_for_update(self, session: AsyncSession, entry_id: int) -> Optional[CreditEntry]:
        stmt = (
            select(CreditEntry)
            .where(CreditEntry.id_entry == entry_id)
            .with_for_update(of=CreditEntry)
            .execution_options(populate_existing=True)
        )
        return (await session.execute(stmt)).unique().scalar_one_or_none()

    async def recent_for_account(
        self,
        session: AsyncSession,
        *,
        id_agency: int,
        account_id: int,
        limit: int = 20,
    ) -> Sequence[CreditEntry]:
        stmt = (
            select(CreditEntry)
            .where(CreditEntry.account_id == account_id, CreditEntry.id_agency == id_agency)
            .order_by(CreditEntry.created_at.desc(), CreditEntry.id_entry.desc())
            .limit(limit)
        )
        return (await session.execute(stmt)).unique().scalars().all()

    async def list_page(
        self,
        session: AsyncSession,
        *,
        id_agency: int,
        filters: CreditEntryFilters,
        take: int,
        cursor: Optional[int] = None,
    ) -> tuple[Sequence[CreditEntry], Optional[int]]:
        """
        Página de movimientos (created_at desc, id desc).

        `cursor` es el id del último movimiento de la página anterior.
        Devuelve (items, next_cursor).
        """
        stmt = (
            select(CreditEntry)
            .join(CreditEntry.account)
            .where(CreditEntry.id_agency == id_agency)
        )
        if filters.account_id is not None:
            stmt = stmt.where(CreditEntry.account_id == filters.account_id)
        if filters.currency:
            stmt = stmt.where(CreditEntry.currency == filters.currency)
        if filters.doc_type:
            stmt = stmt.where(CreditEntry.doc_type == filters.doc_type)
        if filters.investment_id is not None:
            stmt = stmt.where(CreditEntry.investment_id == filters.investment_id)
        if filters.client_id is not None:
            stmt = stmt.where(CreditAccount.client_id == filters.client_id)
        if filters.operator_id is not None:
            stmt = stmt.where(CreditAccount.operator_id == filters.operator_id)
        if filters.subject_type == CreditSubjectType.CLIENT:
            stmt = stmt.where(CreditAccount.client_id.is_not(None))
        elif filters.subject_type == CreditSubjectType.OPERATOR:
            stmt = stmt.where(CreditAccount.operator_id.is_not(None))

        if cursor is not None:
            anchor = await session.get(CreditEntry, cursor)
            if anchor is not None and anchor.id_agency == id_agency:
                stmt = stmt.where(
                    or_(
                        CreditEntry.created_at < anchor.created_at,
                        and_(
                            CreditEntry.created_at == anchor.created_at,
                            CreditEntry.id_entry < anchor.id_entry,
                        ),
                    )
                )

        stmt = stmt.order_by(CreditEntry.created_at.desc(), CreditEntry.id_entry.desc()).limit(take + 1)
        rows = (await session.execute(stmt)).unique().scalars().all()

        has_more = len(rows) > take
        items = rows[:take]
        next_cursor = items[-1].id_entry if has_more and items else None
        return items, next_cursor


__all__ = [
    "CreditAccountFilters",
    "CreditAccountRepository",
    "CreditEntryFilters",
    "CreditEntryRepository",
]
# Fin del archivo backend/app/modules/credits/repositories.py

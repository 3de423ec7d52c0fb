# -*- coding: utf-8 -*-
"""
backend/app/modules/files/repositories/storage_usage_repository.py

Configuración y contadores de uso de almacenamiento por agencia.

Autor: TurisCore
Fecha: 2026-09-10
"""

from __future__ import annotations

from datetime import date
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.files.models import AgencyStorageConfig, AgencyStorageUsage


def month_start(today: date) -> date:
    return today.replace(day=1)


async def get_config(session: AsyncSession, id_agency: int) -> Optional[AgencyStorageConfig]:
    stmt = select(AgencyStorageConfig).where(AgencyStorageConfig.id_agency == id_agency)
    return (await session.execute(stmt)).scalar_one_or_none()


async def ensure_usage(
    session: AsyncSession,
    id_agency: int,
    *,
    today: date,
    for_update: bool = False,
) -> AgencyStorageUsage:
    """
    Fila de uso de la agencia; la crea si falta y reinicia la transferencia
    al cambiar de mes. No hace commit.
    """
    stmt = select(AgencyStorageUsage).where(AgencyStorageUsage.id_agency == id_agency)
    if for_update:
        stmt = stmt.with_for_update().execution_options(populate_existing=True)
    usage = (await session.execute(stmt)).scalar_one_or_none()

    month = month_start(today)
    if usage is None:
        usage = AgencyStorageUsage(
            id_agency=id_agency,
            storage_bytes=0,
            transfer_bytes=0,
            transfer_month=month,
        )
        session.add(usage)
        await session.flush()
    elif usage.transfer_month < month:
        usage.transfer_month = month
        usage.transfer_bytes = 0
    return usage


__all__ = ["month_start", "get_config", "ensure_usage"]

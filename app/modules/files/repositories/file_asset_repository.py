# -*- coding: utf-8 -*-
"""
backend/app/modules/files/repositories/file_asset_repository.py

Repositorio async para `file_assets`.

Responsabilidades:
- Lectura por agencia (toda consulta filtra por id_agency).
- Listado de archivos activos de un destino.
- Purga de filas pending vencidas y suma de bytes pending vigentes.

Autor: TurisCore
Fecha: 2026-09-10
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.files.enums import FileStatus
from app.modules.files.models import FileAsset


async def get_for_agency(
    session: AsyncSession,
    *,
    id_agency: int,
    file_id: int,
) -> Optional[FileAsset]:
    stmt = select(FileAsset).where(FileAsset.id_file == file_id, FileAsset.id_agency == id_agency)
    return (await session.execute(stmt)).scalar_one_or_none()


async def get_for_update(session: AsyncSession, file_id: int) -> Optional[FileAsset]:
    """Relee la fila bloqueándola; populate_existing pisa el estado en memoria."""
    stmt = (
        select(FileAsset)
        .where(FileAsset.id_file == file_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    return (await session.execute(stmt)).scalar_one_or_none()


async def list_active_for_target(
    session: AsyncSession,
    *,
    id_agency: int,
    booking_id: Optional[int] = None,
    client_id: Optional[int] = None,
    service_id: Optional[int] = None,
) -> Sequence[FileAsset]:
    """Archivos activos del destino, más nuevos primero."""
    stmt = select(FileAsset).where(
        FileAsset.id_agency == id_agency,
        FileAsset.status == FileStatus.ACTIVE.value,
    )
    if service_id is not None:
        stmt = stmt.where(FileAsset.service_id == service_id)
    elif client_id is not None:
        stmt = stmt.where(FileAsset.client_id == client_id)
    elif booking_id is not None:
        stmt = stmt.where(FileAsset.booking_id == booking_id)
    stmt = stmt.order_by(FileAsset.created_at.desc(), FileAsset.id_file.desc())
    return (await session.execute(stmt)).scalars().all()


async def purge_expired_pending(session: AsyncSession, *, cutoff: datetime) -> int:
    """
    Borra filas pending creadas antes de `cutoff` (todas las agencias).
    Devuelve la cantidad borrada.
    """
    stmt = (
        delete(FileAsset)
        .where(FileAsset.status == FileStatus.PENDING.value, FileAsset.created_at < cutoff)
        .execution_options(synchronize_session=False)
    )
    result = await session.execute(stmt)
    return int(result.rowcount or 0)


async def sum_pending_bytes(session: AsyncSession, *, id_agency: int, since: datetime) -> int:
    """Bytes de subidas pending todavía vigentes (creadas desde `since`)."""
    stmt = select(func.coalesce(func.sum(FileAsset.size_bytes), 0)).where(
        FileAsset.id_agency == id_agency,
        FileAsset.status == FileStatus.PENDING.value,
        FileAsset.created_at >= since,
    )
    return int((await session.execute(stmt)).scalar_one())


__all__ = [
    "get_for_agency",
    "get_for_update",
    "list_active_for_target",
    "purge_expired_pending",
    "sum_pending_bytes",
]

# -*- coding: utf-8 -*-
"""
backend/app/shared/database/unit_of_work.py

Unidad de trabajo explícita sobre una AsyncSession.

Todas las mutaciones financieras multi-fila (ledger, planes masivos, cobros
masivos, archivos) se ejecutan dentro de `transactional(session)`:
commit al salir sin error, rollback ante cualquier excepción. No hay
reintentos automáticos: un fallo aborta la operación completa.

Uso:

    async with transactional(session):
        await repo.create(session, ...)
        await other_repo.update(session, ...)

Autor: TurisCore
Fecha: 2026-09-03
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)


@asynccontextmanager
async def transactional(session: AsyncSession) -> AsyncIterator[AsyncSession]:
    """
    Abre una unidad de trabajo: commit al salir, rollback ante error.

    Las lecturas previas de validación pueden haber iniciado ya la
    transacción implícita de la sesión; se reutiliza esa misma transacción.
    """
    try:
        yield session
        await session.commit()
    except BaseException:
        await session.rollback()
        logger.debug("Unit of work revertida")
        raise


__all__ = ["transactional"]
# Fin del archivo backend/app/shared/database/unit_of_work.py

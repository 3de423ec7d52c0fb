# -*- coding: utf-8 -*-
"""
backend/app/shared/database/repository.py

Repositorio base para operaciones async con SQLAlchemy.

Autor: TurisCore
Fecha: 2026-09-03
"""

from typing import Any, Type, TypeVar, Generic, Sequence, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

T = TypeVar("T")  # modelo ORM


class BaseRepository(Generic[T]):
    """Repositorio asincrónico base para CRUD común."""

    def __init__(self, model: Type[T]):
        self.model = model

    # -------------------------------------------------------------
    # CRUD básico
    # -------------------------------------------------------------
    async def get(self, session: AsyncSession, obj_id: Any) -> Optional[T]:
        return await session.get(self.model, obj_id)

    async def list(self, session: AsyncSession) -> Sequence[T]:
        result = await session.execute(select(self.model))
        return result.scalars().all()

    async def create(self, session: AsyncSession, **kwargs) -> T:
        obj = self.model(**kwargs)
        session.add(obj)
        await session.flush()
        return obj

    async def delete(self, session: AsyncSession, obj: T) -> None:
        await session.delete(obj)
        await session.flush()

    # -------------------------------------------------------------
    # Multi-tenant: todo lo que cuelga de una agencia
    # -------------------------------------------------------------
    async def get_for_agency(
        self,
        session: AsyncSession,
        obj_id: Any,
        id_agency: int,
    ) -> Optional[T]:
        """Obtiene por PK solo si pertenece a la agencia indicada."""
        obj = await session.get(self.model, obj_id)
        if obj is None or getattr(obj, "id_agency", None) != id_agency:
            return None
        return obj

# Fin del archivo backend/app/shared/database/repository.py

# -*- coding: utf-8 -*-
"""
backend/app/shared/database/agency_counters.py

Contadores correlativos por agencia (recibos, cuotas, cuentas de crédito,
archivos, plantillas). El número visible para la agencia (`agency_*_id`)
sale de aquí; la PK global sigue siendo autoincremental.

Debe llamarse dentro de la misma unidad de trabajo que inserta la fila
numerada, para que un rollback no deje huecos consumidos.

Autor: TurisCore
Fecha: 2026-09-03
"""

from __future__ import annotations

from sqlalchemy import Integer, String, UniqueConstraint, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Mapped, mapped_column

from app.shared.database.base import Base


class AgencyCounter(Base):
    """Último valor emitido por (agencia, clave)."""

    __tablename__ = "agency_counters"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    id_agency: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    key: Mapped[str] = mapped_column(String(64), nullable=False)
    last_value: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __table_args__ = (
        UniqueConstraint("id_agency", "key", name="uq_agency_counters_agency_key"),
    )

    def __repr__(self) -> str:  # pragma: no cover - representacional
        return f"<AgencyCounter agency={self.id_agency} key={self.key} last={self.last_value}>"


async def next_agency_counter(session: AsyncSession, id_agency: int, key: str) -> int:
    """
    Devuelve el siguiente número correlativo para (agencia, clave).

    Bloquea la fila del contador (FOR UPDATE en Postgres) para que dos
    transacciones concurrentes no emitan el mismo número.
    """
    stmt = (
        select(AgencyCounter)
        .where(AgencyCounter.id_agency == id_agency, AgencyCounter.key == key)
        .with_for_update()
    )
    counter = (await session.execute(stmt)).scalar_one_or_none()
    if counter is None:
        counter = AgencyCounter(id_agency=id_agency, key=key, last_value=0)
        session.add(counter)

    counter.last_value = (counter.last_value or 0) + 1
    await session.flush()
    return counter.last_value


__all__ = ["AgencyCounter", "next_agency_counter"]
# Fin del archivo backend/app/shared/database/agency_counters.py

# -*- coding: utf-8 -*-
"""
backend/app/modules/groups/repositories.py

Repositorios de grupales, pasajeros y plantillas de pago.

Autor: TurisCore
Fecha: 2026-09-08
"""

from __future__ import annotations

from typing import Iterable, Optional, Sequence

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.database.repository import BaseRepository
from .models import TravelGroup, TravelGroupPassenger, TravelGroupPaymentTemplate


class TravelGroupRepository(BaseRepository[TravelGroup]):
    def __init__(self) -> None:
        super().__init__(TravelGroup)


class TravelGroupPassengerRepository(BaseRepository[TravelGroupPassenger]):
    def __init__(self) -> None:
        super().__init__(TravelGroupPassenger)

    async def list_for_group(
        self,
        session: AsyncSession,
        *,
        id_agency: int,
        group_id: int,
        passenger_ids: Iterable[int],
    ) -> Sequence[TravelGroupPassenger]:
        """Pasajeros de la grupal entre los ids pedidos (los ajenos se omiten)."""
        ids = list(set(passenger_ids))
        if not ids:
            return []
        stmt = (
            select(TravelGroupPassenger)
            .where(
                TravelGroupPassenger.id_agency == id_agency,
                TravelGroupPassenger.travel_group_id == group_id,
                TravelGroupPassenger.id_travel_group_passenger.in_(ids),
            )
            .order_by(TravelGroupPassenger.id_travel_group_passenger)
        )
        return (await session.execute(stmt)).scalars().all()


class PaymentTemplateRepository(BaseRepository[TravelGroupPaymentTemplate]):
    def __init__(self) -> None:
        super().__init__(TravelGroupPaymentTemplate)

    async def get_active(
        self,
        session: AsyncSession,
        *,
        id_agency: int,
        template_id: int,
    ) -> Optional[TravelGroupPaymentTemplate]:
        stmt = select(TravelGroupPaymentTemplate).where(
            TravelGroupPaymentTemplate.id_travel_group_payment_template == template_id,
            TravelGroupPaymentTemplate.id_agency == id_agency,
            TravelGroupPaymentTemplate.is_active.is_(True),
        )
        return (await session.execute(stmt)).scalar_one_or_none()

    async def list_for_agency(
        self,
        session: AsyncSession,
        *,
        id_agency: int,
        target_type: Optional[str] = None,
        include_inactive: bool = False,
    ) -> Sequence[TravelGroupPaymentTemplate]:
        stmt = select(TravelGroupPaymentTemplate).where(TravelGroupPaymentTemplate.id_agency == id_agency)
        if target_type:
            stmt = stmt.where(
                or_(
                    TravelGroupPaymentTemplate.target_type == target_type,
                    TravelGroupPaymentTemplate.target_type.is_(None),
                )
            )
        if not include_inactive:
            stmt = stmt.where(TravelGroupPaymentTemplate.is_active.is_(True))
        stmt = stmt.order_by(
            TravelGroupPaymentTemplate.is_preloaded.desc(),
            TravelGroupPaymentTemplate.name.asc(),
        )
        return (await session.execute(stmt)).scalars().all()


__all__ = [
    "TravelGroupRepository",
    "TravelGroupPassengerRepository",
    "PaymentTemplateRepository",
]
# Fin del archivo backend/app/modules/groups/repositories.py

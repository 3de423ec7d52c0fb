# -*- coding: utf-8 -*-
"""
backend/app/modules/groups/models.py

Modelos ORM de grupales:

- TravelGroup: la grupal (tipo, estado, fecha de salida)
- TravelGroupPassenger: pasajero de la grupal, vinculado a reserva + cliente
- TravelGroupPaymentTemplate: plantilla de cuotas relativas por agencia

Las cuotas de una plantilla se guardan como JSON
`[{due_in_days, amount, currency}]`. Generar un plan copia esos valores;
editar la plantilla después no toca cuotas ya generadas.

Autor: TurisCore
Fecha: 2026-09-08
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional

from sqlalchemy import Boolean, Date, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.shared.database.base import Base, JSONType
from app.shared.utils.time_utils import utcnow
from .enums import TravelGroupStatus, TravelGroupType


class TravelGroup(Base):
    __tablename__ = "travel_groups"

    id_travel_group: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    id_agency: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    agency_travel_group_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    name: Mapped[str] = mapped_column(String(160), nullable=False)
    type: Mapped[str] = mapped_column(String(16), nullable=False, default=TravelGroupType.AGENCIA.value)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default=TravelGroupStatus.BORRADOR.value)
    start_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)

    def __repr__(self) -> str:
        return f"<TravelGroup id={self.id_travel_group} {self.name!r} {self.status}>"


class TravelGroupPassenger(Base):
    __tablename__ = "travel_group_passengers"

    id_travel_group_passenger: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    id_agency: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    travel_group_id: Mapped[int] = mapped_column(
        ForeignKey("travel_groups.id_travel_group", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    booking_id: Mapped[Optional[int]] = mapped_column(ForeignKey("bookings.id_booking"), nullable=True)
    client_id: Mapped[Optional[int]] = mapped_column(ForeignKey("clients.id_client"), nullable=True)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="ACTIVO")

    @property
    def has_target(self) -> bool:
        """Tiene reserva y cliente: se le pueden generar o cobrar cuotas."""
        return bool(self.booking_id and self.client_id)


class TravelGroupPaymentTemplate(Base):
    __tablename__ = "travel_group_payment_templates"

    id_travel_group_payment_template: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    id_agency: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    agency_travel_group_payment_template_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    created_by: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    name: Mapped[str] = mapped_column(String(120), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(String(400), nullable=True)
    target_type: Mapped[Optional[str]] = mapped_column(String(16), nullable=True)
    payment_mode: Mapped[Optional[str]] = mapped_column(String(60), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    is_preloaded: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    assigned_user_ids: Mapped[list[int]] = mapped_column(JSONType, nullable=False, default=list)
    installments: Mapped[list[dict[str, Any]]] = mapped_column(JSONType, nullable=False, default=list)
    # "metadata" está reservado por la API declarativa
    extra: Mapped[Optional[dict[str, Any]]] = mapped_column("metadata", JSONType, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    def is_available_to(self, id_user: int) -> bool:
        """Sin usuarios asignados = disponible para todos."""
        assigned = self.assigned_user_ids or []
        return not assigned or id_user in assigned


__all__ = ["TravelGroup", "TravelGroupPassenger", "TravelGroupPaymentTemplate"]
# Fin del archivo backend/app/modules/groups/models.py

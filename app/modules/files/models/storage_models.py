# -*- coding: utf-8 -*-
"""
backend/app/modules/files/models/storage_models.py

Configuración y uso de almacenamiento por agencia.

- AgencyStorageConfig: habilitación y cantidad de packs contratados
  (cupo = storage_pack_count × FILES_STORAGE_PACK_GB)
- AgencyStorageUsage: bytes almacenados (archivos activos) y bytes
  transferidos en el mes en curso

Autor: TurisCore
Fecha: 2026-09-10
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from sqlalchemy import BigInteger, Boolean, Date, DateTime, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.shared.database import Base
from app.shared.utils.time_utils import utcnow


class AgencyStorageConfig(Base):
    __tablename__ = "agency_storage_configs"

    id_config: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    id_agency: Mapped[int] = mapped_column(Integer, nullable=False, unique=True)
    enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    storage_pack_count: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    transfer_pack_count: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)


class AgencyStorageUsage(Base):
    __tablename__ = "agency_storage_usage"

    id_usage: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    id_agency: Mapped[int] = mapped_column(Integer, nullable=False, unique=True)
    storage_bytes: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    transfer_bytes: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    transfer_month: Mapped[date] = mapped_column(Date, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)


__all__ = ["AgencyStorageConfig", "AgencyStorageUsage"]

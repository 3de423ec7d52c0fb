# -*- coding: utf-8 -*-
"""
backend/app/modules/files/models/file_asset_models.py

Metadatos de un archivo subido a almacenamiento S3 compatible.

El objeto vive en el bucket bajo `storage_key`; la fila se crea como
`pending` al emitir la URL prefirmada y pasa a `active` al confirmar.

Autor: TurisCore
Fecha: 2026-09-10
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import BigInteger, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.shared.database import Base
from app.shared.utils.time_utils import utcnow
from app.modules.files.enums import FileStatus, FileTarget


class FileAsset(Base):
    __tablename__ = "file_assets"

    id_file: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    agency_file_id: Mapped[int] = mapped_column(Integer, nullable=False)
    id_agency: Mapped[int] = mapped_column(Integer, nullable=False, index=True)

    booking_id: Mapped[Optional[int]] = mapped_column(ForeignKey("bookings.id_booking"), nullable=True, index=True)
    client_id: Mapped[Optional[int]] = mapped_column(ForeignKey("clients.id_client"), nullable=True, index=True)
    service_id: Mapped[Optional[int]] = mapped_column(ForeignKey("services.id_service"), nullable=True, index=True)

    original_name: Mapped[str] = mapped_column(Text, nullable=False)
    display_name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    mime_type: Mapped[str] = mapped_column(String(120), nullable=False)
    size_bytes: Mapped[int] = mapped_column(BigInteger, nullable=False)
    storage_key: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default=FileStatus.PENDING.value, index=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
    created_by: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    downloaded_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    download_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __table_args__ = (
        UniqueConstraint("id_agency", "agency_file_id", name="uq_file_assets_agency_file_id"),
    )

    @property
    def target(self) -> FileTarget:
        if self.service_id:
            return FileTarget.SERVICE
        if self.client_id:
            return FileTarget.CLIENT
        return FileTarget.BOOKING

    @property
    def is_active(self) -> bool:
        return self.status == FileStatus.ACTIVE.value

    def __repr__(self) -> str:
        return f"<FileAsset id={self.id_file} {self.status} {self.storage_key!r}>"


__all__ = ["FileAsset"]

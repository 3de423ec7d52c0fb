# -*- coding: utf-8 -*-
"""
backend/app/modules/files/schemas/file_asset_schemas.py

Esquemas Pydantic del módulo Files.

El body de subida acepta snake_case y los nombres cortos / camelCase que
manda el cliente web (name, contentType, size, bookingId, ...). La
validación de negocio (MIME, tamaño, destino) la hace el servicio para
responder con códigos FILE_* propios.

Autor: TurisCore
Fecha: 2026-09-10
"""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class _RequestModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class FileUploadRequest(_RequestModel):
    booking_id: Optional[int] = Field(default=None, validation_alias=AliasChoices("booking_id", "bookingId"))
    client_id: Optional[int] = Field(default=None, validation_alias=AliasChoices("client_id", "clientId"))
    service_id: Optional[int] = Field(default=None, validation_alias=AliasChoices("service_id", "serviceId"))
    file_name: Optional[str] = Field(default=None, validation_alias=AliasChoices("file_name", "name"))
    content_type: Optional[str] = Field(default=None, validation_alias=AliasChoices("content_type", "contentType"))
    size_bytes: Optional[int] = Field(default=None, validation_alias=AliasChoices("size_bytes", "size"))


class FileConfirmRequest(_RequestModel):
    action: Optional[str] = None


class FileAssetOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id_file: int
    agency_file_id: int
    booking_id: Optional[int] = None
    client_id: Optional[int] = None
    service_id: Optional[int] = None
    original_name: str
    display_name: Optional[str] = None
    mime_type: str
    size_bytes: int
    status: str
    created_at: datetime
    downloaded_at: Optional[datetime] = None
    download_count: int = 0


class FileUploadResponse(BaseModel):
    upload_url: str
    headers: Dict[str, str]
    file: FileAssetOut


class FileResponse(BaseModel):
    file: FileAssetOut


class FileListResponse(BaseModel):
    files: List[FileAssetOut]


class FileDeleteResponse(BaseModel):
    success: bool = True


__all__ = [
    "FileUploadRequest",
    "FileConfirmRequest",
    "FileAssetOut",
    "FileUploadResponse",
    "FileResponse",
    "FileListResponse",
    "FileDeleteResponse",
]

# -*- coding: utf-8 -*-
"""
backend/app/modules/files/routes/files_routes.py

Rutas de archivos adjuntos.

Endpoints:
- GET    /files?booking_id|client_id|service_id   archivos activos del destino
- POST   /files                                   preparar subida (URL prefirmada)
- GET    /files/{id}                              detalle
- PATCH  /files/{id}  {"action": "confirm"}       confirmar subida
- DELETE /files/{id}                              borrar objeto y registro

Autor: TurisCore
Fecha: 2026-09-11
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.auth_context import AuthContext, get_auth_context
from app.shared.database.database import get_async_session

from ..schemas import (
    FileAssetOut,
    FileConfirmRequest,
    FileDeleteResponse,
    FileListResponse,
    FileResponse,
    FileUploadRequest,
    FileUploadResponse,
)
from ..services import FileAssetService, ObjectStorageClient, get_storage_client

router = APIRouter(prefix="/files", tags=["files"])


def get_file_service(storage: ObjectStorageClient = Depends(get_storage_client)) -> FileAssetService:
    return FileAssetService(storage=storage)


@router.get("", response_model=FileListResponse, summary="Listar archivos activos de un destino")
async def list_files(
    booking_id: Optional[int] = Query(None, gt=0),
    client_id: Optional[int] = Query(None, gt=0),
    service_id: Optional[int] = Query(None, gt=0),
    session: AsyncSession = Depends(get_async_session),
    auth: AuthContext = Depends(get_auth_context),
) -> FileListResponse:
    # Las consultas no tocan el bucket
    files = await FileAssetService().list_files(
        session,
        auth,
        booking_id=booking_id,
        client_id=client_id,
        service_id=service_id,
    )
    return FileListResponse(files=[FileAssetOut.model_validate(f) for f in files])


@router.post(
    "",
    response_model=FileUploadResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Preparar subida de archivo",
)
async def prepare_upload(
    payload: FileUploadRequest,
    session: AsyncSession = Depends(get_async_session),
    auth: AuthContext = Depends(get_auth_context),
    service: FileAssetService = Depends(get_file_service),
) -> FileUploadResponse:
    ticket = await service.prepare_upload(session, auth, payload)
    return FileUploadResponse(
        upload_url=ticket.upload_url,
        headers=ticket.headers,
        file=FileAssetOut.model_validate(ticket.file),
    )


@router.get("/{file_id}", response_model=FileResponse, summary="Detalle de archivo")
async def get_file(
    file_id: int = Path(..., gt=0),
    session: AsyncSession = Depends(get_async_session),
    auth: AuthContext = Depends(get_auth_context),
) -> FileResponse:
    file = await FileAssetService().get_file(session, auth, file_id)
    return FileResponse(file=FileAssetOut.model_validate(file))


@router.patch("/{file_id}", response_model=FileResponse, summary="Confirmar subida")
async def confirm_file(
    payload: FileConfirmRequest,
    file_id: int = Path(..., gt=0),
    session: AsyncSession = Depends(get_async_session),
    auth: AuthContext = Depends(get_auth_context),
) -> FileResponse:
    file = await FileAssetService().confirm(session, auth, file_id, payload.action)
    return FileResponse(file=FileAssetOut.model_validate(file))


@router.delete("/{file_id}", response_model=FileDeleteResponse, summary="Borrar archivo")
async def delete_file(
    file_id: int = Path(..., gt=0),
    session: AsyncSession = Depends(get_async_session),
    auth: AuthContext = Depends(get_auth_context),
    service: FileAssetService = Depends(get_file_service),
) -> FileDeleteResponse:
    await service.delete(session, auth, file_id)
    return FileDeleteResponse(success=True)


__all__ = ["router", "get_file_service"]
# Fin del archivo backend/app/modules/files/routes/files_routes.py

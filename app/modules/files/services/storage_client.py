# -*- coding: utf-8 -*-
"""
backend/app/modules/files/services/storage_client.py

Cliente de almacenamiento S3 compatible (DigitalOcean Spaces).

Se construye UNA vez al arrancar la app a partir de settings y falla de
inmediato si faltan credenciales o bucket. Las rutas lo reciben como
dependencia (`get_storage_client`), nunca lo crean al importar.

boto3 es síncrono: cada llamada corre en un worker thread vía
anyio.to_thread para no bloquear el event loop.

Autor: TurisCore
Fecha: 2026-09-10
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Protocol, runtime_checkable

import anyio
import boto3
from botocore.client import Config
from botocore.exceptions import BotoCoreError, ClientError
from fastapi import Request

from app.shared.utils.http_exceptions import ApiException

logger = logging.getLogger(__name__)


class StorageConfigurationError(RuntimeError):
    """Faltan credenciales o bucket para el almacenamiento de archivos."""


class StorageOperationError(RuntimeError):
    """Falló una operación contra el bucket (red, credenciales, permisos)."""


class StorageUnavailableException(ApiException):
    default_status = 503
    default_error = "El almacenamiento de archivos no está disponible."
    default_code = "FILES_STORAGE_UNAVAILABLE"
    default_solution = "Reintentá más tarde o avisá al administrador."


@runtime_checkable
class ObjectStorageClient(Protocol):
    """Operaciones de storage que usa el módulo Files."""

    bucket: str

    async def presign_put(self, key: str, content_type: str, expires_in: int) -> str:
        """URL prefirmada para que el navegador suba el objeto con PUT."""
        ...

    async def delete_object(self, key: str) -> None:
        ...


class S3ObjectStorage:
    """Implementación con boto3 sobre un endpoint S3 compatible."""

    def __init__(self, client: Any, bucket: str):
        self._client = client
        self.bucket = bucket

    async def presign_put(self, key: str, content_type: str, expires_in: int) -> str:
        try:
            return await anyio.to_thread.run_sync(
                lambda: self._client.generate_presigned_url(
                    "put_object",
                    Params={"Bucket": self.bucket, "Key": key, "ContentType": content_type},
                    ExpiresIn=expires_in,
                )
            )
        except (BotoCoreError, ClientError) as exc:
            raise StorageOperationError(f"presign_put {key}: {exc}") from exc

    async def delete_object(self, key: str) -> None:
        try:
            await anyio.to_thread.run_sync(
                lambda: self._client.delete_object(Bucket=self.bucket, Key=key)
            )
        except (BotoCoreError, ClientError) as exc:
            raise StorageOperationError(f"delete_object {key}: {exc}") from exc


def build_storage_client(settings: Any) -> S3ObjectStorage:
    """
    Construye el cliente desde settings (SPACES_*).

    Raises:
        StorageConfigurationError: si faltan access key, secret o bucket.
    """
    access_key = settings.spaces_access_key.get_secret_value() if settings.spaces_access_key else ""
    secret_key = settings.spaces_secret_key.get_secret_value() if settings.spaces_secret_key else ""
    bucket = (settings.spaces_files_bucket or "").strip()

    missing = [
        name
        for name, value in (
            ("SPACES_ACCESS_KEY", access_key),
            ("SPACES_SECRET_KEY", secret_key),
            ("SPACES_FILES_BUCKET", bucket),
        )
        if not value
    ]
    if missing:
        raise StorageConfigurationError(
            f"Almacenamiento de archivos sin configurar: falta {', '.join(missing)}"
        )

    client = boto3.client(
        "s3",
        endpoint_url=settings.spaces_endpoint,
        region_name=settings.spaces_region,
        aws_access_key_id=access_key,
        aws_secret_access_key=secret_key,
        config=Config(signature_version="s3v4", s3={"addressing_style": "path"}),
    )
    logger.info("Storage client listo: endpoint=%s bucket=%s", settings.spaces_endpoint, bucket)
    return S3ObjectStorage(client, bucket)


def get_storage_client(request: Request) -> ObjectStorageClient:
    """Dependencia FastAPI: cliente creado en el lifespan (app.state.storage_client)."""
    client: Optional[ObjectStorageClient] = getattr(request.app.state, "storage_client", None)
    if client is None:
        raise StorageUnavailableException()
    return client


__all__ = [
    "ObjectStorageClient",
    "S3ObjectStorage",
    "StorageConfigurationError",
    "StorageOperationError",
    "StorageUnavailableException",
    "build_storage_client",
    "get_storage_client",
]
# Fin del archivo backend/app/modules/files/services/storage_client.py

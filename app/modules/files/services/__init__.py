# -*- coding: utf-8 -*-
"""
backend/app/modules/files/services/__init__.py

Servicios del módulo Files.
"""

from .file_asset_service import FileAssetService, UploadTicket, pick_target
from .storage_client import (
    ObjectStorageClient,
    S3ObjectStorage,
    StorageConfigurationError,
    StorageOperationError,
    build_storage_client,
    get_storage_client,
)

__all__ = [
    "FileAssetService",
    "UploadTicket",
    "pick_target",
    "ObjectStorageClient",
    "S3ObjectStorage",
    "StorageConfigurationError",
    "StorageOperationError",
    "build_storage_client",
    "get_storage_client",
]

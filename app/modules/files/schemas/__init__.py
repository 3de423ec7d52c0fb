# -*- coding: utf-8 -*-
"""
backend/app/modules/files/schemas/__init__.py

Barrel de esquemas del módulo Files.
"""

from .file_asset_schemas import (
    FileAssetOut,
    FileConfirmRequest,
    FileDeleteResponse,
    FileListResponse,
    FileResponse,
    FileUploadRequest,
    FileUploadResponse,
)

__all__ = [
    "FileUploadRequest",
    "FileConfirmRequest",
    "FileAssetOut",
    "FileUploadResponse",
    "FileResponse",
    "FileListResponse",
    "FileDeleteResponse",
]

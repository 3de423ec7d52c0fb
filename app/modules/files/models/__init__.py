# -*- coding: utf-8 -*-
"""
backend/app/modules/files/models/__init__.py
"""

from .file_asset_models import FileAsset
from .storage_models import AgencyStorageConfig, AgencyStorageUsage

__all__ = ["FileAsset", "AgencyStorageConfig", "AgencyStorageUsage"]

# -*- coding: utf-8 -*-
"""
backend/app/modules/files/enums/__init__.py

Barrel de enums del módulo Files.
"""

from .file_status_enum import FileStatus
from .file_target_enum import ALLOWED_FILE_MIME, FileTarget

__all__ = ["FileStatus", "FileTarget", "ALLOWED_FILE_MIME"]

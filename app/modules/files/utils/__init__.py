# -*- coding: utf-8 -*-
"""
backend/app/modules/files/utils/__init__.py
"""

from .safe_filename import build_storage_key, safe_file_name

__all__ = ["safe_file_name", "build_storage_key"]

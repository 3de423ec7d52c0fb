# -*- coding: utf-8 -*-
"""
backend/app/modules/files/routes/__init__.py
"""

from .files_routes import get_file_service, router

__all__ = ["router", "get_file_service"]

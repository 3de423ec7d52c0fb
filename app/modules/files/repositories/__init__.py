# -*- coding: utf-8 -*-
"""
backend/app/modules/files/repositories/__init__.py

Repositorios del módulo Files (funciones async a nivel de módulo).
"""

from . import file_asset_repository, storage_usage_repository

__all__ = ["file_asset_repository", "storage_usage_repository"]

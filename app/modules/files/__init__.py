# -*- coding: utf-8 -*-
"""
backend/app/modules/files/__init__.py

Módulo Files: adjuntos de reservas, pax y servicios guardados en un
bucket S3 compatible, con cupo de almacenamiento por agencia.
"""

from .models import AgencyStorageConfig, AgencyStorageUsage, FileAsset

__all__ = ["FileAsset", "AgencyStorageConfig", "AgencyStorageUsage"]

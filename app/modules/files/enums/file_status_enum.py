# -*- coding: utf-8 -*-
"""
backend/app/modules/files/enums/file_status_enum.py

Estados de un FileAsset:

- pending: URL de subida emitida, el objeto aún no fue confirmado.
  Vence a las FILES_PENDING_TTL_HOURS (24 h) y se purga.
- active: subida confirmada; cuenta para el uso de almacenamiento.

Autor: TurisCore
Fecha: 2026-09-10
"""

from enum import Enum


class FileStatus(str, Enum):
    PENDING = "pending"
    ACTIVE = "active"


__all__ = ["FileStatus"]

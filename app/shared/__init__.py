# -*- coding: utf-8 -*-
"""
backend/app/shared/__init__.py

Piezas compartidas entre módulos: configuración, base de datos, errores,
permisos y contexto de autenticación.

No inicializa settings en import-time.
"""

from app.shared.config.config_loader import get_settings

__all__ = ["get_settings"]
# Fin del archivo backend/app/shared/__init__.py

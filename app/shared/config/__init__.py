# -*- coding: utf-8 -*-
"""
backend/app/shared/config/__init__.py

Punto único de acceso a la configuración:
    from app.shared.config import settings

El objeto `settings` es un proxy perezoso sobre `get_settings()`: no
instancia la configuración al importar (evita validaciones prematuras en
tests) y respeta el cache de config_loader.
"""

from __future__ import annotations

from typing import Any

from .config_loader import get_settings
from .settings_base import BaseAppSettings


class _SettingsProxy:
    __slots__ = ()

    def __getattr__(self, name: str) -> Any:
        return getattr(get_settings(), name)

    def __setattr__(self, name: str, value: Any) -> None:
        setattr(get_settings(), name, value)


# Singleton accesible como `settings` (lazy-load via getter)
settings = _SettingsProxy()

__all__ = ["settings", "get_settings", "BaseAppSettings"]
# Fin del archivo

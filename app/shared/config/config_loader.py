# -*- coding: utf-8 -*-
"""
backend/app/shared/config/config_loader.py

Elige la clase de settings según PYTHON_ENV y la cachea por proceso.

Alias aceptados: dev/development, test/testing, prod/production. Un valor
desconocido cae en desarrollo con un warning.

Autor: TurisCore
Fecha: 2026-09-02
"""

import logging
import os
from functools import lru_cache
from typing import Dict, Type

from .settings_base import BaseAppSettings
from .settings_dev import DevSettings
from .settings_prod import ProdSettings
from .settings_testing import EnvTestingSettings

logger = logging.getLogger(__name__)

_SETTINGS_BY_ENV: Dict[str, Type[BaseAppSettings]] = {
    "development": DevSettings,
    "dev": DevSettings,
    "test": EnvTestingSettings,
    "testing": EnvTestingSettings,
    "production": ProdSettings,
    "prod": ProdSettings,
}


def _current_env() -> str:
    return os.getenv("PYTHON_ENV", "development").strip().strip('"').strip("'").lower()


@lru_cache(maxsize=1)
def get_settings() -> BaseAppSettings:
    """
    Instancia los settings del entorno actual y corre `_security_checks()`.

    Raises:
        ValueError: si la configuración no es segura o coherente
    """
    env = _current_env()
    settings_cls = _SETTINGS_BY_ENV.get(env)
    if settings_cls is None:
        logger.warning("PYTHON_ENV=%r desconocido; usando DevSettings", env)
        settings_cls = DevSettings

    settings = settings_cls()
    settings._security_checks()
    return settings


__all__ = ["get_settings"]
# Fin del archivo backend/app/shared/config/config_loader.py

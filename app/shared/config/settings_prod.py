# -*- coding: utf-8 -*-
"""
backend/app/shared/config/settings_prod.py

Settings de producción. Solo variables de entorno (sin .env), logs JSON
y conexión TLS a la base. `_security_checks()` exige un JWT_SECRET_KEY
fuerte y credenciales de Spaces cuando los uploads están activos.

Autor: TurisCore
Fecha: 2026-09-02
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from .settings_base import BaseAppSettings


class ProdSettings(BaseAppSettings):
    python_env: str = "production"

    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    log_format: str = Field(default="json", validation_alias="LOG_FORMAT")

    db_sslmode: str = Field(default="require", validation_alias="DB_SSLMODE")
    debug: bool = False

    model_config = SettingsConfigDict(
        env_file=None,
        case_sensitive=False,
        extra="ignore",
    )


__all__ = ["ProdSettings"]
# Fin del archivo backend/app/shared/config/settings_prod.py

# -*- coding: utf-8 -*-
"""
backend/app/shared/config/settings_dev.py

Settings de desarrollo local: logs verbosos, front en localhost:3000,
uploads apagados salvo que FILES_ENABLED los active y purga de
pendientes más frecuente para ver el job en acción.

Autor: TurisCore
Fecha: 2026-09-02
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from .settings_base import BaseAppSettings


class DevSettings(BaseAppSettings):
    python_env: str = "development"

    log_level: str = "DEBUG"
    log_format: str = "plain"

    db_sslmode: str = "disable"

    allowed_origins: str = Field(
        default="http://localhost:3000,http://127.0.0.1:3000",
        validation_alias="CORS_ORIGINS",
    )

    # Sin credenciales de Spaces en la mayoría de las máquinas
    files_enabled: bool = Field(default=False, validation_alias="FILES_ENABLED")
    files_cleanup_interval_minutes: int = Field(default=10, validation_alias="FILES_CLEANUP_INTERVAL_MINUTES")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


__all__ = ["DevSettings"]
# Fin del archivo backend/app/shared/config/settings_dev.py

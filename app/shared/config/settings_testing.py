# -*- coding: utf-8 -*-
"""
backend/app/shared/config/settings_testing.py

Overrides para entorno de PRUEBAS (test) usando Pydantic v2.
Busca ser determinista y seguro: logging moderado, base de datos en
memoria (aiosqlite), sin scheduler ni credenciales reales de Spaces.

Autor: TurisCore
Fecha: 02/09/2026
"""

from typing import Optional

from pydantic import SecretStr
from .settings_base import BaseAppSettings
from pydantic_settings import SettingsConfigDict


class EnvTestingSettings(BaseAppSettings):
    # --- Identidad de entorno ---
    python_env: str = "test"

    # --- Logging en test: menos ruido ---
    log_level: str = "WARNING"
    log_format: str = "pretty"

    # --- Base de datos: SQLite en memoria salvo que CI indique otra ---
    db_url: Optional[str] = "sqlite+aiosqlite:///:memory:"

    # --- Auth: secreto fijo para firmar tokens de prueba ---
    jwt_secret_key: SecretStr = SecretStr("test-secret-key-for-turiscore-suite-000")

    # --- Storage: credenciales dummy (el cliente real se mockea) ---
    spaces_access_key: Optional[SecretStr] = SecretStr("test-access")
    spaces_secret_key: Optional[SecretStr] = SecretStr("test-secret")
    spaces_files_bucket: Optional[str] = "turiscore-test"

    # --- Jobs / métricas: no arrancar en tests ---
    scheduler_enabled: bool = False
    metrics_enabled: bool = False

    model_config = SettingsConfigDict(
        env_file=".env.test",
        env_file_encoding="utf-8",
        extra="ignore",
    )


__all__ = ["EnvTestingSettings"]
# Fin del archivo backend/app/shared/config/settings_testing.py

# -*- coding: utf-8 -*-
"""
backend/app/shared/config/settings_base.py

Base de configuración (Pydantic v2) para TurisCore.
- Esta clase NO instancia singletons ni resuelve .env; eso lo hace config_loader.
- Es la base para settings_dev.py, settings_testing.py y settings_prod.py.

Autor: TurisCore
Fecha: 02/09/2026
"""

from decimal import Decimal
from typing import Literal, Optional

from pydantic import AliasChoices, Field, SecretStr, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


# Tipos de entorno soportados
EnvName = Literal["development", "test", "production"]

_DEFAULT_JWT_SECRET = "please-change-me"


class BaseAppSettings(BaseSettings):
    # =========================
    # Núcleo de la aplicación
    # =========================
    python_env: EnvName = Field(default="development", validation_alias="PYTHON_ENV")
    app_name: str = Field(default="TurisCore", validation_alias="APP_NAME")
    app_version: str = Field(default="1.0.0", validation_alias="APP_VERSION")
    app_host: str = Field(default="0.0.0.0", validation_alias="APP_HOST")
    app_port: int = Field(default=8000, validation_alias="APP_PORT")
    debug: bool = Field(default=False, validation_alias="DEBUG")

    # =========================
    # Base de datos (PostgreSQL)
    # =========================
    db_user: str = Field(default="postgres", validation_alias="DB_USER")
    db_password: SecretStr = Field(default=SecretStr("postgres"), validation_alias="DB_PASSWORD")
    db_host: str = Field(default="localhost", validation_alias="DB_HOST")
    db_port: int = Field(default=5432, validation_alias="DB_PORT")
    db_name: str = Field(default="turiscore", validation_alias="DB_NAME")
    db_echo_sql: bool = Field(default=False, validation_alias="DB_ECHO_SQL")
    db_sslmode: str = Field(default="prefer", validation_alias="DB_SSLMODE")  # prefer|require|disable
    db_url: Optional[str] = Field(default=None, validation_alias="DB_URL")
    db_command_timeout_s: float = Field(default=10.0, validation_alias="DB_COMMAND_TIMEOUT_S")

    @computed_field  # type: ignore[misc]
    @property
    def database_url(self) -> str:
        """
        Genera la URL de conexión completa para SQLAlchemy async.
        Prioriza DB_URL si existe, sino construye desde componentes individuales.
        """
        from urllib.parse import quote_plus

        if self.db_url:
            url = self.db_url
            if url.startswith("postgres://") or url.startswith("postgresql://"):
                url = (
                    url.replace("postgres://", "postgresql+asyncpg://", 1)
                       .replace("postgresql://", "postgresql+asyncpg://", 1)
                )
            return url

        pw = quote_plus(self.db_password.get_secret_value())
        url = (
            f"postgresql+asyncpg://{self.db_user}:{pw}"
            f"@{self.db_host}:{self.db_port}/{self.db_name}"
        )
        # asyncpg entiende ssl=require (no sslmode)
        if self.db_sslmode == "require":
            url = f"{url}?ssl=require"
        return url

    # =========================
    # CORS / Frontend
    # =========================
    allowed_origins: str = Field(default="*", validation_alias="CORS_ORIGINS")

    # =========================
    # Auth / JWT (solo verificación; la emisión vive fuera de este servicio)
    # =========================
    jwt_secret_key: SecretStr = Field(
        default=SecretStr(_DEFAULT_JWT_SECRET),
        validation_alias=AliasChoices("JWT_SECRET_KEY", "JWT_SECRET"),
    )
    jwt_algorithm: Literal["HS256", "HS384", "HS512"] = Field(default="HS256", validation_alias="JWT_ALGORITHM")
    auth_cookie_name: str = Field(default="token", validation_alias="AUTH_COOKIE_NAME")

    # =========================
    # Finanzas
    # =========================
    agency_transfer_fee_pct: Decimal = Field(
        default=Decimal("0.024"),
        validation_alias="AGENCY_TRANSFER_FEE_PCT",
        description="Porcentaje de costos de transferencia por defecto (0.024 = 2,4%).",
    )
    credit_entries_page_max: int = Field(default=200, validation_alias="CREDIT_ENTRIES_PAGE_MAX")

    # =========================
    # Almacenamiento de archivos (S3 compatible / Spaces)
    # =========================
    files_enabled: bool = Field(default=True, validation_alias="FILES_ENABLED")
    spaces_endpoint: str = Field(default="https://nyc3.digitaloceanspaces.com", validation_alias="SPACES_ENDPOINT")
    spaces_region: str = Field(default="us-east-1", validation_alias="SPACES_REGION")
    spaces_access_key: Optional[SecretStr] = Field(
        default=None,
        validation_alias=AliasChoices("SPACES_ACCESS_KEY", "SPACES_ACCES_KEY"),
    )
    spaces_secret_key: Optional[SecretStr] = Field(default=None, validation_alias="SPACES_SECRET_KEY")
    spaces_files_bucket: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("SPACES_FILES_BUCKET", "SPACES_BUCKET"),
    )
    files_max_mb: int = Field(default=15, validation_alias="FILES_MAX_MB")
    files_pending_ttl_hours: int = Field(default=24, validation_alias="FILES_PENDING_TTL_HOURS")
    files_storage_pack_gb: int = Field(default=5, validation_alias="FILES_STORAGE_PACK_GB")
    files_upload_url_ttl_seconds: int = Field(default=300, validation_alias="FILES_UPLOAD_URL_TTL_SECONDS")
    files_cleanup_enabled: bool = Field(default=True, validation_alias="FILES_CLEANUP_ENABLED")
    files_cleanup_interval_minutes: int = Field(default=60, validation_alias="FILES_CLEANUP_INTERVAL_MINUTES")

    # =========================
    # Observabilidad / Logging
    # =========================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="INFO", validation_alias="LOG_LEVEL")
    log_format: Literal["json", "pretty", "plain"] = Field(default="pretty", validation_alias="LOG_FORMAT")
    metrics_enabled: bool = Field(default=True, validation_alias="METRICS_ENABLED")
    scheduler_enabled: bool = Field(default=True, validation_alias="SCHEDULER_ENABLED")

    # ===== Helpers de entorno =====
    @computed_field  # type: ignore[misc]
    @property
    def is_dev(self) -> bool:
        return self.python_env == "development"

    @computed_field  # type: ignore[misc]
    @property
    def is_test(self) -> bool:
        return self.python_env == "test"

    @computed_field  # type: ignore[misc]
    @property
    def is_prod(self) -> bool:
        return self.python_env == "production"

    @property
    def jwt_secret(self) -> str:
        return self.jwt_secret_key.get_secret_value()

    @property
    def files_max_bytes(self) -> int:
        return self.files_max_mb * 1024 * 1024

    # ===== Utilidad para normalizar CORS =====
    def get_cors_origins(self) -> list[str]:
        """Convierte allowed_origins en lista procesable para CORS middleware."""
        if not self.allowed_origins or self.allowed_origins == "*":
            return ["*"]
        return [o.strip().strip('"').strip("'") for o in self.allowed_origins.split(",") if o.strip()]

    def _security_checks(self) -> None:
        """
        Validaciones mínimas de seguridad y coherencia.
        Se invoca desde config_loader tras instanciar el settings.
        """
        import logging
        logger = logging.getLogger(__name__)

        jwt_key = self.jwt_secret_key.get_secret_value()
        weak_jwt = not jwt_key or jwt_key == _DEFAULT_JWT_SECRET or len(jwt_key) < 32

        if self.is_prod:
            if weak_jwt:
                raise ValueError("JWT_SECRET_KEY debe tener ≥32 caracteres en producción")
            if self.files_enabled and not (
                self.spaces_access_key and self.spaces_secret_key and self.spaces_files_bucket
            ):
                raise ValueError(
                    "FILES_ENABLED=true requiere SPACES_ACCESS_KEY, SPACES_SECRET_KEY y SPACES_FILES_BUCKET."
                )

        if self.is_dev and weak_jwt:
            logger.info("JWT_SECRET_KEY es débil o usa valor por defecto - considera usar una clave más segura en desarrollo")

        if not (Decimal("0") <= self.agency_transfer_fee_pct < Decimal("1")):
            raise ValueError("AGENCY_TRANSFER_FEE_PCT debe estar entre 0 y 1.")
        if self.files_pending_ttl_hours <= 0:
            raise ValueError("FILES_PENDING_TTL_HOURS debe ser mayor a 0.")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


__all__ = ["BaseAppSettings", "EnvName"]
# Fin del archivo backend/app/shared/config/settings_base.py

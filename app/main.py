# -*- coding: utf-8 -*-
"""
backend/app/main.py

Punto de entrada principal del backend TurisCore.

Ajustes clave:
- .env cargado antes de leer settings (override fuera de producción)
- Logging configurado desde settings (plain/pretty/json)
- Cliente de almacenamiento construido en el lifespan y guardado en
  app.state (falla el arranque si FILES_ENABLED y faltan credenciales)
- Scheduler con el job de purga de archivos pending
- Observabilidad Prometheus (/metrics) vía app.observability.prom
- Errores uniformes {error, code, solution, details?}

Autor: TurisCore
Fecha: 2026-09-11
"""

import sys
import asyncio

if sys.platform.startswith("win"):
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path

# ---------------------------------------------------------------------------
# Cargar .env ANTES de cualquier import que lea settings
# En PROD: override=False para respetar variables del entorno
# ---------------------------------------------------------------------------
from dotenv import load_dotenv

_ENV_PATH = Path(__file__).resolve().parents[1] / ".env"
_PYTHON_ENV = os.getenv("PYTHON_ENV", "development").strip().strip('"').strip("'").lower()
_override_env = _PYTHON_ENV not in ("production", "test")
load_dotenv(dotenv_path=_ENV_PATH, override=_override_env)

import anyio
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.modules.files.jobs import register_pending_cleanup_job
from app.modules.files.services import build_storage_client
from app.observability.prom import setup_observability
from app.shared.config import get_settings
from app.shared.config.logging_config import setup_logging
from app.shared.middleware import (
    JSONExceptionMiddleware,
    RequestLoggingMiddleware,
    register_exception_handlers,
)
from app.shared.scheduler import get_scheduler

settings = get_settings()
setup_logging(level=settings.log_level, fmt=settings.log_format, echo_sql=settings.db_echo_sql)
logger = logging.getLogger(__name__)

logger.info("[dotenv] Loaded %s (override=%s, PYTHON_ENV=%s)", _ENV_PATH, _override_env, _PYTHON_ENV)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # ────────── STARTUP ──────────
    if settings.files_enabled:
        # Sin credenciales el arranque falla acá, no en la primera subida
        app.state.storage_client = build_storage_client(settings)
    else:
        app.state.storage_client = None
        logger.info("Files deshabilitado (FILES_ENABLED=false)")

    scheduler = None
    if settings.scheduler_enabled:
        scheduler = get_scheduler()
        register_pending_cleanup_job(scheduler)
        scheduler.start()
        logger.info("Scheduler iniciado con jobs programados")

    logger.info("Backend de TurisCore iniciado (env=%s)", settings.python_env)
    try:
        yield
    finally:
        # ────────── SHUTDOWN ──────────
        with anyio.CancelScope(shield=True):
            if scheduler is not None:
                scheduler.shutdown(wait=True)
                logger.info("Scheduler detenido")
        logger.info("Backend de TurisCore apagado.")


openapi_tags = [
    {"name": "health", "description": "Liveness y conectividad a base"},
    {"name": "finance", "description": "Monedas, comisiones y resumen financiero de reservas"},
    {"name": "credits", "description": "Cuenta corriente de pax y operadores"},
    {"name": "groups", "description": "Grupales: planes de pago y cobros masivos"},
    {"name": "files", "description": "Archivos adjuntos"},
]

app = FastAPI(
    title="TurisCore API",
    description="Núcleo financiero multi-agencia para agencias de viajes",
    version=settings.app_version,
    lifespan=lifespan,
    openapi_tags=openapi_tags,
)

register_exception_handlers(app)

# El orden real de ejecución de middlewares en Starlette es inverso al
# registro: CORS va al final para ejecutarse primero.
if settings.metrics_enabled:
    setup_observability(app)
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(JSONExceptionMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID"],
    max_age=600,
)

# Incluye router maestro
from app.routes import router as main_router  # noqa: E402

app.include_router(main_router)


@app.get("/", include_in_schema=False)
async def root():
    return {"service": "TurisCore Backend", "status": "active"}


if __name__ == "__main__":
    uvicorn.run("app.main:app", host=settings.app_host, port=settings.app_port, reload=settings.is_dev)

# Fin del archivo backend/app/main.py

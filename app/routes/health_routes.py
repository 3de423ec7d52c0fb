# -*- coding: utf-8 -*-
"""
backend/app/routes/health_routes.py

Endpoints de health check del backend TurisCore:
- /health     liveness (sin tocar la base)
- /health/db  conectividad a la base de datos

Autor: TurisCore
Fecha: 2026-09-05
"""

from datetime import datetime, timezone

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from app.shared.config import get_settings
from app.shared.database import check_database_health

router = APIRouter(tags=["health"])


@router.get("/health", summary="Liveness del backend")
async def health_check() -> dict:
    settings = get_settings()
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": settings.python_env,
        "service": {
            "name": settings.app_name,
            "version": settings.app_version,
        },
    }


@router.get(
    "/health/db",
    summary="Health check de base de datos",
    description="Ejecuta SELECT 1 contra la base; 503 si no responde.",
)
async def health_db():
    db_ok = await check_database_health(timeout_s=2.0)
    return JSONResponse(
        status_code=200 if db_ok else 503,
        content={"status": "ok" if db_ok else "degraded", "database": {"reachable": db_ok}},
    )

# Fin del archivo backend/app/routes/health_routes.py

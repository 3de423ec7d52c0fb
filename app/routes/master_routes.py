# -*- coding: utf-8 -*-
"""
backend/app/routes/master_routes.py

Router maestro: monta los routers de dominio bajo /api.

Módulos:
- finance  (/api/finance/*)   normalizador, comisiones, resumen de reserva
- credits  (/api/credit/*)    cuenta corriente
- bookings (/api/client-payments/*) cuotas individuales de clientes
- groups   (/api/groups/*)    planes y cobros masivos, plantillas
- files    (/api/files/*)     adjuntos con URL prefirmada

Un router que no importa es un error de arranque: no se monta a medias.

Autor: TurisCore
Fecha: 2026-09-11
"""
from __future__ import annotations

import logging

from fastapi import APIRouter

from app.modules.bookings.routes import router as bookings_router
from app.modules.credits.routes import router as credits_router
from app.modules.files.routes import router as files_router
from app.modules.finance.routes import router as finance_router
from app.modules.groups.routes import router as groups_router

logger = logging.getLogger(__name__)

api = APIRouter(prefix="/api")

_loaded: list[str] = []  # trazabilidad/debug


def _include(target: APIRouter, router: APIRouter, name: str) -> None:
    """Incluye un router en la capa dada y registra trazabilidad en logs."""
    target.include_router(router)
    _loaded.append(f"{target.prefix or '/'}:{name}")
    logger.debug(
        "Router '%s' montado en prefix '%s' (router.prefix='%s')",
        name,
        target.prefix or "/",
        getattr(router, "prefix", ""),
    )


_include(api, finance_router, "finance")
_include(api, credits_router, "credits")
_include(api, bookings_router, "bookings")
_include(api, groups_router, "groups")
_include(api, files_router, "files")


def loaded_routers() -> list[str]:
    return list(_loaded)


__all__ = ["api", "loaded_routers"]
# Fin del archivo backend/app/routes/master_routes.py

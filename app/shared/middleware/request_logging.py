# -*- coding: utf-8 -*-
"""
backend/app/shared/middleware/request_logging.py

Una línea de log por request de la API con request_id, agencia, ruta
(plantilla, no path concreto), status y duración. 5xx sale en ERROR y
4xx en WARNING para que los rechazos de negocio se vean sin DEBUG.
Health, métricas y favicon no se loguean.

Autor: TurisCore
Fecha: 2026-09-04
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Iterable, Tuple

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from .exception_handler import get_request_id

logger = logging.getLogger(__name__)

SKIPPED_PREFIXES: Tuple[str, ...] = ("/health", "/metrics", "/favicon.ico")


def _level_for(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, skipped_prefixes: Iterable[str] = SKIPPED_PREFIXES):
        super().__init__(app)
        self.skipped_prefixes = tuple(skipped_prefixes)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.url.path.startswith(self.skipped_prefixes):
            return await call_next(request)

        request_id = getattr(request.state, "request_id", None) or get_request_id(request)
        request.state.request_id = request_id

        start = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000

        route = request.scope.get("route")
        logger.log(
            _level_for(response.status_code),
            "request request_id=%s agency=%s %s %s status=%d ms=%.1f",
            request_id,
            getattr(request.state, "id_agency", None),
            request.method,
            getattr(route, "path", request.url.path),
            response.status_code,
            elapsed_ms,
        )
        return response


__all__ = ["RequestLoggingMiddleware", "SKIPPED_PREFIXES"]
# Fin del archivo backend/app/shared/middleware/request_logging.py

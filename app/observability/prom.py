# -*- coding: utf-8 -*-
"""
backend/app/observability/prom.py

Métricas Prometheus de la capa HTTP y endpoint /metrics.

- Las etiquetas usan la plantilla de ruta (/api/groups/{group_id}/bulk/collect),
  nunca el path concreto, para no explotar la cardinalidad.
- Con PROMETHEUS_MULTIPROC_DIR (uvicorn/gunicorn con varios workers) /metrics
  agrega los archivos de todos los procesos.

Autor: TurisCore
Fecha: 2026-09-05
"""
from __future__ import annotations

import os
from time import perf_counter

from fastapi import FastAPI
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    REGISTRY,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
    multiprocess,
)
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

HTTP_LABELS = ("method", "route", "status")

http_requests_total = Counter(
    "turiscore_http_requests_total",
    "Requests HTTP atendidos",
    HTTP_LABELS,
)
http_request_duration_seconds = Histogram(
    "turiscore_http_request_duration_seconds",
    "Duración de requests HTTP (s)",
    HTTP_LABELS,
    buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0),
)


class PrometheusMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        if request.url.path == "/metrics":
            return await call_next(request)

        start = perf_counter()
        response = await call_next(request)
        route = getattr(request.scope.get("route"), "path", None) or "unmatched"
        labels = (request.method, route, str(response.status_code))
        http_requests_total.labels(*labels).inc()
        http_request_duration_seconds.labels(*labels).observe(perf_counter() - start)
        return response


def _metrics_registry() -> CollectorRegistry:
    if not os.environ.get("PROMETHEUS_MULTIPROC_DIR"):
        return REGISTRY
    registry = CollectorRegistry()
    multiprocess.MultiProcessCollector(registry)
    return registry


def setup_observability(app: FastAPI, path: str = "/metrics") -> None:
    """Instrumenta la app y expone `path` en formato texto de Prometheus."""
    # Registra los contadores de dominio antes del primer scrape
    from app.observability import collectors  # noqa: F401

    registry = _metrics_registry()
    app.add_middleware(PrometheusMiddleware)

    @app.get(path, include_in_schema=False)
    def metrics() -> Response:
        return Response(content=generate_latest(registry), media_type=CONTENT_TYPE_LATEST)


__all__ = ["PrometheusMiddleware", "setup_observability"]
# Fin del archivo backend/app/observability/prom.py

# -*- coding: utf-8 -*-
"""
backend/app/shared/middleware/exception_handler.py

Middleware ASGI para capturar excepciones no manejadas y responder JSON,
más los handlers que uniforman el cuerpo de error de la API:

    {"error": "...", "code": "...", "solution": "...", "details": ...}

Garantiza que cualquier error 500 devuelva JSON estructurado en lugar de
text/plain, incluyendo code y request_id para trazabilidad.

Autor: TurisCore
Fecha: 2026-09-03
"""

from __future__ import annotations

import logging
import uuid
from typing import Callable

from fastapi import FastAPI
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from app.shared.utils.http_exceptions import ApiException

logger = logging.getLogger(__name__)

# Header para request ID (proxy, nginx, etc.)
REQUEST_ID_HEADERS = ["x-request-id", "x-correlation-id"]

_GENERIC_SOLUTIONS = {
    401: "Iniciá sesión nuevamente y volvé a intentar.",
    403: "Solicitá los permisos necesarios a un administrador.",
    404: "Verificá la ruta solicitada.",
    405: "Usá el método HTTP documentado para esta ruta.",
}


def get_request_id(request: Request) -> str:
    """Extrae request_id de headers o genera uno nuevo."""
    for header in REQUEST_ID_HEADERS:
        value = request.headers.get(header)
        if value:
            return value
    return uuid.uuid4().hex[:16]


class JSONExceptionMiddleware(BaseHTTPMiddleware):
    """
    Middleware que captura excepciones no manejadas y devuelve JSON.

    Garantiza:
    - Content-Type: application/json (nunca text/plain)
    - code estable para UI
    - request_id para correlación de logs
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = get_request_id(request)

        # Inyectar request_id en state para uso downstream
        request.state.request_id = request_id

        try:
            response = await call_next(request)
        except Exception as e:
            logger.exception(
                "unhandled_exception request_id=%s method=%s path=%s error=%s",
                request_id,
                request.method,
                request.url.path,
                repr(e),
            )
            return JSONResponse(
                status_code=500,
                content={
                    "error": "Error interno del servidor",
                    "code": "INTERNAL_SERVER_ERROR",
                    "solution": "Reintentá en unos segundos.",
                    "request_id": request_id,
                },
                headers={"X-Request-ID": request_id},
            )
        response.headers.setdefault("X-Request-ID", request_id)
        return response


async def api_exception_handler(request: Request, exc: ApiException) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("api_error code=%s path=%s", exc.code, request.url.path)
    return JSONResponse(
        status_code=exc.status_code,
        content=jsonable_encoder(exc.to_body()),
        headers=exc.headers,
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Errores HTTP genéricos (rutas inexistentes, 405 de Starlette, etc.)."""
    detail = exc.detail if isinstance(exc.detail, str) else "Error en la solicitud"
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": detail,
            "code": f"HTTP_{exc.status_code}",
            "solution": _GENERIC_SOLUTIONS.get(exc.status_code, "Revisá la solicitud y volvé a intentar."),
        },
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Errores de schema pydantic en el body/query → 400 uniforme."""
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(p) for p in first.get("loc", ()) if p not in ("body", "query", "path"))
    message = first.get("msg", "Datos inválidos")
    return JSONResponse(
        status_code=400,
        content={
            "error": f"{field}: {message}" if field else message,
            "code": "VALIDATION_ERROR",
            "solution": "Revisá los datos enviados y volvé a intentar.",
            "details": jsonable_encoder(errors, custom_encoder={Exception: str}),
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiException, api_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]


__all__ = [
    "JSONExceptionMiddleware",
    "get_request_id",
    "register_exception_handlers",
]

# -*- coding: utf-8 -*-
"""
backend/app/shared/utils/http_exceptions.py

Excepciones HTTP personalizadas para la API de TurisCore.
Estandariza respuestas de error con códigos HTTP apropiados y un cuerpo
uniforme pensado para el toast de la UI:

    {"error": "...", "code": "GROUP_LOCKED", "solution": "...", "details": ...}

Taxonomía:
- 400 validación (antes de cualquier escritura)
- 401/403 autorización
- 404 no encontrado
- 409 conflicto de estado
- 500 error de infraestructura (mensaje genérico al cliente)

Autor: TurisCore
Fecha: 2026-09-03
"""

from fastapi import HTTPException, status
from typing import Any, Dict, Optional


class ApiException(HTTPException):
    """Base de todos los errores de negocio expuestos por la API."""

    default_status: int = status.HTTP_400_BAD_REQUEST
    default_error: str = "Solicitud inválida"
    default_code: str = "BAD_REQUEST"
    default_solution: str = "Revisá los datos enviados y volvé a intentar."

    def __init__(
        self,
        error: Optional[str] = None,
        *,
        code: Optional[str] = None,
        solution: Optional[str] = None,
        details: Any = None,
        headers: Optional[Dict[str, Any]] = None,
    ):
        self.error = error or self.default_error
        self.code = code or self.default_code
        self.solution = solution or self.default_solution
        self.details = details
        super().__init__(
            status_code=self.default_status,
            detail=self.to_body(),
            headers=headers,
        )

    def to_body(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "error": self.error,
            "code": self.code,
            "solution": self.solution,
        }
        if self.details is not None:
            body["details"] = self.details
        return body


class BadRequestException(ApiException):
    """400 - Solicitud mal formada o parámetros inválidos"""


class UnauthorizedException(ApiException):
    """401 - Autenticación requerida o credenciales inválidas"""
    default_status = status.HTTP_401_UNAUTHORIZED
    default_error = "Tu sesión expiró o no es válida."
    default_code = "AUTH_REQUIRED"
    default_solution = "Iniciá sesión nuevamente y volvé a intentar."

    def __init__(self, error: Optional[str] = None, **kwargs: Any):
        kwargs.setdefault("headers", {"WWW-Authenticate": "Bearer"})
        super().__init__(error, **kwargs)


class ForbiddenException(ApiException):
    """403 - Acceso prohibido - usuario autenticado pero sin permisos"""
    default_status = status.HTTP_403_FORBIDDEN
    default_error = "Sin permisos"
    default_code = "FORBIDDEN"
    default_solution = "Solicitá los permisos necesarios a un administrador."


class NotFoundException(ApiException):
    """404 - Recurso no encontrado"""
    default_status = status.HTTP_404_NOT_FOUND
    default_error = "Recurso no encontrado"
    default_code = "NOT_FOUND"
    default_solution = "Refrescá la pantalla y verificá que el recurso exista."


class MethodNotAllowedException(ApiException):
    """405 - Método HTTP no soportado por la ruta"""
    default_status = status.HTTP_405_METHOD_NOT_ALLOWED
    default_error = "Método no permitido para esta ruta."
    default_code = "METHOD_NOT_ALLOWED"
    default_solution = "Usá el método HTTP documentado para esta ruta."


class ConflictException(ApiException):
    """409 - Conflicto con el estado actual del recurso"""
    default_status = status.HTTP_409_CONFLICT
    default_error = "La operación no es válida en el estado actual del recurso."
    default_code = "CONFLICT"
    default_solution = "Refrescá la pantalla y revisá el estado antes de reintentar."


class InternalServerException(ApiException):
    """500 - Error interno del servidor"""
    default_status = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_error = "Error interno del servidor"
    default_code = "INTERNAL_SERVER_ERROR"
    default_solution = "Reintentá en unos segundos."


class DomainValidationError(ValueError):
    """
    Error de validación en funciones puras de dominio (cálculos, parsers).

    No depende de HTTP: las rutas lo traducen a BadRequestException.
    """

    def __init__(self, message: str, code: str = "VALIDATION_ERROR"):
        super().__init__(message)
        self.code = code


__all__ = [
    "ApiException",
    "BadRequestException",
    "UnauthorizedException",
    "ForbiddenException",
    "NotFoundException",
    "MethodNotAllowedException",
    "ConflictException",
    "InternalServerException",
    "DomainValidationError",
]

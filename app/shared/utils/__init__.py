# -*- coding: utf-8 -*-
"""
backend/app/shared/utils/__init__.py

Utilidades comunes: errores HTTP uniformes, JWT y fechas.

Autor: TurisCore
Fecha: 2026-09-03
"""

from .http_exceptions import (
    ApiException,
    BadRequestException,
    UnauthorizedException,
    ForbiddenException,
    NotFoundException,
    ConflictException,
    InternalServerException,
    DomainValidationError,
)
from .jwt_utils import create_access_token, decode_token
from .time_utils import utcnow, parse_ymd, parse_date_loose, to_ymd

__all__ = [
    # HTTP Exceptions
    "ApiException",
    "BadRequestException",
    "UnauthorizedException",
    "ForbiddenException",
    "NotFoundException",
    "ConflictException",
    "InternalServerException",
    "DomainValidationError",

    # JWT
    "create_access_token",
    "decode_token",

    # Fechas
    "utcnow",
    "parse_ymd",
    "parse_date_loose",
    "to_ymd",
]

# -*- coding: utf-8 -*-
"""
backend/app/shared/auth_context.py

Contexto de autenticación unificado: ÚNICA FUENTE DE VERDAD para saber
quién llama (usuario, agencia, rol) en cada request.

El token viaja como `Authorization: Bearer <jwt>` o en la cookie de
sesión (settings.auth_cookie_name). Los claims aceptan las variantes que
emiten los distintos clientes:

- usuario: id_user | userId | uid
- agencia: id_agency | agencyId | aid
- rol:     role

Toda consulta multi-tenant se filtra por `AuthContext.id_agency`.

Autor: TurisCore
Fecha: 2026-09-04
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from fastapi import Request

from app.shared.config import settings
from app.shared.utils.http_exceptions import UnauthorizedException
from app.shared.utils.jwt_utils import decode_token

logger = logging.getLogger(__name__)

_USER_CLAIMS = ("id_user", "userId", "uid")
_AGENCY_CLAIMS = ("id_agency", "agencyId", "aid")


@dataclass(frozen=True)
class AuthContext:
    id_user: int
    id_agency: int
    role: str


def _first_int(payload: Mapping[str, Any], keys: tuple[str, ...]) -> Optional[int]:
    for key in keys:
        value = payload.get(key)
        if value is None:
            continue
        try:
            return int(value)
        except (TypeError, ValueError):
            logger.warning("Claim %s con formato inválido: %r", key, value)
            return None
    return None


def extract_token(request: Request) -> Optional[str]:
    """Bearer header primero, cookie de sesión como alternativa."""
    header = request.headers.get("authorization") or ""
    if header.lower().startswith("bearer "):
        token = header[7:].strip()
        if token:
            return token
    return request.cookies.get(settings.auth_cookie_name) or None


def auth_context_from_claims(payload: Mapping[str, Any]) -> AuthContext:
    """
    Construye el contexto desde claims ya validados.

    Raises:
        UnauthorizedException 401: si falta usuario, agencia o rol
    """
    id_user = _first_int(payload, _USER_CLAIMS)
    id_agency = _first_int(payload, _AGENCY_CLAIMS)
    role = payload.get("role")
    if id_user is None or id_agency is None or not isinstance(role, str) or not role.strip():
        logger.warning("Auth context incompleto: claims=%s", sorted(payload.keys()))
        raise UnauthorizedException()
    return AuthContext(id_user=id_user, id_agency=id_agency, role=role)


async def get_auth_context(request: Request) -> AuthContext:
    """Dependencia FastAPI: valida el JWT y devuelve el AuthContext."""
    token = extract_token(request)
    if not token:
        raise UnauthorizedException()
    payload = decode_token(token)
    if payload is None:
        raise UnauthorizedException()
    ctx = auth_context_from_claims(payload)
    # Para el log de requests
    request.state.id_agency = ctx.id_agency
    return ctx


__all__ = [
    "AuthContext",
    "extract_token",
    "auth_context_from_claims",
    "get_auth_context",
]

# -*- coding: utf-8 -*-
"""
backend/app/shared/utils/jwt_utils.py

JWT helpers para TurisCore (python-jose):
- create_access_token(claims, expires_delta?)
- decode_token(token)

El token de sesión lo emite el servicio de login; este backend solo lo
valida y lee los claims de usuario, agencia y rol. create_access_token
se usa en scripts internos y en la suite de tests.

Autor: TurisCore
Actualizado: 2026-09-04
"""

from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any
from jose import JWTError, jwt, ExpiredSignatureError
import logging
import uuid

from app.shared.config import settings

logger = logging.getLogger(__name__)

DEFAULT_TOKEN_TTL = timedelta(hours=12)


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


def create_access_token(
    claims: Dict[str, Any],
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Crea un JWT firmado con expiración.
    """
    to_encode = dict(claims)
    iat = _now_utc()
    exp = iat + (expires_delta or DEFAULT_TOKEN_TTL)
    to_encode.update({
        "exp": exp,
        "iat": iat,
        "jti": str(uuid.uuid4()),
    })
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> Optional[Dict[str, Any]]:
    """
    Decodifica y valida un JWT. Devuelve None si es inválido o expiró.
    """
    try:
        return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except ExpiredSignatureError as e:
        logger.warning("Token expirado: %s", e)
        return None
    except JWTError as e:
        logger.warning("Token inválido: %s", e)
        return None


__all__ = ["create_access_token", "decode_token"]
# Fin del módulo jwt_utils.py

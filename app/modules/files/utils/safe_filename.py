# -*- coding: utf-8 -*-
"""
backend/app/modules/files/utils/safe_filename.py

Nombres de archivo y claves de almacenamiento seguras.

safe_file_name:
- toma el último segmento de la ruta
- normaliza NFD (las tildes quedan como marcas sueltas)
- reemplaza todo lo que no sea [A-Za-z0-9_.-] por "_", colapsa y recorta "_"
  ("José.pdf" → "Jose_.pdf")
- máximo 120 caracteres; si queda vacío, "archivo"

Autor: TurisCore
Fecha: 2026-09-10
"""

from __future__ import annotations

import re
import secrets
import string
import time
import unicodedata
from typing import Optional

from app.modules.files.enums import FileTarget

MAX_NAME_LENGTH = 120
DEFAULT_NAME = "archivo"

_UNSAFE_RE = re.compile(r"[^A-Za-z0-9_.-]+")
_MULTI_UNDERSCORE_RE = re.compile(r"_+")
_RAND_ALPHABET = string.ascii_lowercase + string.digits


def safe_file_name(name: Optional[str]) -> str:
    raw = (name or "").replace("\\", "/")
    base = raw.split("/")[-1] or raw
    clean = _UNSAFE_RE.sub("_", unicodedata.normalize("NFD", base))
    clean = _MULTI_UNDERSCORE_RE.sub("_", clean).strip("_")
    return clean[:MAX_NAME_LENGTH] or DEFAULT_NAME


def build_storage_key(
    id_agency: int,
    target: FileTarget,
    target_id: int,
    file_name: str,
    *,
    stamp_ms: Optional[int] = None,
    rand: Optional[str] = None,
) -> str:
    """agencies/{agencia}/files/{destino}-{id}/{epoch_ms}-{rand6}-{nombre_seguro}"""
    stamp = stamp_ms if stamp_ms is not None else int(time.time() * 1000)
    token = rand if rand is not None else "".join(secrets.choice(_RAND_ALPHABET) for _ in range(6))
    return f"agencies/{id_agency}/files/{target.value}-{target_id}/{stamp}-{token}-{safe_file_name(file_name)}"


__all__ = ["safe_file_name", "build_storage_key", "MAX_NAME_LENGTH", "DEFAULT_NAME"]

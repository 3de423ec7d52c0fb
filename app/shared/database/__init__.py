# -*- coding: utf-8 -*-
"""
backend/app/shared/database/__init__.py

Re-exporta utilidades comunes de base de datos.

Autor: TurisCore
Fecha: 2026-09-03
"""

from __future__ import annotations

from .database import (
    engine,
    SessionLocal,
    get_async_session,
    session_scope,
    check_database_health,
)
from .base import Base, NAMING_CONVENTION, JSONType, Money
from .repository import BaseRepository
from .unit_of_work import transactional
from .agency_counters import AgencyCounter, next_agency_counter

__all__ = [
    "engine",
    "SessionLocal",
    "Base",
    "NAMING_CONVENTION",
    "JSONType",
    "Money",
    "BaseRepository",
    "transactional",
    "AgencyCounter",
    "next_agency_counter",
    "get_async_session",
    "session_scope",
    "check_database_health",
]

# Fin del archivo backend/app/shared/database/__init__.py

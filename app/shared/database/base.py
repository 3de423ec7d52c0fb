# -*- coding: utf-8 -*-
"""
backend/app/shared/database/base.py

Base declarativa y convención de nombres para modelos ORM.

Este módulo proporciona:
- Base: clase base declarativa de SQLAlchemy
- NAMING_CONVENTION: convención de nombres para constraints
- JSONType: JSON genérico que usa JSONB en PostgreSQL
- Money: tipo NUMERIC(18,2) para importes

Autor: TurisCore
Fecha: 2026-09-02
"""

from __future__ import annotations

from sqlalchemy import JSON, MetaData, Numeric
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase

# ===== NAMING CONVENTION =====
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

# JSONB en Postgres, JSON plano en SQLite (tests)
JSONType = JSON().with_variant(JSONB(), "postgresql")

# Importes monetarios: mismo tipo en todas las tablas financieras
Money = Numeric(18, 2, asdecimal=True)


# ===== BASE DECLARATIVA =====
class Base(DeclarativeBase):
    """
    Base declarativa para todos los modelos ORM de TurisCore.
    Incluye convención de nombres para constraints.
    """
    metadata = MetaData(naming_convention=NAMING_CONVENTION)


__all__ = ["Base", "NAMING_CONVENTION", "JSONType", "Money"]

# Fin del archivo backend/app/shared/database/base.py

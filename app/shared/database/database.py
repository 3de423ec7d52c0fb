# -*- coding: utf-8 -*-
"""
backend/app/shared/database/database.py

SQLAlchemy async + asyncpg (PostgreSQL) con NullPool; el pooling lo maneja
PgBouncer en producción. En tests la URL apunta a sqlite+aiosqlite.

Provee:
- engine (create_async_engine)
- SessionLocal (async_sessionmaker)
- Base (DeclarativeBase con naming convention)
- Dependencia FastAPI: get_async_session
- context manager: session_scope() para jobs/scripts
- check_database_health()

Autor: TurisCore
Fecha: 2026-09-02
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator
from uuid import uuid4

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from app.shared.config import settings
from app.shared.database.base import Base  # reutilizamos la Base única

logger = logging.getLogger(__name__)

DATABASE_URL: str = settings.database_url
DB_ECHO_SQL = bool(settings.db_echo_sql)
IS_ASYNCPG = DATABASE_URL.startswith("postgresql+asyncpg")


def _prepared_statement_name_func() -> str:
    # Nombres únicos: evita colisiones en PgBouncer transaction mode
    return f"__asyncpg_{uuid4().hex[:8]}__"


def _build_connect_args() -> dict:
    if not IS_ASYNCPG:
        return {}
    return {
        "statement_cache_size": 0,
        "prepared_statement_cache_size": 0,
        "prepared_statement_name_func": _prepared_statement_name_func,
        "server_settings": {"search_path": "public"},
        "command_timeout": float(settings.db_command_timeout_s),
    }


# Log de conexión sin credenciales
logger.info(
    "[DB] engine=%s echo=%s",
    DATABASE_URL.split("@")[-1] if "@" in DATABASE_URL else DATABASE_URL,
    DB_ECHO_SQL,
)

engine = create_async_engine(
    DATABASE_URL,
    poolclass=NullPool,
    echo=DB_ECHO_SQL,
    connect_args=_build_connect_args(),
)

# ── Session factory
SessionLocal = async_sessionmaker(
    bind=engine,
    expire_on_commit=False,
    class_=AsyncSession,
    autoflush=False,
)


# ── Dependencia FastAPI
async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    async with SessionLocal() as session:
        try:
            yield session
        except SQLAlchemyError:
            # Importante: rollback para liberar cualquier transacción/lock
            await session.rollback()
            raise
        finally:
            if session.in_transaction():
                await session.rollback()


# ── Context manager reutilizable en jobs/scripts
@asynccontextmanager
async def session_scope() -> AsyncGenerator[AsyncSession, None]:
    async with SessionLocal() as session:
        try:
            yield session
            # El commit lo decide quien usa el scope (ver unit_of_work.transactional)
        finally:
            if session.in_transaction():
                await session.rollback()


# ── Health check
async def check_database_health(timeout_s: float = 3.0, sql: str = "SELECT 1") -> bool:
    """
    Verifica conectividad a la base de datos.

    Args:
        timeout_s: Tiempo máximo de espera en segundos
        sql: Query SQL a ejecutar (default: "SELECT 1")

    Returns:
        True si la conexión es exitosa, False en caso contrario
    """
    try:
        async with asyncio.timeout(timeout_s):
            async with engine.connect() as conn:
                await conn.execute(text(sql))
        return True
    except (SQLAlchemyError, OSError, TimeoutError) as e:
        logger.warning("[DB] health check falló: %s", e)
        return False


__all__ = [
    "engine",
    "SessionLocal",
    "Base",
    "get_async_session",
    "session_scope",
    "check_database_health",
]
# Fin del archivo backend/app/shared/database/database.py

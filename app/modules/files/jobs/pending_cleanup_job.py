# -*- coding: utf-8 -*-
"""
backend/app/modules/files/jobs/pending_cleanup_job.py

Job programado: purga de FileAsset `pending` vencidos.

La subida también purga antes de proyectar el cupo; este job evita que
las filas abandonadas se acumulen en agencias sin actividad. No borra
objetos del bucket: una fila pending nunca llegó a confirmarse.

Configuración (settings):
- FILES_CLEANUP_ENABLED (default: true)
- FILES_CLEANUP_INTERVAL_MINUTES (default: 60)
- FILES_PENDING_TTL_HOURS (default: 24)

Autor: TurisCore
Fecha: 2026-09-11
"""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import Any, Callable, Dict, Optional

from sqlalchemy.exc import SQLAlchemyError

from app.modules.files.repositories import file_asset_repository
from app.observability.collectors import file_pending_purged_total
from app.shared.config import settings
from app.shared.database import session_scope, transactional
from app.shared.utils.time_utils import utcnow

_logger = logging.getLogger("files.jobs.pending_cleanup")

JOB_ID = "files_pending_cleanup"


async def pending_cleanup_job(
    ttl_hours: Optional[int] = None,
    scope_factory: Callable[[], Any] = session_scope,
) -> Dict[str, Any]:
    """
    Borra filas pending creadas hace más de `ttl_hours`.

    Returns:
        Dict con estadísticas de la corrida
    """
    if ttl_hours is None:
        ttl_hours = settings.files_pending_ttl_hours

    started = utcnow()
    cutoff = started - timedelta(hours=ttl_hours)
    stats: Dict[str, Any] = {
        "job_id": JOB_ID,
        "timestamp": started.isoformat(),
        "cutoff": cutoff.isoformat(),
        "purged": 0,
    }

    try:
        async with scope_factory() as session:
            async with transactional(session):
                purged = await file_asset_repository.purge_expired_pending(session, cutoff=cutoff)
    except SQLAlchemyError as exc:
        _logger.error("[pending_cleanup] error: %s", exc, exc_info=True)
        stats["error"] = str(exc)[:200]
        return stats

    stats["purged"] = purged
    stats["duration_ms"] = round((utcnow() - started).total_seconds() * 1000, 2)
    if purged:
        file_pending_purged_total.inc(purged)
    _logger.info(
        "[pending_cleanup] purged=%d cutoff=%s duration_ms=%.2f",
        purged,
        stats["cutoff"],
        stats["duration_ms"],
    )
    return stats


def register_pending_cleanup_job(scheduler=None) -> Optional[str]:
    """
    Registra el job en el scheduler.

    Returns:
        ID del job registrado, o None si está deshabilitado
    """
    if not settings.files_cleanup_enabled:
        _logger.info("[pending_cleanup] Job disabled (FILES_CLEANUP_ENABLED=false)")
        return None

    if scheduler is None:
        from app.shared.scheduler import get_scheduler
        scheduler = get_scheduler()

    minutes = settings.files_cleanup_interval_minutes
    job_id = scheduler.add_interval_job(
        func=pending_cleanup_job,
        job_id=JOB_ID,
        hours=0,
        minutes=minutes,
        seconds=0,
    )
    _logger.info("[pending_cleanup] Job '%s' registered: every %d minutes", JOB_ID, minutes)
    return job_id


__all__ = ["JOB_ID", "pending_cleanup_job", "register_pending_cleanup_job"]
# Fin del archivo backend/app/modules/files/jobs/pending_cleanup_job.py

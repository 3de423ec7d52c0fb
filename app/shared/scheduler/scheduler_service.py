# -*- coding: utf-8 -*-
"""
backend/app/shared/scheduler/scheduler_service.py

Envoltorio mínimo sobre APScheduler (AsyncIOScheduler, UTC).

Los jobs corren en el event loop de la app y abren su propia sesión de
base. Registrar dos veces el mismo job_id reemplaza el anterior, así un
reload en desarrollo no duplica la purga de archivos.

Autor: TurisCore
Fecha: 2026-09-05
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from apscheduler.executors.asyncio import AsyncIOExecutor
from apscheduler.jobstores.base import JobLookupError
from apscheduler.jobstores.memory import MemoryJobStore
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

logger = logging.getLogger(__name__)

# Una corrida por job; las perdidas se combinan en una sola
JOB_DEFAULTS: Dict[str, Any] = {"coalesce": True, "max_instances": 1, "misfire_grace_time": 60}


class SchedulerService:
    def __init__(self, scheduler: Optional[AsyncIOScheduler] = None):
        self._scheduler = scheduler or AsyncIOScheduler(
            jobstores={"default": MemoryJobStore()},
            executors={"default": AsyncIOExecutor()},
            job_defaults=JOB_DEFAULTS,
            timezone="UTC",
        )

    @property
    def is_running(self) -> bool:
        return bool(self._scheduler.running)

    def start(self) -> None:
        if self.is_running:
            return
        self._scheduler.start()
        logger.info("Scheduler iniciado (%d jobs)", len(self._scheduler.get_jobs()))

    def shutdown(self, wait: bool = True) -> None:
        if not self.is_running:
            return
        self._scheduler.shutdown(wait=wait)
        logger.info("Scheduler detenido")

    def add_interval_job(
        self,
        func: Callable,
        job_id: str,
        hours: int = 0,
        minutes: int = 0,
        seconds: int = 0,
        **kwargs: Any,
    ) -> str:
        """Programa `func(**kwargs)` cada intervalo; reemplaza un job con el mismo id."""
        if hours == minutes == seconds == 0:
            raise ValueError(f"Intervalo vacío para el job '{job_id}'")
        # Antes de start() APScheduler acumula pendientes sin deduplicar
        self.remove_job(job_id)
        self._scheduler.add_job(
            func,
            trigger=IntervalTrigger(hours=hours, minutes=minutes, seconds=seconds),
            id=job_id,
            name=job_id,
            kwargs=kwargs,
            replace_existing=True,
        )
        logger.info("Job '%s' programado cada %02d:%02d:%02d", job_id, hours, minutes, seconds)
        return job_id

    def remove_job(self, job_id: str) -> bool:
        try:
            self._scheduler.remove_job(job_id)
        except JobLookupError:
            return False
        return True

    def job_ids(self) -> List[str]:
        return [job.id for job in self._scheduler.get_jobs()]


_instance: Optional[SchedulerService] = None


def get_scheduler() -> SchedulerService:
    """Scheduler del proceso (se crea en el primer uso)."""
    global _instance
    if _instance is None:
        _instance = SchedulerService()
    return _instance


__all__ = ["SchedulerService", "get_scheduler", "JOB_DEFAULTS"]
# Fin del archivo backend/app/shared/scheduler/scheduler_service.py

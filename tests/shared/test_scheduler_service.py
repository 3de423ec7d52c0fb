# -*- coding: utf-8 -*-
"""
backend/tests/shared/test_scheduler_service.py

SchedulerService sin arrancar el loop: solo registro de jobs.
"""

import pytest

from app.shared.scheduler import SchedulerService


async def _noop(**kwargs):
    return kwargs


def test_add_interval_job_replaces_same_id():
    svc = SchedulerService()

    svc.add_interval_job(_noop, job_id="purge", minutes=5)
    svc.add_interval_job(_noop, job_id="purge", minutes=10, ttl_hours=24)

    assert svc.job_ids() == ["purge"]
    assert not svc.is_running


def test_empty_interval_is_rejected():
    with pytest.raises(ValueError):
        SchedulerService().add_interval_job(_noop, job_id="nada")


def test_remove_job():
    svc = SchedulerService()
    svc.add_interval_job(_noop, job_id="purge", seconds=30)

    assert svc.remove_job("purge") is True
    assert svc.remove_job("purge") is False
    assert svc.job_ids() == []

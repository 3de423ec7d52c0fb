# -*- coding: utf-8 -*-
"""
backend/app/modules/files/jobs/__init__.py

Jobs programados del módulo Files.
"""

from .pending_cleanup_job import (
    JOB_ID as PENDING_CLEANUP_JOB_ID,
    pending_cleanup_job,
    register_pending_cleanup_job,
)

__all__ = [
    "PENDING_CLEANUP_JOB_ID",
    "pending_cleanup_job",
    "register_pending_cleanup_job",
]

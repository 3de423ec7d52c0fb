# -*- coding: utf-8 -*-
"""
backend/app/modules/groups/services/__init__.py

Servicios de grupales: planes de pago masivos, cobro masivo y plantillas.

Autor: TurisCore
Fecha: 2026-09-08
"""

from .payment_plan_service import PaymentPlanService, PaymentPlanResult
from .collection_service import CollectionService, CollectionResult, bucket_payments
from .template_service import PaymentTemplateService

__all__ = [
    "PaymentPlanService",
    "PaymentPlanResult",
    "CollectionService",
    "CollectionResult",
    "bucket_payments",
    "PaymentTemplateService",
]

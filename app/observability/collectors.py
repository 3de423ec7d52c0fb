# -*- coding: utf-8 -*-
"""
backend/app/observability/collectors.py

Coleccionistas Prometheus de dominio para TurisCore.

Define contadores para registrar:
- Movimientos de cuenta corriente (alta/edición/baja)
- Cuotas creadas por planes masivos de grupales
- Cuotas cobradas por cobros masivos
- Cuotas individuales creadas y liquidadas
- Archivos pendientes purgados

Autor: TurisCore
Fecha: 2026-09-05
"""
from prometheus_client import Counter

NAMESPACE = "turiscore"

credit_entries_total = Counter(
    f"{NAMESPACE}_credit_entries_total",
    "Movimientos de cuenta corriente por operación",
    labelnames=("operation",),  # create|update|delete|adjust
)

group_installments_created_total = Counter(
    f"{NAMESPACE}_group_installments_created_total",
    "Cuotas creadas por planes masivos de grupales",
)

group_payments_settled_total = Counter(
    f"{NAMESPACE}_group_payments_settled_total",
    "Cuotas marcadas PAGADA por cobros masivos de grupales",
)

client_payments_total = Counter(
    f"{NAMESPACE}_client_payments_total",
    "Cuotas individuales por operación",
    labelnames=("operation",),  # create|settle
)

file_pending_purged_total = Counter(
    f"{NAMESPACE}_file_pending_purged_total",
    "FileAsset pendientes vencidos eliminados",
)

__all__ = [
    "credit_entries_total",
    "group_installments_created_total",
    "group_payments_settled_total",
    "client_payments_total",
    "file_pending_purged_total",
]

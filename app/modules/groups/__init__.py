# -*- coding: utf-8 -*-
"""
backend/app/modules/groups/__init__.py

Grupales: viajes grupales, sus pasajeros, plantillas de pago y las
operaciones masivas de planes y cobros.
"""

from .models import TravelGroup, TravelGroupPassenger, TravelGroupPaymentTemplate

__all__ = ["TravelGroup", "TravelGroupPassenger", "TravelGroupPaymentTemplate"]

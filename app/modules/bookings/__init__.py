# -*- coding: utf-8 -*-
"""
backend/app/modules/bookings/__init__.py

Entidades comerciales (reservas, servicios, recibos, cuotas) que consumen
los módulos de finanzas, cuenta corriente, grupales y archivos.
"""

from . import models  # noqa: F401  (registra tablas en Base.metadata)

__all__ = ["models"]

# -*- coding: utf-8 -*-
"""
backend/app/__init__.py

Paquete principal 'app' del backend TurisCore.

Los módulos internos se importan como 'app.*' con la carpeta 'backend'
en PYTHONPATH.

Autor: TurisCore
Fecha: 2026-09-02
"""

# Fin del archivo backend/app/__init__.py

# -*- coding: utf-8 -*-
"""
backend/app/shared/config/logging_config.py

Logging de TurisCore con `logging.config.dictConfig`.

Formatos:
- plain:  una línea legible (desarrollo)
- pretty: igual que plain con el módulo y la línea de origen
- json:   python-json-logger, un objeto por línea (producción)

SQLAlchemy, APScheduler y botocore quedan en WARNING salvo DB_ECHO_SQL.

Autor: TurisCore
Fecha: 2026-09-02
"""

import logging.config
from typing import Any, Dict, Literal

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
LogFormat = Literal["plain", "pretty", "json"]

_NOISY_LOGGERS = ("sqlalchemy.engine", "apscheduler", "botocore", "boto3", "urllib3")


def _json_formatter_class() -> str:
    # python-json-logger >= 3 movió el formatter a pythonjsonlogger.json
    try:
        import pythonjsonlogger.json  # noqa: F401
    except ImportError:  # pragma: no cover
        return "pythonjsonlogger.jsonlogger.JsonFormatter"
    return "pythonjsonlogger.json.JsonFormatter"


def build_logging_config(level: LogLevel = "INFO", fmt: LogFormat = "plain", echo_sql: bool = False) -> Dict[str, Any]:
    formatters: Dict[str, Any] = {
        "plain": {
            "format": "%(asctime)s %(levelname)s [%(name)s]: %(message)s",
            "datefmt": "%Y-%m-%d %H:%M:%S",
        },
        "pretty": {
            "format": "%(asctime)s %(levelname)-8s %(name)s:%(lineno)d | %(message)s",
            "datefmt": "%H:%M:%S",
        },
        "json": {
            "()": _json_formatter_class(),
            "fmt": "%(asctime)s %(name)s %(levelname)s %(message)s",
            "rename_fields": {"levelname": "level", "asctime": "ts"},
        },
    }

    loggers = {name: {"level": "WARNING"} for name in _NOISY_LOGGERS}
    if echo_sql:
        loggers["sqlalchemy.engine"] = {"level": "INFO"}

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": formatters,
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": fmt if fmt in formatters else "plain",
                "stream": "ext://sys.stdout",
            }
        },
        "loggers": loggers,
        "root": {"handlers": ["console"], "level": level.upper()},
    }


def setup_logging(level: LogLevel = "INFO", fmt: LogFormat = "plain", echo_sql: bool = False) -> None:
    """Aplica la configuración de logging al proceso."""
    logging.config.dictConfig(build_logging_config(level, fmt, echo_sql))


__all__ = ["setup_logging", "build_logging_config"]
# Fin del archivo backend/app/shared/config/logging_config.py

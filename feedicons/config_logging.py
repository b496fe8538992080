"""Logging configuration"""

import logging
import sys
from logging.config import dictConfig
from typing import Any

from dockerflow import logging as dockerflow_logging

from feedicons.configs import settings

# Handler used for each supported `logging.format`.
FORMAT_HANDLERS: dict[str, str] = {
    "mozlog": "console-mozlog",
    "pretty": "console-pretty",
}

# Libraries doing the favicon downloads (httpx) and the page fetches (requests via urllib3).
THIRD_PARTY_LOGGERS: tuple[str, ...] = ("httpx", "httpcore", "urllib3")


def configure_logging() -> None:
    """Configure the `feedicons` logger tree for the current environment.

    Raises:
        - `ValueError` if the log format is unknown, or isn't "mozlog" in production.
    """
    log_format = settings.logging.format
    handler = FORMAT_HANDLERS.get(log_format)
    if handler is None:
        raise ValueError(
            f"Invalid log format: {log_format}. Should either be 'mozlog' or 'pretty'."
        )

    if settings.current_env.lower() == "production" and log_format != "mozlog":
        raise ValueError("Log format must be 'mozlog' in production")

    level = settings.logging.level
    loggers: dict[str, Any] = {
        "feedicons": {
            "handlers": [handler],
            "level": level,
            "propagate": settings.logging.can_propagate,
        },
    }
    for name in THIRD_PARTY_LOGGERS:
        loggers[name] = {
            "handlers": [handler],
            "level": settings.logging.get("third_party_level", "WARNING"),
            "propagate": False,
        }

    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "text": {"format": "%(message)s"},
                "json": {
                    "()": GCPCompatibleJSONFormatter,
                    "logger_name": "feedicons",
                },
            },
            "handlers": {
                "console-mozlog": {
                    "level": level,
                    "class": "logging.StreamHandler",
                    "formatter": "json",
                    "stream": sys.stdout,
                },
                "console-pretty": {
                    "level": level,
                    "class": "rich.logging.RichHandler",
                    "formatter": "text",
                    "show_path": False,
                },
            },
            "loggers": loggers,
        }
    )


class GCPCompatibleJSONFormatter(dockerflow_logging.JsonLogFormatter):
    """MozLog JSON formatter that also emits a `severity` field for GCP log ingestion."""

    SEVERITIES = {
        logging.CRITICAL: 600,
        logging.ERROR: 500,
        logging.WARNING: 400,
        logging.INFO: 200,
        logging.DEBUG: 100,
    }

    def convert_record(self, record):
        """Add the GCP severity of the record level to the MozLog fields."""
        fields = super().convert_record(record)
        fields["severity"] = self.SEVERITIES.get(record.levelno, 0)
        return fields

"""Logging configuration for the waitlist engine."""
import json
import logging
import logging.config
import sys
from datetime import datetime, timezone
from pathlib import Path

from app.config.settings import settings

# Structured fields callers pass through ``extra=`` that the JSON formatter keeps
STRUCTURED_FIELDS = (
    "offer_id",
    "entry_id",
    "salon_id",
    "processed",
    "chained",
    "reactivated",
    "sent",
    "errors",
    "task_id",
)


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging"""

    def format(self, record):
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno
        }

        for field in STRUCTURED_FIELDS:
            if hasattr(record, field):
                log_entry[field] = getattr(record, field)

        if record.exc_info:
            log_entry['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str)


def build_logging_config(log_dir: str, level: str, use_json: bool = False) -> dict:
    """Build the dictConfig mapping; split out so it can be inspected without side effects."""
    log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    detailed_format = "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"
    console_formatter = "json" if use_json else "simple"

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "simple": {
                "format": log_format,
                "datefmt": "%Y-%m-%d %H:%M:%S"
            },
            "detailed": {
                "format": detailed_format,
                "datefmt": "%Y-%m-%d %H:%M:%S"
            },
            "json": {
                "()": JSONFormatter,
            }
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": "INFO",
                "formatter": console_formatter,
                "stream": sys.stdout
            },
            "file": {
                "class": "logging.handlers.RotatingFileHandler",
                "level": "DEBUG",
                "formatter": "detailed",
                "filename": str(Path(log_dir) / "waitlist.log"),
                "maxBytes": 10485760,  # 10MB
                "backupCount": 5
            },
            "error_file": {
                "class": "logging.handlers.RotatingFileHandler",
                "level": "ERROR",
                "formatter": "detailed",
                "filename": str(Path(log_dir) / "error.log"),
                "maxBytes": 10485760,  # 10MB
                "backupCount": 5
            }
        },
        "loggers": {
            # Root logger
            "": {
                "level": level.upper(),
                "handlers": ["console", "file"],
                "propagate": False
            },
            "app": {
                "level": "DEBUG",
                "handlers": ["console", "file", "error_file"],
                "propagate": False
            },
            "celery": {
                "level": "INFO",
                "handlers": ["console", "file"],
                "propagate": False
            },
            # supabase-py / postgrest transport chatter
            "httpx": {
                "level": "WARNING",
                "handlers": ["console", "file"],
                "propagate": False
            },
        }
    }


def setup_logging():
    """Setup logging configuration."""
    Path(settings.LOG_DIR).mkdir(parents=True, exist_ok=True)
    logging.config.dictConfig(
        build_logging_config(settings.LOG_DIR, settings.LOG_LEVEL, settings.LOG_JSON)
    )

    logger = logging.getLogger("app")
    logger.info(f"Logging configured with level: {settings.LOG_LEVEL}")

    return logger

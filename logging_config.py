import json
import logging
import logging.config
from datetime import datetime, timezone
from typing import Optional

from config import settings

AUDIT_LOGGER = "loan_app.audit"


class JsonFormatter(logging.Formatter):
    """Lightweight JSON formatter to keep logs structured."""

    def __init__(self, stream_label: str = "app") -> None:
        super().__init__()
        self.stream_label = stream_label

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "stream": self.stream_label,
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def _formatters(use_json: bool) -> dict:
    if use_json:
        return {
            "default": {"()": JsonFormatter, "stream_label": "app"},
            "audit": {"()": JsonFormatter, "stream_label": "audit"},
        }
    text = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
    return {
        "default": {"format": text},
        "audit": {"format": text},
    }


def configure_logging(level: Optional[str] = None, use_json: Optional[bool] = None) -> None:
    log_level = (level or settings.log_level).upper()
    use_json = settings.log_json if use_json is None else use_json
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": _formatters(use_json),
            "handlers": {
                "default": {
                    "class": "logging.StreamHandler",
                    "level": log_level,
                    "formatter": "default",
                    "stream": "ext://sys.stdout",
                },
                "audit": {
                    "class": "logging.StreamHandler",
                    "level": log_level,
                    "formatter": "audit",
                    "stream": "ext://sys.stdout",
                },
            },
            "loggers": {
                "": {"handlers": ["default"], "level": log_level, "propagate": False},
                AUDIT_LOGGER: {"handlers": ["audit"], "level": log_level, "propagate": False},
                "uvicorn": {"handlers": ["default"], "level": log_level, "propagate": False},
                "uvicorn.error": {"handlers": ["default"], "level": log_level, "propagate": False},
                "uvicorn.access": {"handlers": ["default"], "level": log_level, "propagate": False},
            },
        }
    )
    logging.getLogger(__name__).info("Logging configured level=%s json=%s", log_level, use_json)


def get_audit_logger() -> logging.Logger:
    return logging.getLogger(AUDIT_LOGGER)

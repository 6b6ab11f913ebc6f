"""Centralised logging configuration for the live-reload relay."""
from __future__ import annotations

import logging
import logging.config
from pathlib import Path
from typing import Dict

from core.utils.env import get_env

_ORIGINAL_LOG_RECORD_FACTORY = logging.getLogRecordFactory()
_LOG_RECORD_FACTORY_CONFIGURED = False

_LOGGING_CONFIGURED = False


class _WebsocketProtocolFilter(logging.Filter):
    """Filter all websocket protocol-level debug messages."""

    def filter(self, record: logging.LogRecord) -> bool:
        if "websockets" in record.pathname:
            # Only allow WARNING and above (suppress DEBUG and INFO)
            return record.levelno >= logging.WARNING
        return True


class _NoPingPongFilter(logging.Filter):
    """Filter websocket keepalive ping/pong chatter."""

    _BLACKLIST = (
        "% sending keepalive ping",
        "> PING",
        "< PONG",
        "keepalive pong",
    )

    def filter(self, record: logging.LogRecord) -> bool:  # pragma: no cover - behaviourally trivial
        message = record.getMessage()
        return not any(token in message for token in self._BLACKLIST)


def _resolve_level(value: str | None, default: str) -> str:
    value = (value or "").strip().upper()
    if value and getattr(logging, value, None) is not None:
        return value
    return default


def _install_log_record_factory(project_root: Path) -> None:
    """Install a log record factory that exposes project-relative paths."""

    global _LOG_RECORD_FACTORY_CONFIGURED
    if _LOG_RECORD_FACTORY_CONFIGURED:
        return

    prefix = f"{project_root}/"

    def factory(*args, **kwargs):
        record = _ORIGINAL_LOG_RECORD_FACTORY(*args, **kwargs)
        pathname = getattr(record, "pathname", "") or ""
        if pathname.startswith(prefix):
            record.shortpathname = pathname[len(prefix):]
        else:
            record.shortpathname = pathname
        return record

    logging.setLogRecordFactory(factory)
    _LOG_RECORD_FACTORY_CONFIGURED = True


def setup_logging(force: bool = False, level: str | None = None) -> None:
    """Configure root, relay and uvicorn loggers for console and optional file output."""

    global _LOGGING_CONFIGURED
    if _LOGGING_CONFIGURED and not force:
        return

    log_level = _resolve_level(level or get_env("RELAY_LOG_LEVEL", default="INFO"), "INFO")
    console_level = _resolve_level(get_env("RELAY_LOG_CONSOLE_LEVEL", default=log_level), log_level)
    file_level = _resolve_level(get_env("RELAY_LOG_FILE_LEVEL", default=log_level), log_level)

    handlers: Dict[str, object] = {
        "console": {
            "class": "logging.StreamHandler",
            "level": console_level,
            "formatter": "standard",
            "stream": "ext://sys.stdout",
        },
    }
    root_handlers = ["console"]

    log_dir_value = get_env("RELAY_LOG_DIR")
    if log_dir_value:
        log_dir = Path(log_dir_value)
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / (get_env("RELAY_LOG_FILE", default="relay.log") or "relay.log")
        handlers["file"] = {
            "class": "logging.handlers.TimedRotatingFileHandler",
            "level": file_level,
            "formatter": "standard",
            "filename": str(log_file),
            "when": "midnight",
            "backupCount": int(get_env("RELAY_LOG_RETENTION", default="7") or "7"),
            "encoding": "utf-8",
        }
        root_handlers.append("file")

    use_milliseconds = (
        (get_env("RELAY_LOG_TIME_MS", default="false") or "false").lower()
        in {"1", "true", "yes", "on"}
    )
    location_fmt = "%(shortpathname)s:%(lineno)d"
    if use_milliseconds:
        fmt = "%(asctime)s.%(msecs)03d %(levelname)s [{location}] - %(message)s".format(location=location_fmt)
    else:
        fmt = "%(asctime)s %(levelname)s [{location}] - %(message)s".format(location=location_fmt)
    datefmt = "%Y-%m-%d %H:%M:%S"

    config: Dict[str, object] = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {
                "format": fmt,
                "datefmt": datefmt,
            },
        },
        "handlers": handlers,
        "root": {
            "level": log_level,
            "handlers": root_handlers,
        },
        "loggers": {
            # Startup banners and bind failures come through uvicorn.error
            "uvicorn": {
                "level": "INFO",
                "handlers": root_handlers,
                "propagate": False,
            },
            "uvicorn.error": {
                "level": "INFO",
                "handlers": root_handlers,
                "propagate": False,
            },
            # Request lines are logged by core.observability instead
            "uvicorn.access": {
                "level": "CRITICAL",
                "handlers": ["console"],
                "propagate": False,
            },
        },
    }

    _install_log_record_factory(Path(__file__).resolve().parents[1])

    logging.config.dictConfig(config)
    logging.captureWarnings(True)

    for name in (
        "websockets",
        "websockets.client",
        "websockets.server",
        "websockets.protocol",
        "httpcore",
        "httpcore.http11",
        "httpcore.connection",
        "httpx",
        "h11",
        "wsproto",
    ):
        logging.getLogger(name).setLevel(logging.WARNING)

    uvicorn_error_logger = logging.getLogger("uvicorn.error")
    uvicorn_error_logger.addFilter(_NoPingPongFilter())
    uvicorn_error_logger.addFilter(_WebsocketProtocolFilter())

    _LOGGING_CONFIGURED = True


__all__ = ["setup_logging"]

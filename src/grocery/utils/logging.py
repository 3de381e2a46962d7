"""Logging setup for the grocery service.

Records flow through stdlib handlers (stdout, plus rotating files when a
log directory is given). structlog sits in front of them and renders JSON
in production and staging, Rich-formatted console output elsewhere.
"""

import logging
import logging.handlers
import os
import sys
from pathlib import Path

import structlog

_LEVEL_BY_ENV = {
    "production": "INFO",
    "staging": "INFO",
    "development": "DEBUG",
    "test": "WARNING",
}

_JSON_ENVS = ("production", "staging")

_MAX_BYTES = 10 * 1024 * 1024
_BACKUPS = 5


def current_env() -> str:
    return (os.getenv("ENVIRONMENT") or os.getenv("PROTEAN_ENV") or "development").lower()


def resolve_level(env: str | None = None) -> str:
    """``LOG_LEVEL`` wins; otherwise the level follows the environment."""
    env = env or current_env()
    return os.getenv("LOG_LEVEL", _LEVEL_BY_ENV.get(env, "INFO")).upper()


def _rotating(path: Path, level) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        filename=path,
        maxBytes=_MAX_BYTES,
        backupCount=_BACKUPS,
        encoding="utf-8",
    )
    handler.setLevel(level)
    return handler


def _install_handlers(level: str, log_dir: str | None, prefix: str) -> None:
    root = logging.getLogger()
    root.setLevel(level)
    root.handlers = []

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(level)
    root.addHandler(console)

    if log_dir:
        directory = Path(log_dir)
        directory.mkdir(parents=True, exist_ok=True)
        root.addHandler(_rotating(directory / f"{prefix}.log", level))
        root.addHandler(_rotating(directory / f"{prefix}_error.log", logging.ERROR))

    # Framework chatter stays at WARNING regardless of the service level
    for noisy in ("protean", "asyncio", "uvicorn.access"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def _renderer(env: str):
    if env in _JSON_ENVS:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(
        colors=True,
        exception_formatter=structlog.dev.RichTracebackFormatter(show_locals=False, max_frames=3),
    )


def _install_structlog(env: str) -> None:
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            _renderer(env),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_logging(level: str | None = None, log_dir: str | None = "logs", log_file_prefix: str = "grocery") -> None:
    """Configure stdlib handlers and structlog for the service."""
    env = current_env()
    _install_handlers(level or resolve_level(env), log_dir, log_file_prefix)
    _install_structlog(env)

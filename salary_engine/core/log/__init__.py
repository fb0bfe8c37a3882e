"""Process-wide logging for the salary engine: rich console, rotating files, context.

The API process and the batch scripts call :func:`init_logging` once; every
module then uses ``get_logger(__name__)``. Handlers sit behind a queue so the
request threads and the background job threads never block on file I/O.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from logging.handlers import QueueHandler, QueueListener, TimedRotatingFileHandler
from pathlib import Path
from queue import SimpleQueue
from threading import RLock
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.traceback import install as install_rich_traceback

from .context import ContextFilter, log_context
from .progress import progress_manager
from .timing import timeit

__all__ = [
    "init_logging",
    "get_logger",
    "set_level",
    "shutdown_logging",
    "log_context",
    "progress_manager",
    "timeit",
]

FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(context)s%(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers that are too chatty at INFO for batch output.
QUIET_LOGGERS = ("httpx", "httpcore", "sqlalchemy.engine.Engine")
# Uvicorn installs its own handlers; strip them so its lines share ours.
UVICORN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def _env_log_dir() -> Optional[Path]:
    value = os.getenv("LOG_DIR", "logs")
    return Path(value) if value else None


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    try:
        return int(raw) if raw else default
    except ValueError:
        return default


@dataclass
class LoggingConfig:
    app_name: str = "salary_engine"
    level: str | int = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    log_dir: Optional[Path] = field(default_factory=_env_log_dir)
    retention_days: int = field(default_factory=lambda: _env_int("LOG_RETENTION_DAYS", 14))
    console: bool = True
    rich_tracebacks: bool = True
    queue: bool = True

    @property
    def numeric_level(self) -> int:
        if isinstance(self.level, int):
            return self.level
        return getattr(logging, str(self.level).upper(), logging.INFO)


class _LoggingRuntime:
    """Owns the active configuration and the queue listener."""

    def __init__(self) -> None:
        self.lock = RLock()
        self.config: LoggingConfig | None = None
        self.listener: QueueListener | None = None
        self.context_filter = ContextFilter()

    def _console_handler(self, cfg: LoggingConfig, console: Console) -> logging.Handler:
        handler = RichHandler(
            console=console,
            rich_tracebacks=cfg.rich_tracebacks,
            show_path=False,
            markup=False,
            log_time_format=DATE_FORMAT,
        )
        handler.setFormatter(logging.Formatter("%(context)s%(message)s"))
        return handler

    def _file_handler(self, cfg: LoggingConfig) -> logging.Handler:
        directory = Path(cfg.log_dir)
        directory.mkdir(parents=True, exist_ok=True)
        handler = TimedRotatingFileHandler(
            directory / f"{cfg.app_name}.log",
            when="midnight",
            backupCount=cfg.retention_days,
            encoding="utf-8",
        )
        handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT))
        return handler

    def build_handlers(self, cfg: LoggingConfig) -> list[logging.Handler]:
        if cfg.rich_tracebacks:
            install_rich_traceback(show_locals=False)
        console = Console(stderr=True)
        progress_manager.use_console(console)

        handlers: list[logging.Handler] = []
        if cfg.console:
            handlers.append(self._console_handler(cfg, console))
        if cfg.log_dir:
            handlers.append(self._file_handler(cfg))
        for handler in handlers:
            handler.setLevel(cfg.numeric_level)
            handler.addFilter(self.context_filter)
        return handlers

    def configure(self, cfg: LoggingConfig) -> None:
        root = logging.getLogger()
        root.setLevel(logging.NOTSET)
        for handler in list(root.handlers):
            root.removeHandler(handler)

        handlers = self.build_handlers(cfg)
        if cfg.queue and handlers:
            queue_handler = QueueHandler(SimpleQueue())
            queue_handler.setLevel(cfg.numeric_level)
            # Context must be captured on the emitting thread, not the listener.
            queue_handler.addFilter(self.context_filter)
            root.addHandler(queue_handler)
            self.listener = QueueListener(queue_handler.queue, *handlers, respect_handler_level=True)
            self.listener.start()
        else:
            for handler in handlers:
                root.addHandler(handler)

        for name in QUIET_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)
        for name in UVICORN_LOGGERS:
            uvicorn_logger = logging.getLogger(name)
            uvicorn_logger.handlers.clear()
            uvicorn_logger.propagate = True
        self.config = cfg

    def teardown(self) -> None:
        if self.listener is not None:
            self.listener.stop()
        self.listener = None
        self.config = None
        progress_manager.reset_console()
        root = logging.getLogger()
        for handler in list(root.handlers):
            root.removeHandler(handler)
            handler.close()


_runtime = _LoggingRuntime()


def init_logging(**overrides: object) -> None:
    """Configure logging once per process.

    Unknown keyword arguments are ignored. Calling again with identical
    options does nothing; different options replace the running handlers.
    """

    cfg = LoggingConfig()
    for key, value in overrides.items():
        if hasattr(cfg, key):
            setattr(cfg, key, value)

    with _runtime.lock:
        if _runtime.config == cfg:
            return
        if _runtime.config is not None:
            _runtime.teardown()
        _runtime.configure(cfg)


def shutdown_logging() -> None:
    """Flush and detach every handler; scripts call this on exit."""

    with _runtime.lock:
        _runtime.teardown()


def get_logger(name: str | None = None) -> logging.Logger:
    with _runtime.lock:
        if _runtime.config is None:
            init_logging()
        app_name = _runtime.config.app_name if _runtime.config else LoggingConfig.app_name
    return logging.getLogger(name or app_name)


def set_level(level: str | int) -> None:
    numeric = LoggingConfig(level=level).numeric_level
    for handler in logging.getLogger().handlers:
        handler.setLevel(numeric)
    if _runtime.listener is not None:
        for handler in _runtime.listener.handlers:
            handler.setLevel(numeric)

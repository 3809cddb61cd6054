#!/usr/bin/env python3
"""
logging_manager.py
------------------
File logging for rename runs.

A rename run has two writers: the orchestrator on the main thread and the
discussion watchdog on its own thread. Every record therefore carries the
thread name and, once a run is bound, the ``old → new`` pair it belongs to:

    2026-10-18 14:02:11 INFO    [MainThread] Old → New | OPERATION document_updated: {"document": "D1", "links": 2}
    2026-10-18 14:02:12 ERROR   [relink-watchdog] Old → New | ValueError: boom | document=Watched

Terminal output belongs to the CLI (``click.echo``). Records reach the
console only when a ``console_level`` is given, which the CLI does for
``--verbose``.

Files (under ``log_dir``):
    <component>.log   every record, rotated
    errors.log        ERROR and above, rotated
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import json
import logging
import sys
import traceback
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Optional

# --- Third party imports ---
import click


RECORD_FORMAT = "%(asctime)s %(levelname)-7s [%(threadName)s] %(run)s%(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _render(message: str, details: Optional[Dict[str, Any]]) -> str:
    if not details:
        return message
    return f"{message}: {json.dumps(details, default=str, ensure_ascii=False)}"


def format_cli_error(error: BaseException, show_traceback: bool = False) -> str:
    """
    One-line terminal message for an error, with its traceback if asked.

    Examples:
        >>> format_cli_error(ConfigError("Missing required fields: ['token']"))
        "❌ ConfigError: Missing required fields: ['token']"
    """
    message = f"❌ {type(error).__name__}: {error}"
    if show_traceback and error.__traceback__ is not None:
        tb = "".join(traceback.format_exception(type(error), error, error.__traceback__))
        message = f"{message}\n\n{tb}"
    return message


class _RunContext(logging.Filter):
    """Stamps each record with the rename pair currently bound."""

    def __init__(self) -> None:
        super().__init__()
        self.label = ""

    def filter(self, record: logging.LogRecord) -> bool:
        record.run = self.label
        return True


class RelinkLogger:
    """
    Structured file logger shared by the orchestrator and the watchdog.

    Attributes:
        log_dir: Directory holding the log files
        component_name: Log file stem and logger name suffix
        logger: Underlying ``logging.Logger``
    """

    def __init__(
        self,
        log_dir: Path,
        component_name: str = "relink",
        max_bytes: int = 5 * 1024 * 1024,
        backup_count: int = 3,
        console_level: Optional[int] = None,
    ) -> None:
        """
        Args:
            log_dir: Directory for log files (created if missing)
            component_name: Component identifier, e.g. 'rename'
            max_bytes: Size at which a log file is rotated
            backup_count: Rotated files kept per log
            console_level: Also mirror records at this level to stderr
        """
        self.log_dir = Path(log_dir)
        self.component_name = component_name
        self.log_dir.mkdir(parents=True, exist_ok=True)

        self._context = _RunContext()
        self.logger = logging.getLogger(f"relink.{component_name}")
        self.logger.setLevel(logging.DEBUG)
        for handler in list(self.logger.handlers):
            self.logger.removeHandler(handler)
            handler.close()
        for existing in list(self.logger.filters):
            self.logger.removeFilter(existing)
        self.logger.addFilter(self._context)

        formatter = logging.Formatter(RECORD_FORMAT, datefmt=DATE_FORMAT)
        for filename, level in (
            (f"{component_name}.log", logging.DEBUG),
            ("errors.log", logging.ERROR),
        ):
            handler = RotatingFileHandler(
                self.log_dir / filename,
                maxBytes=max_bytes,
                backupCount=backup_count,
                encoding="utf-8",
            )
            handler.setLevel(level)
            handler.setFormatter(formatter)
            self.logger.addHandler(handler)

        if console_level is not None:
            console = logging.StreamHandler(sys.stderr)
            console.setLevel(console_level)
            console.setFormatter(formatter)
            self.logger.addHandler(console)

    def bind_run(self, old_title: str, new_title: str) -> None:
        """Prefix every following record with ``old → new``."""
        self._context.label = f"{old_title} → {new_title} | "

    def log_operation(self, operation: str, details: Optional[Dict[str, Any]] = None) -> None:
        """Record a completed step of the run (collection, an edit, run start/finish)."""
        self.logger.info(_render(f"OPERATION {operation}", details))

    def log_error(self, error: BaseException, context: Optional[Dict[str, Any]] = None) -> None:
        """
        Record an error with its own traceback; goes to errors.log as well.

        Args:
            error: The exception
            context: Key/values identifying where it happened
        """
        message = f"{type(error).__name__}: {error}"
        if context:
            message += " | " + ", ".join(f"{k}={v}" for k, v in context.items())
        exc_info = (type(error), error, error.__traceback__) if error.__traceback__ else None
        self.logger.error(message, exc_info=exc_info)

    def log_debug(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        self.logger.debug(_render(message, details))

    def log_info(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        self.logger.info(_render(message, details))

    def log_warning(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        self.logger.warning(_render(message, details))

    def log_cli_error(
        self,
        error: BaseException,
        context: Optional[Dict[str, Any]] = None,
        show_traceback: bool = False,
    ) -> str:
        """Log ``error`` and return the message to show in the terminal."""
        self.log_error(error, context or {"source": "cli"})
        return format_cli_error(error, show_traceback)


class NullLogger:
    """Accepts every RelinkLogger call and discards it."""

    def _discard(self, *args: Any, **kwargs: Any) -> None:
        return None

    bind_run = log_operation = log_error = log_debug = log_info = log_warning = _discard

    def log_cli_error(
        self,
        error: BaseException,
        context: Optional[Dict[str, Any]] = None,
        show_traceback: bool = False,
    ) -> str:
        return format_cli_error(error, show_traceback)


_null_logger = NullLogger()


def safe_logger(logger: Optional[RelinkLogger]) -> RelinkLogger:
    """Return ``logger``, or the shared NullLogger when it is None."""
    return logger if logger is not None else _null_logger  # type: ignore[return-value]


def handle_cli_error(
    ctx: "click.Context",
    error: Exception,
    operation: str,
    additional_context: Optional[Dict[str, Any]] = None,
    exit_code: int = 1,
) -> None:
    """
    Log a command failure, print it to stderr and exit.

    The logger and verbose flag come from ``ctx.obj`` as set up by
    ``relink_cli_group``; with ``--verbose`` the traceback is printed too.
    Never returns.
    """
    context = {"operation": operation, **(additional_context or {})}
    logger = safe_logger(ctx.obj.get("logger"))
    click.echo(
        logger.log_cli_error(error, context, show_traceback=ctx.obj.get("verbose", False)),
        err=True,
    )
    sys.exit(exit_code)

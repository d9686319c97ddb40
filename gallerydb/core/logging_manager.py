#!/usr/bin/env python3
"""
logging_manager.py
--------------------
Logging for gallery store operations.

One logger per component (``gallerydb.<component>``) writes to three sinks:

    <log_dir>/<component>.log   everything from DEBUG up
    <log_dir>/errors.log        ERROR and above, with tracebacks
    stderr                      WARNING and above

Structured details travel on the log record and are rendered as a JSON
suffix, so the same call produces a readable line and greppable fields.

The store-specific helpers (conflict retries, cascade deletes, tag sweeps)
keep the wording and fields of those events in one place.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import json
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

# --- Third party imports ---
import click

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s | %(message)s%(details_json)s"
CONSOLE_FORMAT = "%(asctime)s %(levelname)s %(name)s | %(message)s%(details_json)s"


class _DetailFormatter(logging.Formatter):
    """Formatter that appends a record's ``details`` mapping as JSON."""

    def format(self, record: logging.LogRecord) -> str:
        details = getattr(record, "details", None)
        record.details_json = (
            " " + json.dumps(details, default=str, sort_keys=True) if details else ""
        )
        return super().format(record)


class GalleryLogger:
    """
    Component logger for the gallery store.

    Attributes:
        log_dir: Directory holding the component and error logs
        component_name: Component name, used for the logger and file names
        logger: Underlying ``logging.Logger``
    """

    def __init__(
        self,
        log_dir: Path,
        component_name: str = "gallerydb",
        max_bytes: int = 10 * 1024 * 1024,
        backup_count: int = 5,
    ) -> None:
        """
        Args:
            log_dir: Directory for log files, created if missing
            component_name: e.g. 'database' or 'cli'
            max_bytes: Size at which a log file rotates
            backup_count: Rotated files kept per log
        """
        self.log_dir = Path(log_dir)
        self.component_name = component_name
        self.max_bytes = max_bytes
        self.backup_count = backup_count

        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.logger = logging.getLogger(f"gallerydb.{component_name}")
        self.logger.setLevel(logging.DEBUG)
        self.logger.propagate = False
        self.close()

        self._add_handler(
            self._rotating(self.log_dir / f"{component_name}.log"), logging.DEBUG
        )
        self._add_handler(self._rotating(self.log_dir / "errors.log"), logging.ERROR)
        self._add_handler(
            logging.StreamHandler(), logging.WARNING, CONSOLE_FORMAT, "%H:%M:%S"
        )

    def _rotating(self, path: Path) -> RotatingFileHandler:
        return RotatingFileHandler(
            path,
            maxBytes=self.max_bytes,
            backupCount=self.backup_count,
            encoding="utf-8",
        )

    def _add_handler(
        self,
        handler: logging.Handler,
        level: int,
        fmt: str = LOG_FORMAT,
        datefmt: str = "%Y-%m-%d %H:%M:%S",
    ) -> None:
        handler.setLevel(level)
        handler.setFormatter(_DetailFormatter(fmt, datefmt=datefmt))
        self.logger.addHandler(handler)

    def close(self) -> None:
        """Close and detach every handler on this component's logger."""
        for handler in list(self.logger.handlers):
            handler.close()
            self.logger.removeHandler(handler)

    def _emit(
        self,
        level: int,
        message: str,
        details: Optional[Mapping[str, Any]] = None,
        exc_info: Any = None,
    ) -> None:
        self.logger.log(
            level, message, extra={"details": dict(details or {})}, exc_info=exc_info
        )

    # -------------------------------------------------------------------------
    # General purpose
    # -------------------------------------------------------------------------

    def log_operation(
        self, operation: str, details: Optional[Dict[str, Any]] = None
    ) -> None:
        """Record a completed store operation."""
        self._emit(logging.INFO, f"operation {operation}", details)

    def log_debug(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        self._emit(logging.DEBUG, message, details)

    def log_info(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        self._emit(logging.INFO, message, details)

    def log_warning(
        self, message: str, details: Optional[Dict[str, Any]] = None
    ) -> None:
        self._emit(logging.WARNING, message, details)

    def log_error(
        self, error: Exception, context: Optional[Dict[str, Any]] = None
    ) -> None:
        """
        Log an exception with its context.

        The traceback is attached when the error carries one, that is when
        it was raised rather than only constructed.
        """
        exc_info = (
            (type(error), error, error.__traceback__) if error.__traceback__ else None
        )
        self._emit(
            logging.ERROR, f"{type(error).__name__}: {error}", context, exc_info
        )

    # -------------------------------------------------------------------------
    # Store events
    # -------------------------------------------------------------------------

    def log_conflict_retry(
        self, attempt: int, max_retries: int, error: Exception
    ) -> None:
        """A save hit a stale row and will be retried with the caller's values."""
        self._emit(
            logging.WARNING,
            "Concurrency conflict, retrying save",
            {"attempt": attempt, "max_retries": max_retries, "error": str(error)},
        )

    def log_conflict_resolved(self, attempts: int) -> None:
        """A save went through after one or more conflicts."""
        self._emit(logging.INFO, "Save succeeded after conflicts", {"attempts": attempts})

    def log_conflict_exhausted(self, error: Exception, attempts: int) -> None:
        """Every permitted save attempt conflicted."""
        self._emit(
            logging.ERROR,
            f"{type(error).__name__}: {error}",
            {"attempts": attempts},
        )

    def log_cascade_delete(
        self, kind: str, object_id: int, counts: Mapping[str, int]
    ) -> None:
        """A gallery object and everything under it was removed."""
        self._emit(logging.INFO, f"{kind} deleted", {"id": object_id, **counts})

    def log_tag_sweep(self, count: int) -> None:
        """Unreferenced tags were removed from the tag table."""
        if count:
            self._emit(logging.INFO, "Unused tags deleted", {"count": count})

    # -------------------------------------------------------------------------
    # Command line
    # -------------------------------------------------------------------------

    def log_cli_error(
        self,
        error: Exception,
        context: Optional[Dict[str, Any]] = None,
        show_traceback: bool = False,
    ) -> str:
        """
        Log an error raised by a command and format it for the terminal.

        Returns:
            Message for the terminal, with the traceback when requested

        Examples:
            >>> logger.log_cli_error(DatabaseError("Connection failed"))
            '❌ DatabaseError: Connection failed'
        """
        self.log_error(error, context or {"source": "cli"})
        return format_cli_error(error, show_traceback)


def format_cli_error(error: Exception, show_traceback: bool = False) -> str:
    """One-line terminal rendering of an error."""
    message = f"❌ {type(error).__name__}: {error}"
    if show_traceback and error.__traceback__ is not None:
        formatter = logging.Formatter()
        trace = formatter.formatException(
            (type(error), error, error.__traceback__)
        )
        message = f"{message}\n\n{trace}"
    return message


def handle_cli_error(
    ctx: "click.Context",
    error: Exception,
    operation: str,
    additional_context: Optional[Dict[str, Any]] = None,
    exit_code: int = 1,
) -> None:
    """
    Log a failed command, print a short message and exit.

    Args:
        ctx: Click context holding ``logger`` and ``verbose``
        error: Exception raised by the command
        operation: Command name, recorded in the log context
        additional_context: Extra context for the log
        exit_code: Process exit code

    Note:
        Never returns.
    """
    logger: Optional[GalleryLogger] = ctx.obj.get("logger")
    verbose: bool = ctx.obj.get("verbose", False)

    context = {"operation": operation}
    if additional_context:
        context.update(additional_context)

    click.echo(
        safe_logger(logger).log_cli_error(error, context, show_traceback=verbose),
        err=True,
    )
    sys.exit(exit_code)


class NullLogger:
    """Logger with the GalleryLogger interface that records nothing."""

    def log_operation(self, operation: str, details: Optional[Dict[str, Any]] = None) -> None:
        pass

    def log_error(self, error: Exception, context: Optional[Dict[str, Any]] = None) -> None:
        pass

    def log_debug(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        pass

    def log_info(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        pass

    def log_warning(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        pass

    def log_conflict_retry(self, attempt: int, max_retries: int, error: Exception) -> None:
        pass

    def log_conflict_resolved(self, attempts: int) -> None:
        pass

    def log_conflict_exhausted(self, error: Exception, attempts: int) -> None:
        pass

    def log_cascade_delete(self, kind: str, object_id: int, counts: Mapping[str, int]) -> None:
        pass

    def log_tag_sweep(self, count: int) -> None:
        pass

    def log_cli_error(
        self,
        error: Exception,
        context: Optional[Dict[str, Any]] = None,
        show_traceback: bool = False,
    ) -> str:
        return format_cli_error(error, show_traceback)


_null_logger = NullLogger()


def safe_logger(logger: Optional[GalleryLogger]) -> GalleryLogger:
    """
    Return the given logger, or a shared NullLogger for None.

    Lets callers write ``safe_logger(self.logger).log_info(...)`` without
    checking for a logger first.
    """
    return logger if logger is not None else _null_logger  # type: ignore[return-value]

"""Structured logging helpers with pass correlation context."""

from __future__ import annotations

import contextvars
import logging
import os
import uuid
from contextlib import contextmanager
from typing import Iterator

_PASS_ID_VAR: contextvars.ContextVar[str] = contextvars.ContextVar(
    "pass_id", default="-"
)
_PHASE_VAR: contextvars.ContextVar[str] = contextvars.ContextVar(
    "phase", default="-"
)

LOG_FORMAT = (
    "%(asctime)s | %(levelname)s | pass=%(pass_id)s | phase=%(phase)s | "
    "%(name)s | %(message)s"
)


class _PassContextFilter(logging.Filter):
    """Inject pass correlation fields into all log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.pass_id = _PASS_ID_VAR.get("-")
        record.phase = _PHASE_VAR.get("-")
        return True


def _ensure_filter_on_root_handlers() -> None:
    root_logger = logging.getLogger()
    for handler in root_logger.handlers:
        has_filter = any(isinstance(f, _PassContextFilter) for f in handler.filters)
        if not has_filter:
            handler.addFilter(_PassContextFilter())


def configure_structured_logging(
    level: int = logging.INFO, log_file: str | None = None
) -> None:
    """Configure root logging format with pass/phase context.

    Args:
        level: Root log level.
        log_file: Also append every record to this file.
    """
    root_logger = logging.getLogger()
    formatter = logging.Formatter(LOG_FORMAT)
    if not root_logger.handlers:
        logging.basicConfig(level=level, format=LOG_FORMAT)
    else:
        root_logger.setLevel(level)
        for handler in root_logger.handlers:
            handler.setFormatter(formatter)

    if log_file:
        already = any(
            isinstance(h, logging.FileHandler)
            and h.baseFilename == os.path.abspath(log_file)
            for h in root_logger.handlers
        )
        if not already:
            parent = os.path.dirname(log_file)
            if parent:
                os.makedirs(parent, exist_ok=True)
            file_handler = logging.FileHandler(log_file, encoding="utf-8")
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)

    _ensure_filter_on_root_handlers()


def start_pass(pass_id: str | None = None) -> str:
    """Set or generate the correlation ID of the current pass."""
    value = pass_id or uuid.uuid4().hex[:12]
    _PASS_ID_VAR.set(value)
    return value


@contextmanager
def pass_scope(pass_id: str | None = None) -> Iterator[str]:
    """Run a block under one pass ID, restoring the previous ID afterwards."""
    token = _PASS_ID_VAR.set(pass_id or uuid.uuid4().hex[:12])
    try:
        yield _PASS_ID_VAR.get()
    finally:
        _PASS_ID_VAR.reset(token)


def get_pass_id() -> str:
    """Get the correlation ID of the current pass."""
    return _PASS_ID_VAR.get("-")


def get_phase() -> str:
    return _PHASE_VAR.get("-")


@contextmanager
def phase_scope(phase: str) -> Iterator[None]:
    """Temporarily tag emitted logs with a pipeline phase."""
    token = _PHASE_VAR.set(phase)
    try:
        yield
    finally:
        _PHASE_VAR.reset(token)

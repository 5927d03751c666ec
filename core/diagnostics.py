"""Build-facing diagnostic channel.

Every message is mirrored into ``logging`` and kept in memory so a pass
report can list what happened.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Optional

from core.structured_logging import get_phase

logger = logging.getLogger("stapler.diagnostics")

ERROR = "error"
WARNING = "warning"
NOTICE = "notice"

_LOG_LEVELS = {
    ERROR: logging.ERROR,
    WARNING: logging.WARNING,
    NOTICE: logging.INFO,
}


@dataclass(frozen=True)
class Diagnostic:
    """A single message emitted during a pass."""

    severity: str
    message: str
    location: Optional[str] = None
    phase: str = "-"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class DiagnosticChannel:
    """Collects error, warning and notice messages for one pass."""

    def __init__(self):
        self.records: List[Diagnostic] = []

    def _emit(self, severity: str, message: str, location: Optional[str]) -> None:
        record = Diagnostic(
            severity=severity,
            message=message,
            location=location,
            phase=get_phase(),
        )
        self.records.append(record)
        if location:
            logger.log(_LOG_LEVELS[severity], "%s (%s)", message, location)
        else:
            logger.log(_LOG_LEVELS[severity], "%s", message)

    def error(self, message: str, location: Optional[str] = None) -> None:
        self._emit(ERROR, message, location)

    def warning(self, message: str, location: Optional[str] = None) -> None:
        self._emit(WARNING, message, location)

    def notice(self, message: str, location: Optional[str] = None) -> None:
        self._emit(NOTICE, message, location)

    def count(self, severity: str) -> int:
        return sum(1 for r in self.records if r.severity == severity)

    @property
    def has_errors(self) -> bool:
        return self.count(ERROR) > 0

    def to_list(self) -> List[Dict[str, Any]]:
        return [r.to_dict() for r in self.records]

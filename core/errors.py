"""Error taxonomy for metadata extraction passes.

Fatal errors abort the whole pass; the others are reported on the
diagnostic channel and only the affected element is skipped.
"""

from __future__ import annotations


class StaplerProcessingError(RuntimeError):
    """Base class for all errors raised by a processing pass."""

    fatal: bool = False

    def __init__(self, message: str, path: str | None = None):
        super().__init__(message)
        self.path = path


class MarkerDetectionError(StaplerProcessingError):
    """Raised when a marker annotation name or doc tag is malformed."""

    fatal = True


class ExtractionIOError(StaplerProcessingError):
    """Raised when a declaration source cannot be read or decoded."""


class ArtifactWriteError(StaplerProcessingError):
    """Raised when an output artifact cannot be written."""


class RegistryCorruption(StaplerProcessingError):
    """Raised when the exposed-bean registry cannot be read or rewritten."""

    fatal = True

"""Core shared contracts and utilities."""

from core.structured_logging import (
    configure_structured_logging,
    get_pass_id,
    pass_scope,
    phase_scope,
    start_pass,
)
from core.build_config import (
    BuildConfig,
    ConfigValidationError,
    load_build_config,
    resolve_strict_config_validation,
    validate_build_config,
)
from core.diagnostics import Diagnostic, DiagnosticChannel
from core.errors import (
    ArtifactWriteError,
    ExtractionIOError,
    MarkerDetectionError,
    RegistryCorruption,
    StaplerProcessingError,
)
from core.run_artifacts import write_pass_report

__all__ = [
    "configure_structured_logging",
    "get_pass_id",
    "pass_scope",
    "phase_scope",
    "start_pass",
    "BuildConfig",
    "ConfigValidationError",
    "load_build_config",
    "resolve_strict_config_validation",
    "validate_build_config",
    "Diagnostic",
    "DiagnosticChannel",
    "ArtifactWriteError",
    "ExtractionIOError",
    "MarkerDetectionError",
    "RegistryCorruption",
    "StaplerProcessingError",
    "write_pass_report",
]

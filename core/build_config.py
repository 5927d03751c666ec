"""Build configuration loading and validation.

Settings come from three layers, later layers winning:

1. Built-in defaults (``BuildConfig`` field defaults).
2. An optional YAML file (``stapler.yml`` by default).
3. Environment variables, optionally loaded from a ``.env`` file.

Command-line flags are applied on top by the caller. In non-strict mode a
missing or malformed file falls back to defaults with a warning; in strict
mode it raises ``ConfigValidationError``.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, fields, replace
from typing import Any, Optional

import yaml
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# Idempotent; does nothing if .env is missing or values are already set
load_dotenv()

DEFAULT_CONFIG_PATH = "stapler.yml"

CLASS_OUTPUT = "class-output"
OUTPUT_DIR = "output-dir"
OUTPUT_LOCATIONS = (CLASS_OUTPUT, OUTPUT_DIR)

_ENV_OVERRIDES = {
    "STAPLER_OUTPUT_LOCATION": "output_location",
    "STAPLER_CLASS_OUTPUT_DIR": "class_output_dir",
    "STAPLER_OUTPUT_DIR": "output_dir",
}

_LIST_KEYS = {
    "source_roots",
    "constructor_annotations",
    "query_parameter_annotations",
    "exported_annotations",
}


class ConfigValidationError(RuntimeError):
    """Raised when strict configuration validation fails."""


@dataclass(frozen=True)
class BuildConfig:
    """Resolved settings for one extraction pass."""

    source_roots: tuple[str, ...] = ("src/main/java",)
    output_location: str = CLASS_OUTPUT
    class_output_dir: str = "target/classes"
    output_dir: Optional[str] = None
    constructor_annotations: tuple[str, ...] = ("DataBoundConstructor",)
    constructor_doc_tag: str = "@stapler-constructor"
    query_parameter_annotations: tuple[str, ...] = ("QueryParameter",)
    exported_annotations: tuple[str, ...] = ("Exported",)
    strict: bool = False
    extra: dict[str, Any] = field(default_factory=dict)

    def output_root(self) -> str:
        """Directory the selected output location strategy writes under."""
        if self.output_location == OUTPUT_DIR:
            return self.output_dir or self.class_output_dir
        return self.class_output_dir

    def with_overrides(self, **overrides: Any) -> "BuildConfig":
        """Return a copy with every non-None override applied."""
        values = {k: v for k, v in overrides.items() if v is not None}
        for key in _LIST_KEYS & values.keys():
            values[key] = tuple(values[key])
        return replace(self, **values)


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def resolve_strict_config_validation(default: bool = False) -> bool:
    """Resolve strict validation mode from ``STRICT_CONFIG_VALIDATION`` env."""
    return _env_flag("STRICT_CONFIG_VALIDATION", default=default)


def _fail(msg: str, strict: bool) -> None:
    if strict:
        raise ConfigValidationError(msg)
    logger.warning("%s; continuing with defaults", msg)


def _read_yaml(config_path: str, strict: bool) -> dict[str, Any]:
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            payload = yaml.safe_load(f)
    except FileNotFoundError as exc:
        if strict:
            raise ConfigValidationError(
                f"Build config file not found: {config_path}"
            ) from exc
        logger.debug("No build config at %s; using defaults", config_path)
        return {}
    except yaml.YAMLError as exc:
        msg = f"Failed to parse build config YAML at {config_path}: {exc}"
        if strict:
            raise ConfigValidationError(msg) from exc
        logger.warning("%s; continuing with defaults", msg)
        return {}

    if payload is None:
        return {}
    if not isinstance(payload, dict):
        _fail(f"Unexpected build config payload type: {type(payload).__name__}", strict)
        return {}

    # Allow the settings to live under a top-level "stapler" section
    section = payload.get("stapler", payload)
    if not isinstance(section, dict):
        _fail("Build config 'stapler' section must be a mapping", strict)
        return {}
    return section


def _coerce(section: dict[str, Any], strict: bool) -> dict[str, Any]:
    known = {f.name for f in fields(BuildConfig)} - {"extra"}
    values: dict[str, Any] = {}
    extra: dict[str, Any] = {}

    for key, value in section.items():
        if key not in known:
            extra[key] = value
            continue
        if key in _LIST_KEYS:
            if isinstance(value, str):
                value = [value]
            if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
                _fail(f"Build config key '{key}' must be a list of strings", strict)
                continue
            values[key] = tuple(value)
        elif key == "strict":
            values[key] = bool(value)
        elif value is None:
            continue
        else:
            values[key] = str(value)

    if extra:
        _fail(f"Unknown build config keys: {', '.join(sorted(extra))}", strict)
        values["extra"] = extra
    return values


def validate_build_config(config: BuildConfig, strict: bool = False) -> BuildConfig:
    """Check cross-field constraints, falling back to defaults when lenient."""
    if config.output_location not in OUTPUT_LOCATIONS:
        _fail(
            f"output_location must be one of {', '.join(OUTPUT_LOCATIONS)}, "
            f"got '{config.output_location}'",
            strict,
        )
        config = replace(config, output_location=CLASS_OUTPUT)

    if config.output_location == OUTPUT_DIR and not config.output_dir:
        _fail("output_location 'output-dir' requires output_dir", strict)
        config = replace(config, output_location=CLASS_OUTPUT)

    if config.output_location == CLASS_OUTPUT and config.output_dir:
        logger.warning(
            "output_dir '%s' is ignored with output_location '%s'; writing under '%s'",
            config.output_dir,
            CLASS_OUTPUT,
            config.class_output_dir,
        )

    if not config.source_roots:
        _fail("At least one source root is required", strict)
        config = replace(config, source_roots=BuildConfig().source_roots)

    return config


def load_build_config(
    config_path: Optional[str] = None,
    strict: Optional[bool] = None,
) -> BuildConfig:
    """Load build settings from YAML and environment overrides.

    Args:
        config_path: YAML file to read. Defaults to ``stapler.yml`` in the
            working directory; a missing default file is not an error.
        strict: Raise on any problem instead of falling back to defaults.
            Defaults to ``STRICT_CONFIG_VALIDATION``.

    Returns:
        The validated ``BuildConfig``.

    Raises:
        ConfigValidationError: In strict mode, if the file or a value is invalid.
    """
    if strict is None:
        strict = resolve_strict_config_validation()

    explicit = config_path is not None
    path = config_path or DEFAULT_CONFIG_PATH
    if explicit or os.path.exists(path):
        section = _read_yaml(path, strict=strict)
    else:
        section = {}

    values = _coerce(section, strict=strict)
    for env_name, key in _ENV_OVERRIDES.items():
        raw = os.getenv(env_name)
        if raw:
            values[key] = raw.strip()
    values["strict"] = strict or bool(values.get("strict", False))

    config = BuildConfig(**values)
    config = validate_build_config(config, strict=config.strict)
    logger.debug("Resolved build config: %s", config)
    return config

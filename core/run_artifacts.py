"""Pass report helpers for operational reporting."""

from __future__ import annotations

import json
import os
from datetime import datetime, timezone
from typing import Any

from core.build_config import BuildConfig

REPORT_PREFIX = "stapler-pass-"


def describe_config(config: BuildConfig) -> dict[str, Any]:
    """The settings that decide where a pass reads and writes."""
    return {
        "source_roots": list(config.source_roots),
        "output_location": config.output_location,
        "output_root": os.path.abspath(config.output_root()),
        "strict": config.strict,
    }


def write_pass_report(
    report: dict[str, Any],
    pass_id: str,
    output_dir: str = "target/stapler-reports",
    config: BuildConfig | None = None,
) -> str:
    """Write a JSON pass report and return its path.

    The report is named after the pass ID, so repeated passes accumulate
    side by side instead of overwriting each other.
    """
    os.makedirs(output_dir, exist_ok=True)
    payload = dict(report)
    payload.setdefault("pass_id", pass_id)
    payload.setdefault("timestamp_utc", datetime.now(timezone.utc).isoformat())
    if config is not None:
        payload.setdefault("config", describe_config(config))
    path = os.path.join(output_dir, f"{REPORT_PREFIX}{pass_id}.json")
    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, sort_keys=True)
    return path

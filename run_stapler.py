#!/usr/bin/env python3
"""
Command-line entry point running one metadata extraction pass.

Scans Java source roots for marked constructors, query-parameter methods
and exported bean members, writes the ``.stapler`` / ``.javadoc`` records
under the output root and merges the exposed-bean registry.

Usage:
    python run_stapler.py --source-dir src/main/java --class-output-dir target/classes
    python run_stapler.py --config stapler.yml --report-dir target/stapler-reports
    python run_stapler.py --source-dir src --output-location output-dir --output-dir out
"""

import argparse
import logging
import sys
from typing import List, Optional

from core.build_config import (
    OUTPUT_DIR,
    OUTPUT_LOCATIONS,
    ConfigValidationError,
    load_build_config,
    validate_build_config,
)
from core.errors import StaplerProcessingError
from core.run_artifacts import write_pass_report
from core.structured_logging import configure_structured_logging, pass_scope
from processors.composite import run_pass

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FATAL = 1
EXIT_ERRORS = 2


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Parsed argument namespace.
    """
    parser = argparse.ArgumentParser(
        description="Stapler metadata extraction pass",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  python run_stapler.py --source-dir src/main/java\n"
            "  python run_stapler.py --config stapler.yml --fail-on-error\n"
        ),
    )

    parser.add_argument(
        "--source-dir",
        action="append",
        dest="source_roots",
        help="Java source root to scan (repeatable). Overrides the config file.",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="YAML build config. Default: stapler.yml if present.",
    )
    parser.add_argument(
        "--output-location",
        choices=OUTPUT_LOCATIONS,
        default=None,
        help="Root resources under the class output tree or an explicit directory.",
    )
    parser.add_argument(
        "--class-output-dir",
        default=None,
        help="Compiler class output directory (class-output location).",
    )
    parser.add_argument(
        "--output-dir",
        default=None,
        help=(
            "Explicit output directory. Selects the output-dir location "
            "unless --output-location is given."
        ),
    )
    parser.add_argument(
        "--report-dir",
        default=None,
        help="Write a JSON pass report into this directory.",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        default=None,
        help="Fail on any configuration problem instead of using defaults.",
    )
    parser.add_argument(
        "--fail-on-error",
        action="store_true",
        default=False,
        help="Exit non-zero when the pass completed with non-fatal errors.",
    )
    parser.add_argument(
        "--log-file",
        default=None,
        help="Also write log records to this file.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Enable debug logging.",
    )

    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point. Returns the process exit status."""
    args = parse_args(argv)
    configure_structured_logging(
        logging.DEBUG if args.verbose else logging.INFO, log_file=args.log_file
    )
    with pass_scope() as pass_id:
        return _execute(args, pass_id)


def _execute(args: argparse.Namespace, pass_id: str) -> int:
    """Run one pass for parsed arguments and map the outcome to an exit status."""
    try:
        config = load_build_config(args.config, strict=args.strict)
        config = validate_build_config(
            config.with_overrides(
                source_roots=args.source_roots,
                output_location=args.output_location
                or (OUTPUT_DIR if args.output_dir else None),
                class_output_dir=args.class_output_dir,
                output_dir=args.output_dir,
            ),
            strict=config.strict,
        )
        logger.info("Source roots     : %s", ", ".join(config.source_roots))
        logger.info("Output location  : %s (%s)", config.output_location, config.output_root())

        result = run_pass(config)

    except ConfigValidationError as e:
        logger.error("Configuration error: %s", e)
        return EXIT_FATAL
    except StaplerProcessingError as e:
        location = f" [{e.path}]" if e.path else ""
        logger.error("Pass aborted%s: %s", location, e)
        return EXIT_FATAL

    if args.report_dir:
        path = write_pass_report(result.to_dict(), pass_id, args.report_dir, config=config)
        logger.info("Pass report written to %s", path)

    if result.diagnostics.has_errors:
        logger.warning(
            "Pass completed with %d error(s); output is incomplete",
            result.diagnostics.count("error"),
        )
        if args.fail_on_error:
            return EXIT_ERRORS

    logger.info("Registry holds %d exposed bean(s)", len(result.registry))
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())

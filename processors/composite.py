"""
Composite processor: drives one extraction pass.

Order of a pass:

1. Load the exposed-bean registry (fatal on failure, before anything is written).
2. Run every processor against every type. A failure while processing one
   type is reported and only that type is skipped.
3. Let each processor finish (the bean processor writes its ``.javadoc``
   records here). Individual write failures are reported and skipped.
4. Merge this pass's owners into the registry and rewrite it (fatal on failure).
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence

from core.build_config import BuildConfig
from core.diagnostics import DiagnosticChannel
from core.errors import StaplerProcessingError
from core.structured_logging import phase_scope
from declarations.models import TypeDeclaration
from declarations.scanner import scan_source_roots
from processors.base import PassStats, ProcessingEnvironment, Processor
from processors.beans import ExportedBeanProcessor
from processors.config import PHASE_REGISTRY_LOAD, PHASE_REGISTRY_MERGE
from processors.markers import MarkerDetector
from processors.parameters import ConstructorProcessor, QueryParameterProcessor
from processors.registry import BeanRegistry, RegistryMerger
from processors.writer import OutputLocation, ResourceWriter

logger = logging.getLogger(__name__)

STATUS_SUCCESS = "success"
STATUS_COMPLETED_WITH_ERRORS = "completed_with_errors"


@dataclass
class PassResult:
    """Outcome of a completed pass."""

    status: str
    registry: BeanRegistry
    discovered_names: List[str]
    stats: PassStats
    diagnostics: DiagnosticChannel
    scan: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status,
            "registry_size": len(self.registry),
            "discovered_names": self.discovered_names,
            "stats": self.stats.to_dict(),
            "scan": self.scan,
            "errors": self.diagnostics.count("error"),
            "warnings": self.diagnostics.count("warning"),
            "diagnostics": self.diagnostics.to_list(),
        }


def default_processors() -> List[Processor]:
    return [
        ExportedBeanProcessor(),
        ConstructorProcessor(),
        QueryParameterProcessor(),
    ]


class CompositeProcessor:
    """Runs the built-in processors, then any extra ones, over one environment.

    Args:
        env: The pass environment; its types are scanned exactly once.
        extra_processors: Additional processors, run after the built-in
            ones against the same environment.
        registry_path: Override of the registry resource path.
    """

    def __init__(
        self,
        env: ProcessingEnvironment,
        extra_processors: Sequence[Processor] = (),
        registry_path: Optional[str] = None,
    ):
        self.env = env
        self.processors: List[Processor] = default_processors() + list(extra_processors)
        if registry_path is None:
            self.merger = RegistryMerger(env.writer)
        else:
            self.merger = RegistryMerger(env.writer, registry_path)

    def _process_type(self, declaration: TypeDeclaration) -> None:
        env = self.env
        try:
            for processor in self.processors:
                with phase_scope(processor.phase):
                    processor.process_type(env, declaration)
        except StaplerProcessingError as e:
            if e.fatal:
                raise
            env.stats.types_failed += 1
            env.diagnostics.error(
                f"Skipped {declaration.qualified_name}: {e}",
                location=declaration.source_path,
            )
        except Exception as e:
            env.stats.types_failed += 1
            logger.error(
                "Unexpected error processing %s", declaration.qualified_name, exc_info=True
            )
            env.diagnostics.error(
                f"Skipped {declaration.qualified_name}: {e}",
                location=declaration.source_path,
            )
        else:
            env.stats.types_processed += 1

    def process(self) -> PassResult:
        """Run the pass.

        Returns:
            The PassResult of a pass that ran to completion.

        Raises:
            RegistryCorruption: If the registry cannot be read or written.
            StaplerProcessingError: For any other fatal error.
        """
        env = self.env

        with phase_scope(PHASE_REGISTRY_LOAD):
            registry = self.merger.load()

        for declaration in env.types:
            self._process_type(declaration)

        for processor in self.processors:
            with phase_scope(processor.phase):
                processor.finish(env)

        with phase_scope(PHASE_REGISTRY_MERGE):
            merged = self.merger.merge_and_write(registry, env.exposed_names)

        status = (
            STATUS_COMPLETED_WITH_ERRORS if env.diagnostics.has_errors else STATUS_SUCCESS
        )
        logger.info("Pass %s: %s", status, env.stats)
        return PassResult(
            status=status,
            registry=merged,
            discovered_names=sorted(env.exposed_names),
            stats=env.stats,
            diagnostics=env.diagnostics,
        )


def build_environment(
    config: BuildConfig,
    types: Iterable[TypeDeclaration],
    diagnostics: Optional[DiagnosticChannel] = None,
    detector: Optional[MarkerDetector] = None,
) -> ProcessingEnvironment:
    """Assemble a ProcessingEnvironment from configuration and scanned types."""
    diagnostics = diagnostics or DiagnosticChannel()
    location = OutputLocation.from_config(config)
    return ProcessingEnvironment(
        types=tuple(types),
        writer=ResourceWriter(location, diagnostics),
        detector=detector or MarkerDetector.from_config(config),
        diagnostics=diagnostics,
    )


def run_pass(
    config: BuildConfig,
    extra_processors: Sequence[Processor] = (),
    diagnostics: Optional[DiagnosticChannel] = None,
) -> PassResult:
    """Scan the configured source roots and run one full pass.

    Args:
        config: Resolved build configuration.
        extra_processors: Additional processors run after the built-in ones.
        diagnostics: Channel to report on; a fresh one is created if omitted.

    Returns:
        The PassResult.

    Raises:
        StaplerProcessingError: On a fatal error (registry failure, invalid
            marker configuration).
    """
    diagnostics = diagnostics or DiagnosticChannel()
    # Marker configuration is validated before any source is parsed
    detector = MarkerDetector.from_config(config)

    with phase_scope("scan"):
        scan = scan_source_roots(config.source_roots, diagnostics)

    env = build_environment(config, scan.types, diagnostics, detector)
    result = CompositeProcessor(env, extra_processors).process()
    result.scan = scan.to_dict()
    return result

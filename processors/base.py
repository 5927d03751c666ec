"""
Processor contract and the explicit per-pass environment.

Every processor receives the same ``ProcessingEnvironment``; nothing is
handed over through globals or thread-local state.
"""

from dataclasses import dataclass, field
from typing import Dict, Set, Tuple

from core.diagnostics import DiagnosticChannel
from declarations.models import TypeDeclaration
from processors.markers import MarkerDetector
from processors.writer import ResourceWriter


class PassStats:
    """Counters for one processing pass."""

    def __init__(self):
        self.types_processed = 0
        self.types_failed = 0
        self.constructor_records = 0
        self.method_records = 0
        self.javadoc_records = 0
        self.write_failures = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            "types_processed": self.types_processed,
            "types_failed": self.types_failed,
            "constructor_records": self.constructor_records,
            "method_records": self.method_records,
            "javadoc_records": self.javadoc_records,
            "write_failures": self.write_failures,
        }

    def __str__(self) -> str:
        return (
            f"PassStats(types={self.types_processed}, failed={self.types_failed}, "
            f"constructors={self.constructor_records}, methods={self.method_records}, "
            f"javadocs={self.javadoc_records}, write_failures={self.write_failures})"
        )


@dataclass
class ProcessingEnvironment:
    """State shared by the processors of one pass.

    Attributes:
        types: Every type declaration visible to the pass, scanned once.
        writer: Resource writer rooted at the pass output location.
        detector: Marker detector built from the build configuration.
        diagnostics: The build-facing diagnostic channel.
        exposed_names: Owner types discovered this pass that belong in the
            exposed-bean registry.
        stats: Pass counters.
    """

    types: Tuple[TypeDeclaration, ...]
    writer: ResourceWriter
    detector: MarkerDetector
    diagnostics: DiagnosticChannel
    exposed_names: Set[str] = field(default_factory=set)
    stats: PassStats = field(default_factory=PassStats)


class Processor:
    """Base class for pass processors.

    ``process_type`` is called once per type; ``finish`` once after all
    types have been seen. Raising a non-fatal ``StaplerProcessingError``
    from ``process_type`` only skips the current type.
    """

    name = "processor"
    phase = "-"

    def process_type(self, env: ProcessingEnvironment, declaration: TypeDeclaration) -> None:
        pass

    def finish(self, env: ProcessingEnvironment) -> None:
        pass

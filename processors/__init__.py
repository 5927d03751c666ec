"""
Metadata processors.

Marker detection, parameter-name records, exported bean documentation,
the exposed-bean registry and the resource writer, driven per pass by the
composite processor.
"""

from processors.markers import MarkerDetector
from processors.properties import escape_property_text, format_properties
from processors.writer import OutputArtifact, OutputLocation, ResourceWriter
from processors.base import PassStats, ProcessingEnvironment, Processor
from processors.parameters import (
    ConstructorProcessor,
    MarkedConstructor,
    MarkedMethod,
    QueryParameterProcessor,
)
from processors.beans import (
    ExportedBeanProcessor,
    ExposedMember,
    ExposedType,
    collect_exposed_types,
    member_key,
)
from processors.registry import BeanRegistry, RegistryMerger, parse_registry, render_registry
from processors.composite import (
    CompositeProcessor,
    PassResult,
    build_environment,
    run_pass,
)

__all__ = [
    # Detection
    "MarkerDetector",
    # Output
    "escape_property_text",
    "format_properties",
    "OutputArtifact",
    "OutputLocation",
    "ResourceWriter",
    # Processor contract
    "PassStats",
    "ProcessingEnvironment",
    "Processor",
    # Parameter records
    "ConstructorProcessor",
    "MarkedConstructor",
    "MarkedMethod",
    "QueryParameterProcessor",
    # Exported beans
    "ExportedBeanProcessor",
    "ExposedMember",
    "ExposedType",
    "collect_exposed_types",
    "member_key",
    # Registry
    "BeanRegistry",
    "RegistryMerger",
    "parse_registry",
    "render_registry",
    # Orchestration
    "CompositeProcessor",
    "PassResult",
    "build_environment",
    "run_pass",
]

"""
Parameter-name records for marked constructors and methods.

Runtime binding is positional, so the recorded names must follow the
declared parameter order exactly.
"""

from dataclasses import dataclass
from typing import Iterable, Tuple

from core.errors import ArtifactWriteError
from declarations.models import (
    ConstructorDeclaration,
    MethodDeclaration,
    TypeDeclaration,
)
from processors.base import ProcessingEnvironment, Processor
from processors.config import (
    CONSTRUCTOR_KEY,
    PARAMETER_RECORD_SUFFIX,
    PHASE_CONSTRUCTORS,
    PHASE_QUERY_PARAMETERS,
)
from processors.writer import OutputArtifact


def owner_resource_path(qualified_name: str, suffix: str) -> str:
    """``org.example.Foo`` + ``.stapler`` -> ``org/example/Foo.stapler``."""
    return qualified_name.replace(".", "/") + suffix


def method_resource_path(qualified_name: str, method_name: str, suffix: str) -> str:
    """``org.example.Foo`` + ``doIt`` -> ``org/example/Foo/doIt.stapler``."""
    return qualified_name.replace(".", "/") + "/" + method_name + suffix


def join_parameter_names(names: Iterable[str]) -> str:
    """Comma-join parameter names in declaration order ('' when there are none)."""
    return ",".join(names)


@dataclass(frozen=True)
class MarkedConstructor:
    owner_type: str
    parameters: Tuple[str, ...]

    @classmethod
    def from_declaration(cls, constructor: ConstructorDeclaration) -> "MarkedConstructor":
        return cls(
            owner_type=constructor.owner,
            parameters=tuple(p.name for p in constructor.parameters),
        )

    @property
    def resource_path(self) -> str:
        return owner_resource_path(self.owner_type, PARAMETER_RECORD_SUFFIX)

    def to_artifact(self) -> OutputArtifact:
        # Single-key property record; an empty list still yields "constructor="
        return OutputArtifact(
            path=self.resource_path,
            content={CONSTRUCTOR_KEY: join_parameter_names(self.parameters)},
        )


@dataclass(frozen=True)
class MarkedMethod:
    owner_type: str
    method_name: str
    parameters: Tuple[str, ...]

    @classmethod
    def from_declaration(cls, method: MethodDeclaration) -> "MarkedMethod":
        return cls(
            owner_type=method.owner,
            method_name=method.name,
            parameters=tuple(p.name for p in method.parameters),
        )

    @property
    def resource_path(self) -> str:
        return method_resource_path(self.owner_type, self.method_name, PARAMETER_RECORD_SUFFIX)

    def to_artifact(self) -> OutputArtifact:
        # Method records are the bare comma-joined list, no key
        return OutputArtifact(path=self.resource_path, content=join_parameter_names(self.parameters))


class ConstructorProcessor(Processor):
    """Records parameter names of marked constructors.

    A constructor is marked by the constructor annotation or, failing that,
    by the legacy doc tag. Only classes and enums are considered.
    """

    name = "constructors"
    phase = PHASE_CONSTRUCTORS

    def process_type(self, env: ProcessingEnvironment, declaration: TypeDeclaration) -> None:
        if not declaration.is_class:
            return

        for constructor in declaration.constructors:
            if not env.detector.is_marked_constructor(constructor):
                continue
            record = MarkedConstructor.from_declaration(constructor)
            try:
                env.writer.write(record.to_artifact())
            except ArtifactWriteError as e:
                env.stats.write_failures += 1
                env.diagnostics.error(str(e), location=declaration.source_path)
                continue
            env.stats.constructor_records += 1

        for method in declaration.methods:
            if env.detector.is_misplaced_constructor_tag(method):
                env.diagnostics.warning(
                    f"{declaration.qualified_name}#{method.name} is not a constructor",
                    location=declaration.source_path,
                )


class QueryParameterProcessor(Processor):
    """Records parameter names of methods with a marked parameter."""

    name = "query-parameters"
    phase = PHASE_QUERY_PARAMETERS

    def process_type(self, env: ProcessingEnvironment, declaration: TypeDeclaration) -> None:
        if not declaration.is_class:
            return

        for method in declaration.methods:
            if not env.detector.is_marked_method(method):
                continue
            record = MarkedMethod.from_declaration(method)
            try:
                env.writer.write(record.to_artifact())
            except ArtifactWriteError as e:
                # Overloads share a resource path; only the first one is written
                env.stats.write_failures += 1
                env.diagnostics.error(str(e), location=declaration.source_path)
                continue
            env.stats.method_records += 1

"""
Resource writer: persists output artifacts under an output location.

Two rooting strategies share one writer:

- ``class-output``: the compiler-managed resource root (class output tree).
- ``output-dir``: an explicit output directory.

Either way an artifact is created at most once per pass, written with a
plain open/write/close, and never appended to.
"""

import logging
import os
from dataclasses import dataclass
from typing import List, Mapping, Optional, Set, Union

from core.build_config import CLASS_OUTPUT, OUTPUT_LOCATIONS, BuildConfig
from core.diagnostics import DiagnosticChannel
from core.errors import ArtifactWriteError
from processors.properties import format_properties

logger = logging.getLogger(__name__)

ArtifactContent = Union[Mapping[str, str], List[str], str]


@dataclass(frozen=True)
class OutputArtifact:
    """A resource to write, relative to the output root.

    Attributes:
        path: Relative resource path using ``/`` separators.
        content: A key/value mapping (property text), a list of lines,
            or raw text.
    """

    path: str
    content: ArtifactContent

    def render(self) -> str:
        if isinstance(self.content, str):
            return self.content
        if isinstance(self.content, list):
            return "".join(f"{line}\n" for line in self.content)
        return format_properties(self.content)


class OutputLocation:
    """Where resources are rooted for one pass."""

    def __init__(self, root: str, strategy: str = CLASS_OUTPUT):
        if strategy not in OUTPUT_LOCATIONS:
            raise ValueError(
                f"Unknown output location '{strategy}'; expected one of {OUTPUT_LOCATIONS}"
            )
        self.root = os.path.abspath(root)
        self.strategy = strategy

    @classmethod
    def from_config(cls, config: BuildConfig) -> "OutputLocation":
        return cls(config.output_root(), config.output_location)

    def resolve(self, relative_path: str) -> str:
        """Map a relative resource path to a file path under the root.

        Raises:
            ArtifactWriteError: If the path is absolute or escapes the root.
        """
        if os.path.isabs(relative_path) or relative_path.startswith("/"):
            raise ArtifactWriteError(
                f"Resource path must be relative: {relative_path}", path=relative_path
            )
        full_path = os.path.normpath(os.path.join(self.root, *relative_path.split("/")))
        if os.path.commonpath([self.root, full_path]) != self.root:
            raise ArtifactWriteError(
                f"Resource path escapes output root: {relative_path}", path=relative_path
            )
        return full_path

    def __repr__(self) -> str:
        return f"OutputLocation(root={self.root!r}, strategy={self.strategy!r})"


class ResourceWriter:
    """Writes artifacts through an OutputLocation and reports each one."""

    def __init__(
        self,
        location: OutputLocation,
        diagnostics: Optional[DiagnosticChannel] = None,
    ):
        self.location = location
        self.diagnostics = diagnostics or DiagnosticChannel()
        self.created: Set[str] = set()

    def read_text(self, relative_path: str, encoding: str = "utf-8") -> Optional[str]:
        """Read an existing resource, or return None if it does not exist.

        Raises:
            OSError, UnicodeDecodeError: If the resource exists but is unreadable.
        """
        full_path = self.location.resolve(relative_path)
        if not os.path.lexists(full_path):
            return None
        with open(full_path, "r", encoding=encoding, newline="") as f:
            return f.read()

    def write(self, artifact: OutputArtifact) -> str:
        """Create a resource and write the artifact into it.

        Returns:
            The absolute path written.

        Raises:
            ArtifactWriteError: If the resource was already created in this
                pass, or on any I/O failure.
        """
        full_path = self.location.resolve(artifact.path)
        if artifact.path in self.created:
            raise ArtifactWriteError(
                f"Resource already created in this pass: {artifact.path}",
                path=artifact.path,
            )

        self.diagnostics.notice(f"Generating {artifact.path}")
        try:
            os.makedirs(os.path.dirname(full_path), exist_ok=True)
            with open(full_path, "w", encoding="utf-8", newline="") as f:
                f.write(artifact.render())
        except OSError as e:
            raise ArtifactWriteError(
                f"Failed to write {artifact.path}: {e}", path=artifact.path
            ) from e

        self.created.add(artifact.path)
        logger.debug("Wrote %s", full_path)
        return full_path

"""
Exposed-bean registry: one sorted, deduplicated list of type names.

Every pass reads the existing registry, unions it with the owners found in
that pass and rewrites it in full. A pass only ever adds names, so passes
that each see part of the code base converge on the complete list, and
re-running a pass leaves the file byte-identical.

The read-merge-write sequence is not locked; concurrent passes writing the
same output root must be serialized by the build tool.
"""

import logging
from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, Optional

from core.errors import ArtifactWriteError, RegistryCorruption
from processors.config import REGISTRY_ENCODING, REGISTRY_PATH
from processors.writer import OutputArtifact, ResourceWriter

logger = logging.getLogger(__name__)


def parse_registry(text: str) -> FrozenSet[str]:
    """Split registry text into trimmed, non-blank names."""
    return frozenset(line.strip() for line in text.splitlines() if line.strip())


def render_registry(names: Iterable[str]) -> str:
    """One name per line, sorted, each line newline-terminated."""
    return "".join(f"{name}\n" for name in sorted(set(names)))


@dataclass(frozen=True)
class BeanRegistry:
    names: FrozenSet[str] = field(default_factory=frozenset)

    def merge(self, discovered: Iterable[str]) -> "BeanRegistry":
        """Union with newly discovered names; never drops an existing one."""
        return BeanRegistry(names=self.names | frozenset(discovered))

    def render(self) -> str:
        return render_registry(self.names)

    def __len__(self) -> int:
        return len(self.names)

    def __contains__(self, name: object) -> bool:
        return name in self.names


class RegistryMerger:
    """Loads and rewrites the registry resource through a ResourceWriter."""

    def __init__(self, writer: ResourceWriter, path: str = REGISTRY_PATH):
        self.writer = writer
        self.path = path

    def load(self) -> BeanRegistry:
        """Read the existing registry, or an empty one if absent.

        Raises:
            RegistryCorruption: If the registry exists but cannot be read or
                decoded. Continuing would risk writing a truncated registry.
        """
        try:
            text: Optional[str] = self.writer.read_text(self.path, encoding=REGISTRY_ENCODING)
        except (OSError, UnicodeDecodeError, ArtifactWriteError) as e:
            raise RegistryCorruption(
                f"Cannot read bean registry {self.path}: {e}", path=self.path
            ) from e

        if text is None:
            logger.debug("No existing registry at %s", self.path)
            return BeanRegistry()

        registry = BeanRegistry(names=parse_registry(text))
        logger.info("Loaded %d registered bean(s) from %s", len(registry), self.path)
        return registry

    def write(self, registry: BeanRegistry) -> str:
        """Overwrite the registry resource with the sorted name list.

        Raises:
            RegistryCorruption: If the registry cannot be written.
        """
        try:
            return self.writer.write(OutputArtifact(path=self.path, content=registry.render()))
        except ArtifactWriteError as e:
            raise RegistryCorruption(
                f"Cannot write bean registry {self.path}: {e}", path=self.path
            ) from e

    def merge_and_write(
        self, registry: BeanRegistry, discovered: Iterable[str]
    ) -> BeanRegistry:
        """Union ``discovered`` into ``registry`` and persist the result.

        The file is rewritten even when nothing new was found, which
        normalizes ordering and duplicates left by older writers.
        """
        discovered = frozenset(discovered)
        merged = registry.merge(discovered)
        added = len(merged) - len(registry)
        self.write(merged)
        logger.info(
            "Registry %s: %d name(s), %d added this pass", self.path, len(merged), added
        )
        return merged

    def merge(self, discovered: Iterable[str]) -> BeanRegistry:
        """Load, union and rewrite in one step."""
        return self.merge_and_write(self.load(), discovered)

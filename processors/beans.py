"""
Exported bean properties: per-member documentation and registry owners.

Members are keyed so that a field and an accessor method of the same name
never collide: a field is keyed by its name, a method by ``name()``.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional, Union

from core.errors import ArtifactWriteError
from declarations.models import FieldDeclaration, MethodDeclaration, TypeDeclaration
from processors.base import ProcessingEnvironment, Processor
from processors.config import JAVADOC_SUFFIX, PHASE_EXPORTED_BEANS
from processors.markers import MarkerDetector
from processors.parameters import owner_resource_path
from processors.writer import OutputArtifact

logger = logging.getLogger(__name__)

Member = Union[FieldDeclaration, MethodDeclaration]


def member_key(member: Member) -> str:
    """Disambiguated documentation key of a field or method."""
    if isinstance(member, FieldDeclaration):
        return member.name
    if isinstance(member, MethodDeclaration):
        return member.name + "()"
    raise TypeError(f"Expected a field or method declaration, got {type(member).__name__}")


@dataclass(frozen=True)
class ExposedMember:
    member_key: str
    doc_text: Optional[str] = None

    @classmethod
    def from_declaration(cls, member: Member) -> "ExposedMember":
        return cls(member_key=member_key(member), doc_text=member.doc_comment)


@dataclass
class ExposedType:
    """All exposed members of one owning type, keyed by member key."""

    owner_type: str
    members: Dict[str, ExposedMember] = field(default_factory=dict)

    def add(self, member: ExposedMember) -> None:
        # Overloads share a key; a later documented declaration wins, an
        # undocumented one never replaces an existing entry
        if member.doc_text or member.member_key not in self.members:
            self.members[member.member_key] = member

    def documented(self) -> Dict[str, str]:
        """Members with non-empty documentation, as key -> doc text."""
        return {
            key: m.doc_text
            for key, m in self.members.items()
            if m.doc_text
        }

    @property
    def resource_path(self) -> str:
        return owner_resource_path(self.owner_type, JAVADOC_SUFFIX)

    def to_artifact(self) -> OutputArtifact:
        return OutputArtifact(path=self.resource_path, content=self.documented())


def exposed_members(
    declaration: TypeDeclaration, detector: MarkerDetector
) -> Iterable[Member]:
    """Yield the marked fields, then the marked methods, of a type."""
    for f in declaration.fields:
        if detector.is_exported(f):
            yield f
    for m in declaration.methods:
        if detector.is_exported(m):
            yield m


def collect_exposed_types(
    types: Iterable[TypeDeclaration], detector: MarkerDetector
) -> Dict[str, ExposedType]:
    """Group the exposed members of all types by owning type.

    Owners without any marked member are absent from the result.
    """
    grouped: Dict[str, ExposedType] = {}
    for declaration in types:
        for member in exposed_members(declaration, detector):
            exposed = grouped.get(member.owner)
            if exposed is None:
                exposed = grouped[member.owner] = ExposedType(owner_type=member.owner)
            exposed.add(ExposedMember.from_declaration(member))
    return grouped


class ExportedBeanProcessor(Processor):
    """Writes one ``.javadoc`` record per exposed type and collects registry owners.

    Registry membership depends only on a marker being present; an owner
    whose marked members are all undocumented still joins the registry.
    """

    name = "exported-beans"
    phase = PHASE_EXPORTED_BEANS

    def __init__(self):
        self.exposed: Dict[str, ExposedType] = {}

    def process_type(self, env: ProcessingEnvironment, declaration: TypeDeclaration) -> None:
        for owner, exposed in collect_exposed_types([declaration], env.detector).items():
            current = self.exposed.setdefault(owner, ExposedType(owner_type=owner))
            for member in exposed.members.values():
                current.add(member)
            env.exposed_names.add(owner)

    def finish(self, env: ProcessingEnvironment) -> None:
        for owner in sorted(self.exposed):
            exposed = self.exposed[owner]
            try:
                env.writer.write(exposed.to_artifact())
            except ArtifactWriteError as e:
                env.stats.write_failures += 1
                env.diagnostics.error(str(e))
                continue
            env.stats.javadoc_records += 1
            logger.debug(
                "%s: %d exposed member(s), %d documented",
                owner,
                len(exposed.members),
                len(exposed.documented()),
            )
        self.exposed = {}

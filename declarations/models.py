"""
Declaration model consumed by the metadata processors.

Front ends (the tree-sitter source scanner, or a test) build these
immutable records; processors only read them.
"""

from dataclasses import dataclass, field
from typing import Iterable, Optional, Tuple


@dataclass(frozen=True)
class Annotation:
    """An annotation attached to a declaration.

    Attributes:
        name: Annotation type name as written, e.g. ``Exported`` or
            ``org.kohsuke.stapler.export.Exported``.
    """

    name: str

    @property
    def simple_name(self) -> str:
        return self.name.rsplit(".", 1)[-1]


def has_annotation(annotations: Iterable[Annotation], names: Iterable[str]) -> bool:
    """Check whether any annotation matches one of ``names`` by simple name."""
    wanted = {n.rsplit(".", 1)[-1] for n in names}
    return any(a.simple_name in wanted for a in annotations)


@dataclass(frozen=True)
class ParameterDeclaration:
    """A formal parameter of a constructor or method."""

    name: str
    type_name: str = ""
    annotations: Tuple[Annotation, ...] = ()


@dataclass(frozen=True)
class ConstructorDeclaration:
    """A constructor, with parameters in declaration order."""

    owner: str
    parameters: Tuple[ParameterDeclaration, ...] = ()
    annotations: Tuple[Annotation, ...] = ()
    doc_comment: Optional[str] = None
    line: int = 0


@dataclass(frozen=True)
class MethodDeclaration:
    """A method, with parameters in declaration order."""

    owner: str
    name: str
    parameters: Tuple[ParameterDeclaration, ...] = ()
    annotations: Tuple[Annotation, ...] = ()
    doc_comment: Optional[str] = None
    line: int = 0


@dataclass(frozen=True)
class FieldDeclaration:
    """A single field variable (``int a, b;`` yields two of these)."""

    owner: str
    name: str
    type_name: str = ""
    annotations: Tuple[Annotation, ...] = ()
    doc_comment: Optional[str] = None
    line: int = 0


@dataclass(frozen=True)
class TypeDeclaration:
    """A class, interface, enum or record together with its members.

    Attributes:
        qualified_name: Dotted name including package and enclosing types,
            e.g. ``org.example.Outer.Inner``.
        kind: One of ``class``, ``interface``, ``enum``, ``record``,
            ``annotation``.
        constructors: Constructors in source order.
        methods: Methods in source order.
        fields: Field variables in source order.
        annotations: Annotations on the type itself.
        doc_comment: Cleaned doc comment text, or None.
        source_path: File the type was read from, if any.
    """

    qualified_name: str
    kind: str = "class"
    constructors: Tuple[ConstructorDeclaration, ...] = ()
    methods: Tuple[MethodDeclaration, ...] = ()
    fields: Tuple[FieldDeclaration, ...] = ()
    annotations: Tuple[Annotation, ...] = ()
    doc_comment: Optional[str] = None
    source_path: Optional[str] = None

    @property
    def simple_name(self) -> str:
        return self.qualified_name.rsplit(".", 1)[-1]

    @property
    def is_class(self) -> bool:
        """Classes and enums can declare constructors that bind data."""
        return self.kind in ("class", "enum")


@dataclass
class ScanResult:
    """Types discovered in one pass plus per-file problems."""

    types: list = field(default_factory=list)
    files_scanned: int = 0
    files_failed: int = 0
    parse_errors: int = 0

    def to_dict(self):
        return {
            "types": len(self.types),
            "files_scanned": self.files_scanned,
            "files_failed": self.files_failed,
            "parse_errors": self.parse_errors,
        }

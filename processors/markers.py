"""
Marker detection for constructors, methods and fields.

An element is marked by an explicit annotation or, for constructors only,
by a legacy tag inside its doc comment. The annotation is checked first;
the doc comment is consulted only when the annotation is absent.
"""

import re
from typing import Iterable, Tuple, Union

from core.build_config import BuildConfig
from core.errors import MarkerDetectionError
from declarations.models import (
    ConstructorDeclaration,
    FieldDeclaration,
    MethodDeclaration,
    has_annotation,
)

_ANNOTATION_NAME_RE = re.compile(r"^[A-Za-z_$][\w$]*(\.[A-Za-z_$][\w$]*)*$")

Member = Union[FieldDeclaration, MethodDeclaration]


def _validate_annotation_names(names: Iterable[str], option: str) -> Tuple[str, ...]:
    names = tuple(names)
    for name in names:
        if not isinstance(name, str) or not _ANNOTATION_NAME_RE.match(name):
            raise MarkerDetectionError(f"Invalid annotation name for {option}: {name!r}")
    return names


def _validate_doc_tag(tag: str) -> str:
    if not tag or tag != tag.strip() or any(ch.isspace() for ch in tag):
        raise MarkerDetectionError(f"Invalid legacy doc tag: {tag!r}")
    return tag


class MarkerDetector:
    """Decides which declarations are marked for extraction.

    Detection itself never fails: an unmarked element is a normal outcome.
    Only a malformed marker configuration raises ``MarkerDetectionError``,
    at construction time.
    """

    def __init__(
        self,
        constructor_annotations: Iterable[str] = ("DataBoundConstructor",),
        constructor_doc_tag: str = "@stapler-constructor",
        query_parameter_annotations: Iterable[str] = ("QueryParameter",),
        exported_annotations: Iterable[str] = ("Exported",),
    ):
        self.constructor_annotations = _validate_annotation_names(
            constructor_annotations, "constructor_annotations"
        )
        self.constructor_doc_tag = _validate_doc_tag(constructor_doc_tag)
        self.query_parameter_annotations = _validate_annotation_names(
            query_parameter_annotations, "query_parameter_annotations"
        )
        self.exported_annotations = _validate_annotation_names(
            exported_annotations, "exported_annotations"
        )

    @classmethod
    def from_config(cls, config: BuildConfig) -> "MarkerDetector":
        return cls(
            constructor_annotations=config.constructor_annotations,
            constructor_doc_tag=config.constructor_doc_tag,
            query_parameter_annotations=config.query_parameter_annotations,
            exported_annotations=config.exported_annotations,
        )

    def has_doc_tag(self, doc_comment) -> bool:
        return doc_comment is not None and self.constructor_doc_tag in doc_comment

    def is_marked_constructor(self, constructor: ConstructorDeclaration) -> bool:
        """Annotation first; the legacy doc tag only when it is absent."""
        if has_annotation(constructor.annotations, self.constructor_annotations):
            return True
        return self.has_doc_tag(constructor.doc_comment)

    def is_marked_method(self, method: MethodDeclaration) -> bool:
        """A method is marked when at least one parameter carries the parameter marker."""
        return any(
            has_annotation(p.annotations, self.query_parameter_annotations)
            for p in method.parameters
        )

    def is_misplaced_constructor_tag(self, method: MethodDeclaration) -> bool:
        """The constructor doc tag written on a regular method."""
        return self.has_doc_tag(method.doc_comment)

    def is_exported(self, member: Member) -> bool:
        return has_annotation(member.annotations, self.exported_annotations)

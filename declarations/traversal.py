"""
AST traversal and declaration model building.

This module walks a tree-sitter Java AST and builds ``TypeDeclaration``
records (constructors, methods, fields, annotations, javadoc) for every
type declared in a compilation unit, nested types included.
"""

import logging
from typing import List, Optional, Tuple

from tree_sitter import Node, Tree

from declarations.config import (
    ANNOTATION_NODES,
    BODY_TYPES,
    COMMENT_NODES,
    CONSTRUCTOR_NODES,
    FIELD_NODES,
    FORMAL_PARAMETER,
    JAVADOC_PREFIX,
    METHOD_NODE,
    MODIFIERS_NODE,
    PACKAGE_NODE,
    RECEIVER_PARAMETER,
    SPREAD_PARAMETER,
    TYPE_DECLARATION_KINDS,
)
from declarations.models import (
    Annotation,
    ConstructorDeclaration,
    FieldDeclaration,
    MethodDeclaration,
    ParameterDeclaration,
    TypeDeclaration,
)

logger = logging.getLogger(__name__)


def node_text(node: Node, source_bytes: bytes) -> str:
    return source_bytes[node.start_byte:node.end_byte].decode("utf-8")


def is_javadoc_comment(comment_text: str) -> bool:
    """Check if a comment is a ``/** ... */`` documentation comment.

    ``/**/`` is an empty block comment, not javadoc.
    """
    stripped = comment_text.strip()
    return stripped.startswith(JAVADOC_PREFIX) and stripped != "/**/"


def clean_javadoc_comment(comment_text: str) -> str:
    """Strip javadoc delimiters and leading asterisks.

    Tags such as ``@stapler-constructor`` are kept in the text; blank
    lines are dropped and the remaining lines joined with newlines.

    Args:
        comment_text: Raw comment text with delimiters.

    Returns:
        Cleaned comment text.
    """
    text = comment_text.strip()
    if text.startswith(JAVADOC_PREFIX):
        text = text[len(JAVADOC_PREFIX):]
    if text.endswith("*/"):
        text = text[:-2]

    cleaned_lines = []
    for line in text.split("\n"):
        stripped = line.strip()
        # Strip continuation '*' (javadoc allows several)
        stripped = stripped.lstrip("*").strip()
        if stripped:
            cleaned_lines.append(stripped)

    return "\n".join(cleaned_lines)


def get_javadoc(node: Node, source_bytes: bytes) -> Optional[str]:
    """Find the doc comment attached to a declaration node.

    Walks backward over comment siblings and returns the nearest javadoc
    comment; line comments in between are skipped.

    Args:
        node: The declaration node.
        source_bytes: The raw source file bytes.

    Returns:
        Cleaned javadoc text, or None if the declaration has none.
    """
    sibling = node.prev_named_sibling
    while sibling is not None and sibling.type in COMMENT_NODES:
        comment_text = node_text(sibling, source_bytes)
        if is_javadoc_comment(comment_text):
            return clean_javadoc_comment(comment_text)
        sibling = sibling.prev_named_sibling
    return None


def _find_child(node: Node, node_type: str) -> Optional[Node]:
    for child in node.children:
        if child.type == node_type:
            return child
    return None


def extract_annotations(node: Node, source_bytes: bytes) -> Tuple[Annotation, ...]:
    """Collect annotations from a declaration's ``modifiers`` child."""
    modifiers = _find_child(node, MODIFIERS_NODE)
    if modifiers is None:
        return ()

    annotations = []
    for child in modifiers.named_children:
        if child.type not in ANNOTATION_NODES:
            continue
        name_node = child.child_by_field_name("name")
        if name_node is None:
            logger.debug("Annotation at line %d has no name", child.start_point.row + 1)
            continue
        annotations.append(Annotation(name=node_text(name_node, source_bytes)))
    return tuple(annotations)


def extract_package_name(root: Node, source_bytes: bytes) -> str:
    """Return the package of a compilation unit, or '' for the default package."""
    package = _find_child(root, PACKAGE_NODE)
    if package is None:
        return ""
    for child in package.named_children:
        if child.type in ("scoped_identifier", "identifier"):
            return node_text(child, source_bytes)
    return ""


def extract_parameter(node: Node, source_bytes: bytes) -> Optional[ParameterDeclaration]:
    """Build a parameter from a formal_parameter or spread_parameter node.

    Returns None for receiver parameters (``Foo this``), which are not
    formal parameters.
    """
    if node.type == RECEIVER_PARAMETER:
        return None

    annotations = extract_annotations(node, source_bytes)

    if node.type == SPREAD_PARAMETER:
        declarator = _find_child(node, "variable_declarator")
        if declarator is not None:
            name_node = declarator.child_by_field_name("name")
        else:
            name_node = node.child_by_field_name("name")
        type_name = ""
        for child in node.named_children:
            if child.type not in (MODIFIERS_NODE, "variable_declarator"):
                type_name = node_text(child, source_bytes) + "..."
                break
    else:
        name_node = node.child_by_field_name("name")
        type_node = node.child_by_field_name("type")
        type_name = node_text(type_node, source_bytes) if type_node else ""

    if name_node is None:
        logger.debug("Parameter at line %d has no name", node.start_point.row + 1)
        return None

    return ParameterDeclaration(
        name=node_text(name_node, source_bytes),
        type_name=type_name,
        annotations=annotations,
    )


def extract_parameters(
    node: Node, source_bytes: bytes
) -> Tuple[ParameterDeclaration, ...]:
    """Extract formal parameters of a method/constructor in declaration order."""
    params_node = node.child_by_field_name("parameters")
    if params_node is None:
        return ()

    parameters = []
    for child in params_node.named_children:
        if child.type not in (FORMAL_PARAMETER, SPREAD_PARAMETER):
            continue
        param = extract_parameter(child, source_bytes)
        if param is not None:
            parameters.append(param)
    return tuple(parameters)


def extract_fields(
    node: Node, source_bytes: bytes, owner: str
) -> List[FieldDeclaration]:
    """Split a field declaration into one FieldDeclaration per variable."""
    annotations = extract_annotations(node, source_bytes)
    doc = get_javadoc(node, source_bytes)
    type_node = node.child_by_field_name("type")
    type_name = node_text(type_node, source_bytes) if type_node else ""

    fields = []
    for declarator in node.children_by_field_name("declarator"):
        name_node = declarator.child_by_field_name("name")
        if name_node is None:
            continue
        fields.append(
            FieldDeclaration(
                owner=owner,
                name=node_text(name_node, source_bytes),
                type_name=type_name,
                annotations=annotations,
                doc_comment=doc,
                line=node.start_point.row + 1,
            )
        )
    return fields


def build_type_declaration(
    node: Node,
    source_bytes: bytes,
    enclosing_name: str,
    source_path: Optional[str] = None,
) -> List[TypeDeclaration]:
    """Build the declaration of one type and of every type nested in it.

    Args:
        node: A class/interface/enum/record/annotation declaration node.
        source_bytes: The raw source file bytes.
        enclosing_name: Package name, or qualified name of the enclosing type.
        source_path: Path recorded on the resulting declarations.

    Returns:
        The type itself followed by its nested types, in source order.
    """
    name_node = node.child_by_field_name("name")
    if name_node is None:
        logger.debug("Type at line %d has no name", node.start_point.row + 1)
        return []

    simple_name = node_text(name_node, source_bytes)
    qualified_name = f"{enclosing_name}.{simple_name}" if enclosing_name else simple_name
    kind = TYPE_DECLARATION_KINDS[node.type]

    record_components: Tuple[ParameterDeclaration, ...] = ()
    if kind == "record":
        record_components = extract_parameters(node, source_bytes)

    constructors: List[ConstructorDeclaration] = []
    methods: List[MethodDeclaration] = []
    fields: List[FieldDeclaration] = []
    nested: List[TypeDeclaration] = []

    body = node.child_by_field_name("body")
    members = list(_iter_members(body)) if body is not None else []

    for member in members:
        if member.type in CONSTRUCTOR_NODES:
            if member.type == "compact_constructor_declaration":
                parameters = record_components
            else:
                parameters = extract_parameters(member, source_bytes)
            constructors.append(
                ConstructorDeclaration(
                    owner=qualified_name,
                    parameters=parameters,
                    annotations=extract_annotations(member, source_bytes),
                    doc_comment=get_javadoc(member, source_bytes),
                    line=member.start_point.row + 1,
                )
            )
        elif member.type == METHOD_NODE:
            method_name = member.child_by_field_name("name")
            if method_name is None:
                continue
            methods.append(
                MethodDeclaration(
                    owner=qualified_name,
                    name=node_text(method_name, source_bytes),
                    parameters=extract_parameters(member, source_bytes),
                    annotations=extract_annotations(member, source_bytes),
                    doc_comment=get_javadoc(member, source_bytes),
                    line=member.start_point.row + 1,
                )
            )
        elif member.type in FIELD_NODES:
            fields.extend(extract_fields(member, source_bytes, qualified_name))
        elif member.type in TYPE_DECLARATION_KINDS:
            nested.extend(
                build_type_declaration(member, source_bytes, qualified_name, source_path)
            )

    declaration = TypeDeclaration(
        qualified_name=qualified_name,
        kind=kind,
        constructors=tuple(constructors),
        methods=tuple(methods),
        fields=tuple(fields),
        annotations=extract_annotations(node, source_bytes),
        doc_comment=get_javadoc(node, source_bytes),
        source_path=source_path,
    )
    return [declaration] + nested


def _iter_members(body: Node):
    for child in body.named_children:
        if child.type in BODY_TYPES:
            # enum constants are followed by an enum_body_declarations block
            yield from _iter_members(child)
        else:
            yield child


def extract_types_from_tree(
    tree: Tree,
    source_bytes: bytes,
    source_path: Optional[str] = None,
) -> List[TypeDeclaration]:
    """Extract all type declarations from a parsed Java compilation unit.

    This is the main entry point for declaration extraction.

    Args:
        tree: The parsed AST tree.
        source_bytes: The raw source file bytes.
        source_path: Path recorded on the resulting declarations.

    Returns:
        Top-level and nested types in source order.
    """
    root = tree.root_node
    package = extract_package_name(root, source_bytes)

    types: List[TypeDeclaration] = []
    for child in root.named_children:
        if child.type in TYPE_DECLARATION_KINDS:
            types.extend(build_type_declaration(child, source_bytes, package, source_path))

    logger.debug("Extracted %d types from %s", len(types), source_path or "<bytes>")
    return types

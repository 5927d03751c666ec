"""
Configuration constants for Java declaration scanning.

Defines the tree-sitter node type strings used to build the declaration model.
"""

from typing import Dict, Set

# Type declarations and the kind recorded for each
TYPE_DECLARATION_KINDS: Dict[str, str] = {
    "class_declaration": "class",
    "interface_declaration": "interface",
    "enum_declaration": "enum",
    "record_declaration": "record",
    "annotation_type_declaration": "annotation",
}

# Body containers whose children are members
BODY_TYPES: Set[str] = {
    "class_body",
    "interface_body",
    "enum_body",
    "enum_body_declarations",
    "annotation_type_body",
}

PACKAGE_NODE: str = "package_declaration"
CONSTRUCTOR_NODES: Set[str] = {
    "constructor_declaration",
    "compact_constructor_declaration",
}
METHOD_NODE: str = "method_declaration"
FIELD_NODES: Set[str] = {
    "field_declaration",
    "constant_declaration",
}
MODIFIERS_NODE: str = "modifiers"
ANNOTATION_NODES: Set[str] = {
    "annotation",
    "marker_annotation",
}

# Older grammars emit "comment"; newer ones split line and block comments
COMMENT_NODES: Set[str] = {
    "comment",
    "block_comment",
    "line_comment",
}

# Parameter node types inside formal_parameters
FORMAL_PARAMETER: str = "formal_parameter"
SPREAD_PARAMETER: str = "spread_parameter"
RECEIVER_PARAMETER: str = "receiver_parameter"

JAVADOC_PREFIX: str = "/**"

JAVA_EXTENSIONS: Set[str] = {
    ".java",
}

# Directories never worth descending into when discovering sources
SKIPPED_DIRECTORIES: Set[str] = {
    "target",
    "build",
    "out",
    "node_modules",
    "__pycache__",
}

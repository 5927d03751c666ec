"""
Declaration front end.

Tree-sitter-based Java source parser that builds the declaration model
(types, constructors, methods, fields, annotations and javadoc) consumed
by the metadata processors.
"""

from declarations.models import (
    Annotation,
    ConstructorDeclaration,
    FieldDeclaration,
    MethodDeclaration,
    ParameterDeclaration,
    ScanResult,
    TypeDeclaration,
    has_annotation,
)
from declarations.parser import create_parser, parse_bytes, parse_file, count_error_nodes
from declarations.traversal import extract_types_from_tree, clean_javadoc_comment
from declarations.scanner import discover_java_files, scan_file, scan_source_roots

__all__ = [
    # Declaration model
    "Annotation",
    "ConstructorDeclaration",
    "FieldDeclaration",
    "MethodDeclaration",
    "ParameterDeclaration",
    "ScanResult",
    "TypeDeclaration",
    "has_annotation",
    # Low-level parsing
    "create_parser",
    "parse_bytes",
    "parse_file",
    "count_error_nodes",
    # Mid-level extraction
    "extract_types_from_tree",
    "clean_javadoc_comment",
    # Source scanning
    "discover_java_files",
    "scan_file",
    "scan_source_roots",
]

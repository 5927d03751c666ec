"""
Java parsing on top of tree-sitter.

Sources are read as bytes and must decode as UTF-8; node offsets reported
by tree-sitter are byte offsets into that buffer, so the bytes travel with
the tree.
"""

import logging
from typing import Tuple

import tree_sitter_java as tsjava
from tree_sitter import Language, Node, Parser, Tree

from core.errors import ExtractionIOError

logger = logging.getLogger(__name__)

JAVA_LANGUAGE = Language(tsjava.language())


def create_parser() -> Parser:
    """A fresh parser bound to the Java grammar."""
    return Parser(JAVA_LANGUAGE)


def parse_bytes(source: bytes) -> Tree:
    """Parse one compilation unit.

    tree-sitter recovers from syntax errors, so the returned tree may hold
    ERROR nodes; use ``count_error_nodes`` to find out.

    Raises:
        TypeError: If ``source`` is not bytes.
    """
    if not isinstance(source, bytes):
        raise TypeError(f"Source must be bytes, got {type(source).__name__}")
    return create_parser().parse(source)


def count_error_nodes(tree: Tree) -> int:
    """Count ERROR and MISSING nodes in a parsed tree."""
    count = 0
    stack = [tree.root_node]
    while stack:
        node: Node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            count += 1
        # Only subtrees flagged with has_error can contain more
        if node.has_error:
            stack.extend(node.children)
    return count


def parse_file(file_path: str) -> Tuple[Tree, bytes]:
    """Read and parse a ``.java`` file.

    Returns:
        ``(tree, source_bytes)``.

    Raises:
        ExtractionIOError: The file is unreadable or not valid UTF-8.
    """
    try:
        with open(file_path, "rb") as f:
            source_bytes = f.read()
    except OSError as e:
        raise ExtractionIOError(f"Cannot read {file_path}: {e}", path=file_path) from e

    try:
        source_bytes.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ExtractionIOError(
            f"{file_path} is not valid UTF-8: {e}", path=file_path
        ) from e

    tree = parse_bytes(source_bytes)
    logger.debug("Parsed %s (%d bytes)", file_path, len(source_bytes))
    return tree, source_bytes

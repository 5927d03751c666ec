"""
Source-tree scanner: the declaration front end for one pass.

Discovers Java sources under the configured source roots, parses them and
returns every type declaration visible to the pass.
"""

import logging
import os
from typing import Iterable, List, Optional

from core.diagnostics import DiagnosticChannel
from core.errors import ExtractionIOError
from declarations.config import JAVA_EXTENSIONS, SKIPPED_DIRECTORIES
from declarations.models import ScanResult, TypeDeclaration
from declarations.parser import count_error_nodes, parse_file
from declarations.traversal import extract_types_from_tree

logger = logging.getLogger(__name__)


def discover_java_files(directory: str) -> List[str]:
    """Recursively discover all Java source files in a directory.

    Args:
        directory: Root directory to search.

    Returns:
        Sorted list of absolute paths to .java files.
    """
    java_files = []
    directory = os.path.abspath(directory)

    for root, dirs, files in os.walk(directory):
        # Skip hidden directories and build output
        dirs[:] = [d for d in dirs if not d.startswith(".") and d not in SKIPPED_DIRECTORIES]

        for file in files:
            if os.path.splitext(file)[1] in JAVA_EXTENSIONS:
                java_files.append(os.path.join(root, file))

    logger.info("Found %d Java files in %s", len(java_files), directory)
    return sorted(java_files)


def scan_file(file_path: str) -> tuple[List[TypeDeclaration], int]:
    """Parse one source file into type declarations.

    Returns:
        A tuple of (types, parse_error_count).

    Raises:
        ExtractionIOError: If the file cannot be read or decoded.
    """
    tree, source_bytes = parse_file(file_path)
    return extract_types_from_tree(tree, source_bytes, file_path), count_error_nodes(tree)


def scan_source_roots(
    source_roots: Iterable[str],
    diagnostics: Optional[DiagnosticChannel] = None,
) -> ScanResult:
    """Scan all source roots and collect every declared type.

    Unreadable files are reported and skipped. When the same qualified name
    is declared twice, the first declaration wins and a warning is emitted.

    Args:
        source_roots: Directories (or single .java files) to scan.
        diagnostics: Channel receiving per-file problems.

    Returns:
        A ScanResult with the types in discovery order.
    """
    diagnostics = diagnostics or DiagnosticChannel()
    result = ScanResult()
    seen = {}

    for root in source_roots:
        if os.path.isfile(root):
            files = [os.path.abspath(root)]
        elif os.path.isdir(root):
            files = discover_java_files(root)
        else:
            diagnostics.warning(f"Source root does not exist: {root}")
            continue

        for file_path in files:
            try:
                types, error_count = scan_file(file_path)
            except ExtractionIOError as e:
                diagnostics.error(str(e), location=file_path)
                result.files_failed += 1
                continue

            result.files_scanned += 1
            if error_count:
                result.parse_errors += error_count
                diagnostics.warning(
                    f"Source contains {error_count} syntax error node(s); "
                    "declarations may be incomplete",
                    location=file_path,
                )

            for declaration in types:
                previous = seen.get(declaration.qualified_name)
                if previous is not None:
                    diagnostics.warning(
                        f"Duplicate type {declaration.qualified_name}; "
                        f"keeping the one from {previous}",
                        location=file_path,
                    )
                    continue
                seen[declaration.qualified_name] = file_path
                result.types.append(declaration)

    logger.info(
        "Scanned %d files, %d types (%d failed)",
        result.files_scanned,
        len(result.types),
        result.files_failed,
    )
    return result

"""Text property format used by the parameter and javadoc records."""

from typing import Dict, Mapping

_ESCAPES: Dict[str, str] = {
    " ": "\\ ",
    "\t": "\\t",
    "\n": "\\n",
    "=": "\\=",
    ":": "\\:",
    "#": "\\#",
    "!": "\\!",
}


def escape_property_text(text: str) -> str:
    """Escape a property key or value.

    Only space, tab, newline and the separators ``= : # !`` are escaped.
    Non-ASCII characters are written as-is (no ``\\uXXXX`` form); readers
    of these files rely on that.
    """
    return "".join(_ESCAPES.get(ch, ch) for ch in text)


def format_properties(properties: Mapping[str, str]) -> str:
    """Render ``key=value`` lines sorted by key, without a header comment.

    Example:
        >>> format_properties({"constructor": "a,b"})
        'constructor=a,b\\n'
    """
    return "".join(
        f"{escape_property_text(key)}={escape_property_text(properties[key])}\n"
        for key in sorted(properties)
    )

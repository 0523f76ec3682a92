"""Glob-style file name matching.

Only two wildcards are understood: ``*`` matches any run of characters
(including none) and ``?`` matches exactly one. Everything else is literal.
Matching is case-insensitive and anchored to the whole name.
"""

import re
from functools import lru_cache

from sandboxfs.exceptions import InvalidArgumentError


@lru_cache(maxsize=128)
def compile_pattern(pattern: str) -> re.Pattern[str]:
    """Translate a ``*``/``?`` pattern into a compiled regular expression.

    Raises:
        InvalidArgumentError: If the pattern is empty
    """
    if not pattern:
        raise InvalidArgumentError("Pattern must not be empty")

    parts = []
    for char in pattern:
        if char == "*":
            parts.append(".*")
        elif char == "?":
            parts.append(".")
        else:
            parts.append(re.escape(char))
    return re.compile("".join(parts), re.IGNORECASE | re.DOTALL)


def matches(name: str, pattern: str) -> bool:
    """Return True if ``name`` matches ``pattern`` in full.

    Example:
        >>> matches("README.MD", "*.md")
        True
        >>> matches("notes.md.bak", "*.md")
        False
    """
    return compile_pattern(pattern).fullmatch(name) is not None

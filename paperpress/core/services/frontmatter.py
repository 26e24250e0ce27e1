"""
Front-matter extraction — the ``---`` delimited metadata block of a paper.

    ---
    title: Ethics is Efficient
    author: "Dan Voulez"
    version: 1.0.1
    ---

Only flat ``key: value`` lines are understood. This is deliberately not
YAML: values are kept as plain strings, stray lines are skipped, and
nothing here ever raises.
"""

from __future__ import annotations

import logging
import re

logger = logging.getLogger(__name__)


# Both delimiter lines are exactly "---" (trailing blanks tolerated).
# The interior group is optional so that an empty block still matches.
_FRONTMATTER_RE = re.compile(
    r"\A---[ \t]*\n(?:(.*?)\n)?---[ \t]*(?:\n|\Z)",
    re.DOTALL,
)

_QUOTES = ("'", '"')


def normalize_newlines(text: str) -> str:
    """Convert CRLF / CR line endings to ``\\n``."""
    return text.replace("\r\n", "\n").replace("\r", "\n")


def extract_metadata(text: str) -> dict[str, str]:
    """Parse the leading front-matter block into a flat string mapping.

    Returns an empty dict when the document has no front-matter.
    Duplicate keys: the last occurrence wins.
    """
    m = _FRONTMATTER_RE.match(normalize_newlines(text))
    if not m:
        return {}

    metadata: dict[str, str] = {}
    for line in (m.group(1) or "").split("\n"):
        if not line.strip():
            continue
        key, sep, value = line.partition(":")
        if not sep:
            logger.debug("Skipping front-matter line without ':' — %r", line)
            continue
        key = key.strip()
        if not key:
            continue
        metadata[key] = _unquote(value.strip())

    return metadata


def strip_frontmatter(text: str) -> str:
    """Remove the leading front-matter block and at most one blank line after it."""
    text = normalize_newlines(text)
    m = _FRONTMATTER_RE.match(text)
    if not m:
        return text
    rest = text[m.end():]
    if rest.startswith("\n"):
        rest = rest[1:]
    return rest


def _unquote(value: str) -> str:
    """Strip one layer of matching surrounding quotes."""
    if len(value) >= 2 and value[0] == value[-1] and value[0] in _QUOTES:
        return value[1:-1]
    return value

"""
skills_hub.descriptions

One-line summaries for skill and resource documents.

Precedence:
1. `description:` inside a leading '---' front-matter block (closed by a second '---')
2. the first '# ' or '## ' heading after the front-matter
3. the first non-blank line, cut to 100 characters plus '...'
4. the document's own name with '-' and '_' turned into spaces

This is line matching only; the Markdown itself is never parsed. Lines are consumed
lazily, so file-backed extraction stops reading as soon as the summary is known.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator
from pathlib import Path

from skills_hub.naming import base_name

FRONT_MATTER_DELIMITER = "---"
MAX_LINE_DESCRIPTION = 100

_DESCRIPTION_KEY = re.compile(r"^description:\s*(.+)$", re.IGNORECASE)


def fallback_description(path: str) -> str:
    """'team/go-testing/SKILL.md' -> 'go testing'"""
    return re.sub(r"[-_]", " ", base_name(path))


def extract_description(content: str, path: str) -> str:
    """
    function_purpose: Summarize document text in one line.

    Args:
    - content: str   Full document text
    - path: str      Relative path of the document, used only for the name fallback
    """
    return describe_lines(content.removeprefix("\ufeff").split("\n"), path)


def read_description(file_path: Path, path: str) -> str:
    """
    function_purpose: Summarize a document on disk without loading its whole body.

    Raises OSError / UnicodeDecodeError when the file cannot be read.
    """
    with open(file_path, encoding="utf-8-sig") as f:
        return describe_lines(f, path)


def describe_lines(lines: Iterable[str], path: str) -> str:
    it = iter(lines)
    first = _next_non_blank(it)
    if first is None:
        return fallback_description(path)

    if first != FRONT_MATTER_DELIMITER:
        return _summarize_line(first)

    description, closed = _scan_front_matter(it)
    if not closed:
        # Unterminated block: the whole document counts as content, and its first
        # non-blank line is the opening delimiter itself.
        return _summarize_line(first)
    if description is not None:
        return description

    line = _next_non_blank(it)
    if line is None:
        return fallback_description(path)
    return _summarize_line(line)


def _next_non_blank(it: Iterator[str]) -> str | None:
    for raw in it:
        line = raw.strip()
        if line:
            return line
    return None


def _scan_front_matter(it: Iterator[str]) -> tuple[str | None, bool]:
    """Consume the front-matter block; returns (description, closing delimiter seen)."""
    description: str | None = None
    for raw in it:
        line = raw.strip()
        if line == FRONT_MATTER_DELIMITER:
            return description, True
        if description is None:
            match = _DESCRIPTION_KEY.match(line)
            if match:
                description = _unquote(match.group(1).strip())
    return description, False


def _unquote(value: str) -> str:
    if value[:1] in ('"', "'") and value.endswith(value[0]):
        return value[1:-1]
    return value


def _summarize_line(line: str) -> str:
    if line.startswith("# "):
        return line[2:].strip()
    if line.startswith("## "):
        return line[3:].strip()
    if len(line) > MAX_LINE_DESCRIPTION:
        return line[:MAX_LINE_DESCRIPTION] + "..."
    return line

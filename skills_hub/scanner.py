"""
skills_hub.scanner

Recursive discovery of skill definition files under the skills root.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

SKILL_FILENAME = "SKILL.md"

logger = logging.getLogger(__name__)


def scan_skills_directory(skills_dir: Path) -> list[str]:
    """
    function_purpose: Locate every SKILL.md under skills_dir, at any depth.

    Returns slash-separated paths relative to skills_dir, sorted lexically so that
    listings and tool-name tie-breaks do not depend on directory read order.
    A missing root is an empty library, not an error.

    Example: ['api-design/SKILL.md', 'team/go-testing/SKILL.md']
    """
    if not skills_dir.is_dir():
        return []
    results: list[str] = []
    _scan_directory(skills_dir, "", results, set())
    results.sort()
    return results


def _scan_directory(
    directory: Path, relative: str, results: list[str], visited: set[tuple[int, int]]
) -> None:
    try:
        st = os.stat(directory)
        # Symlinked directories are followed; each real directory is walked once
        key = (st.st_dev, st.st_ino)
        if key in visited:
            logger.debug("Skipping already scanned directory %s", directory)
            return
        visited.add(key)
        with os.scandir(directory) as it:
            entries = sorted(it, key=lambda e: e.name)
    except OSError as exc:
        # Skip the unreadable subtree, keep the rest of the listing
        logger.error("Error scanning directory %s: %s", directory, exc)
        return

    for entry in entries:
        rel_entry = f"{relative}/{entry.name}" if relative else entry.name
        try:
            is_dir = entry.is_dir()
        except OSError as exc:
            logger.error("Error reading %s: %s", rel_entry, exc)
            continue
        if is_dir:
            _scan_directory(Path(entry.path), rel_entry, results, visited)
        elif entry.name == SKILL_FILENAME:
            results.append(rel_entry)

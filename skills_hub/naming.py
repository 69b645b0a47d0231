"""
skills_hub.naming

Conversion between skill paths (e.g. 'team/go-testing/SKILL.md') and tool names
(e.g. 'go_testing').

Only the skill's own directory name feeds the tool name, so two skills in different
parent folders with the same directory name share a tool name. The reverse mapping is
a lookup against a live scan; it is not a pure inverse.
"""

from __future__ import annotations

import os
import re
from pathlib import Path

from skills_hub.errors import UnknownToolError
from skills_hub.scanner import SKILL_FILENAME, scan_skills_directory

MARKDOWN_SUFFIX = ".md"

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def skill_dir_of(skill_path: str) -> str:
    """Strip the trailing '/SKILL.md' from a skill path: 'a/b/SKILL.md' -> 'a/b'."""
    suffix = "/" + SKILL_FILENAME
    if skill_path.endswith(suffix):
        return skill_path[: -len(suffix)]
    return skill_path


def base_name(path: str) -> str:
    """
    function_purpose: Last path segment once the skill filename or .md suffix is removed.

    'team/go-testing/SKILL.md' -> 'go-testing', 'resources/intro.md' -> 'intro'
    """
    stripped = skill_dir_of(path)
    if stripped.endswith(MARKDOWN_SUFFIX):
        stripped = stripped[: -len(MARKDOWN_SUFFIX)]
    return stripped.split("/")[-1]


def to_tool_name(skill_path: str) -> str:
    """
    function_purpose: Derive the tool name for a skill path.

    Lower-cases the skill directory name and collapses each run of characters outside
    [a-z0-9] into one underscore. Pure; never fails.

    Example: 'go-testing/SKILL.md' -> 'go_testing'
    """
    return _NON_ALNUM.sub("_", base_name(skill_path).lower())


def to_skill_path(skills_dir: Path, tool_name: str) -> str:
    """
    function_purpose: Map a tool name back to a skill path.

    Returns the first scanned skill whose tool name matches. When nothing matches, a
    guess is constructed by turning underscores into hyphens; the guessed file may not
    exist and callers treat a failed read as an unknown tool. A guess that lands
    outside skills_dir raises UnknownToolError.
    """
    for skill_path in scan_skills_directory(skills_dir):
        if to_tool_name(skill_path) == tool_name:
            return skill_path

    guess = f"{tool_name.replace('_', '-')}/{SKILL_FILENAME}"
    root = os.path.normpath(os.path.abspath(skills_dir))
    target = os.path.normpath(os.path.join(root, guess))
    if os.path.commonpath([root, target]) != root:
        raise UnknownToolError(tool_name, "Tool name must stay within the skills directory")
    return guess


def find_collisions(skill_paths: list[str]) -> dict[str, list[str]]:
    """Group skill paths by tool name, keeping only names claimed more than once."""
    by_name: dict[str, list[str]] = {}
    for skill_path in skill_paths:
        by_name.setdefault(to_tool_name(skill_path), []).append(skill_path)
    return {name: paths for name, paths in by_name.items() if len(paths) > 1}

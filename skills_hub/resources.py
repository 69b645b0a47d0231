"""
skills_hub.resources

Skill resources: Markdown documents kept directly under a skill's `resources/` folder,
plus the `skill://` URI scheme that addresses skill documents and resources.

URI format:
- skill://<skill-dir>/SKILL.md
- skill://<skill-dir>/resources/<filename>

Segments are percent-encoded, so directory names with spaces still form valid URLs.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any
from urllib.parse import quote, unquote

from skills_hub.descriptions import read_description
from skills_hub.errors import InvalidURIError, MissingURIError, ResourceReadError
from skills_hub.naming import MARKDOWN_SUFFIX, skill_dir_of
from skills_hub.scanner import SKILL_FILENAME, scan_skills_directory

SKILL_URI_PREFIX = "skill://"
RESOURCES_DIRNAME = "resources"
MARKDOWN_MIME_TYPE = "text/markdown"

logger = logging.getLogger(__name__)


def read_document(file_path: Path) -> str:
    """Read a document exactly as stored (no newline translation)."""
    with open(file_path, encoding="utf-8", newline="") as f:
        return f.read()


# --- Resource index ---
def index_skill_resources(skills_dir: Path, skill_path: str) -> list[dict[str, str]]:
    """
    function_purpose: Index the Markdown files directly inside a skill's resources/ folder.

    Returns dicts {filename, description} sorted by filename. Only as much of each file
    is read as the description needs. Nested folders are not indexed; a missing
    resources/ folder gives an empty list; a file that fails to read is logged and skipped.
    """
    resources_dir = skills_dir / skill_dir_of(skill_path) / RESOURCES_DIRNAME
    if not resources_dir.is_dir():
        return []

    try:
        entries = os.listdir(resources_dir)
    except OSError as exc:
        logger.error("Error reading resources directory for %s: %s", skill_path, exc)
        return []

    resources: list[dict[str, str]] = []
    for filename in sorted(e for e in entries if e.endswith(MARKDOWN_SUFFIX)):
        try:
            description = read_description(resources_dir / filename, filename)
        except (OSError, UnicodeDecodeError) as exc:
            logger.error("Error reading resource file %s: %s", filename, exc)
            continue
        resources.append({"filename": filename, "description": description})
    return resources


def render_resources_section(resources: list[dict[str, str]]) -> str:
    """
    function_purpose: Render the 'Available Resources' appendix for a skill document.

    Empty string when there is nothing to list, so the skill text stays unchanged.
    """
    if not resources:
        return ""
    lines = [
        "\n\n---\n\n## Available Resources\n\n",
        "The following resource files are available for this skill. ",
        "Each resource provides detailed guidance on specific topics.\n\n",
    ]
    for resource in resources:
        name = resource["filename"].removesuffix(MARKDOWN_SUFFIX)
        lines.append(f"- **{name}**: {resource['description']}\n")
    lines.append("\n")
    return "".join(lines)


# --- URIs ---
def build_skill_uri(skill_dir: str) -> str:
    return f"{SKILL_URI_PREFIX}{quote(skill_dir)}/{SKILL_FILENAME}"


def build_resource_uri(skill_dir: str, filename: str) -> str:
    return f"{SKILL_URI_PREFIX}{quote(skill_dir)}/{RESOURCES_DIRNAME}/{quote(filename)}"


def display_name(uri: str) -> str:
    """'skill://go-testing/resources/mocks.md' -> 'go-testing/resources/mocks'"""
    return unquote(uri.removeprefix(SKILL_URI_PREFIX)).removesuffix(MARKDOWN_SUFFIX)


def resolve_resource_uri(skills_dir: Path, uri: str) -> Path:
    """
    function_purpose: Map a skill:// URI to an absolute path inside the skills root.

    The path is percent-decoded first, then validated lexically: the joined path is
    normalized and must remain under the root, so '..' segments (encoded or not)
    cannot climb out. No filesystem access happens here.
    """
    if not uri:
        raise MissingURIError()
    if not uri.startswith(SKILL_URI_PREFIX):
        raise InvalidURIError(uri, f"Must start with '{SKILL_URI_PREFIX}'")

    root = os.path.normpath(os.path.abspath(skills_dir))
    rel = unquote(uri[len(SKILL_URI_PREFIX) :])
    target = os.path.normpath(os.path.join(root, rel))
    if os.path.commonpath([root, target]) != root or target == root:
        raise InvalidURIError(uri, "Path escapes the skills directory")
    return Path(target)


def read_resource_by_uri(skills_dir: Path, uri: str) -> str:
    """
    function_purpose: Return the raw text of the document a skill:// URI points to.
    """
    file_path = resolve_resource_uri(skills_dir, uri)
    try:
        return read_document(file_path)
    except (OSError, UnicodeDecodeError) as exc:
        raise ResourceReadError(uri, str(exc)) from exc


def scan_all_resources(skills_dir: Path) -> tuple[list[dict[str, Any]], int]:
    """
    function_purpose: Enumerate every skill document and its indexed resources.

    Returns ([{uri, path, description}], skipped) where skipped counts skills that
    could not be read and were left out.
    """
    resources: list[dict[str, Any]] = []
    skipped = 0
    for skill_path in scan_skills_directory(skills_dir):
        skill_dir = skill_dir_of(skill_path)
        try:
            description = read_description(skills_dir / skill_path, skill_path)
        except (OSError, UnicodeDecodeError) as exc:
            logger.error("Error processing skill %s: %s", skill_path, exc)
            skipped += 1
            continue

        resources.append(
            {
                "uri": build_skill_uri(skill_dir),
                "path": skill_path,
                "description": description,
            }
        )
        for resource in index_skill_resources(skills_dir, skill_path):
            resources.append(
                {
                    "uri": build_resource_uri(skill_dir, resource["filename"]),
                    "path": f"{skill_dir}/{RESOURCES_DIRNAME}/{resource['filename']}",
                    "description": resource["description"],
                }
            )
    return resources, skipped

"""
skills_hub.scripts

Runs helper scripts bundled inside a skill directory (usually under scripts/).

This module restricts which file may be run: it must live inside the resolved skill
directory. It does not restrict what the file does. Whether scripts may run at all is
decided by the caller (see the `auto_execute_scripts` user setting).
"""

from __future__ import annotations

import asyncio
import logging
import os
from pathlib import Path
from typing import Any

from skills_hub.errors import (
    LaunchError,
    PathEscapeError,
    ScriptNotFoundError,
    SkillNotFoundError,
)
from skills_hub.naming import skill_dir_of, to_tool_name
from skills_hub.scanner import scan_skills_directory

DEFAULT_INTERPRETER = "bash"

logger = logging.getLogger(__name__)


def _is_within(root: Path, target: Path) -> bool:
    return target == root or root in target.parents


def resolve_skill_dir(skills_dir: Path, skill_name: str) -> Path:
    """
    function_purpose: Find the directory of a skill given its name or tool name.

    Tries, in order: the literal name, the name with underscores turned into hyphens,
    then every scanned skill whose tool name equals skill_name. Candidates outside the
    skills root are ignored.
    """
    root = skills_dir.resolve()
    for candidate in (skill_name, skill_name.replace("_", "-")):
        if not candidate:
            continue
        sdir = (skills_dir / candidate).resolve()
        if sdir != root and _is_within(root, sdir) and sdir.is_dir():
            return sdir

    for skill_path in scan_skills_directory(skills_dir):
        if to_tool_name(skill_path) == skill_name:
            return (skills_dir / skill_dir_of(skill_path)).resolve()

    raise SkillNotFoundError(skill_name)


def _strip_parent_segments(rel_path: str) -> str:
    parts = rel_path.split(os.sep)
    while parts and parts[0] == os.pardir:
        parts.pop(0)
    return os.sep.join(parts)


def resolve_script_path(skill_root: Path, script_path: str) -> Path:
    """
    function_purpose: Turn a script path relative to a skill into a contained absolute path.

    Raises PathEscapeError for absolute paths, leading '..' segments, or anything that
    resolves (symlinks included) outside skill_root. Does not check existence.
    """
    normalized = os.path.normpath(script_path)
    if os.path.isabs(normalized):
        raise PathEscapeError(script_path)
    stripped = _strip_parent_segments(normalized)
    if stripped != normalized or not stripped or stripped == os.curdir:
        raise PathEscapeError(script_path)

    target = (skill_root / stripped).resolve()
    if not _is_within(skill_root, target) or target == skill_root:
        raise PathEscapeError(script_path)
    return target


async def run_skill_script(
    skills_dir: Path,
    skill_name: str,
    script_path: str,
    args: list[str] | None = None,
    interpreter: str = DEFAULT_INTERPRETER,
) -> dict[str, Any]:
    """
    function_purpose: Run one helper script of a skill and capture its output.

    Args:
    - skills_dir: Path     Skills root
    - skill_name: str      Skill directory name or tool name (e.g. 'go_testing')
    - script_path: str     Path relative to the skill directory (e.g. 'scripts/check.sh')
    - args: list[str]      Extra arguments passed to the script
    - interpreter: str     Shell used to run the script (default: bash)

    Returns:
    - dict with skill, script, exit_code, stdout, stderr (stdout/stderr stripped)

    The script runs with the skill directory as working directory and the current
    environment. A non-zero exit code is a normal result. No timeout is applied.
    """
    skill_root = resolve_skill_dir(skills_dir, skill_name)
    target = resolve_script_path(skill_root, script_path)
    if not target.is_file():
        raise ScriptNotFoundError(skill_name, script_path)

    argv = [interpreter, str(target), *(args or [])]
    logger.info("Running script %s for skill %s", script_path, skill_name)
    try:
        process = await asyncio.create_subprocess_exec(
            *argv,
            cwd=str(skill_root),
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as exc:
        raise LaunchError(f"Failed to launch script {script_path}: {exc}") from exc

    stdout, stderr = await process.communicate()
    exit_code = process.returncode if process.returncode is not None else 0
    logger.info(
        "Script %s for skill %s exited with %s", script_path, skill_name, exit_code
    )
    return {
        "skill": skill_name,
        "script": script_path,
        "exit_code": exit_code,
        "stdout": stdout.decode("utf-8", errors="replace").strip(),
        "stderr": stderr.decode("utf-8", errors="replace").strip(),
    }

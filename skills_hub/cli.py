"""
skills_hub.cli

Command line for the skills hub.

Usage:
  skillshub                              # same as 'skillshub serve'
  skillshub serve                        # start the stdio MCP server
  skillshub list [-v] [--json]           # list skills with tool names and descriptions
  skillshub add <URL> [--force]          # download a SKILL.md into the skills directory
  skillshub run <SKILL> <SCRIPT> [ARGS]  # run a helper script bundled with a skill
  skillshub config                       # print the MCP client configuration snippet
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from datetime import datetime
from pathlib import Path
from typing import Any

from skills_hub import __version__
from skills_hub.config import configure_logging, load_settings, resolve_skills_dir
from skills_hub.descriptions import extract_description
from skills_hub.errors import SkillsHubError
from skills_hub.fetch import add_skill
from skills_hub.naming import to_tool_name
from skills_hub.scanner import scan_skills_directory
from skills_hub.scripts import run_skill_script
from skills_hub.server import SERVER_NAME, run


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="skillshub",
        description="AI Skills Hub - MCP server for team coding skills and best practices",
    )
    parser.add_argument("--version", action="version", version=__version__)
    sub = parser.add_subparsers(dest="command")

    sub.add_parser("serve", help="Start the stdio MCP server (default)")

    p_list = sub.add_parser("list", aliases=["l"], help="List available skills")
    p_list.add_argument(
        "-v", "--verbose", action="store_true", help="Show file size, line count and mtime"
    )
    p_list.add_argument("--json", action="store_true", help="Print JSON instead of text")

    p_add = sub.add_parser("add", aliases=["a"], help="Add a skill from a URL")
    p_add.add_argument("url", help="URL of a SKILL.md (GitHub blob URLs are accepted)")
    p_add.add_argument(
        "-f", "--force", action="store_true", help="Overwrite an existing skill"
    )

    # Options for 'run' go before SKILL; everything after SCRIPT is passed to the script.
    p_run = sub.add_parser("run", help="Run a helper script bundled with a skill")
    p_run.add_argument("skill", help="Skill directory name or tool name")
    p_run.add_argument("script", help="Script path relative to the skill directory")
    p_run.add_argument("args", nargs=argparse.REMAINDER, help="Arguments for the script")
    p_run.add_argument(
        "-y",
        "--yes",
        action="store_true",
        help="Run even when auto_execute_scripts is disabled in settings",
    )

    sub.add_parser("config", help="Print MCP client configuration for this server")
    return parser


def cmd_list(skills_dir: Path, verbose: bool = False, as_json: bool = False) -> int:
    skill_paths = scan_skills_directory(skills_dir)
    entries: list[dict[str, Any]] = []
    for skill_path in skill_paths:
        entry: dict[str, Any] = {"path": skill_path, "tool_name": to_tool_name(skill_path)}
        file_path = skills_dir / skill_path
        try:
            content = file_path.read_text(encoding="utf-8")
            entry["description"] = extract_description(content, skill_path)
            if verbose:
                st = file_path.stat()
                entry["size"] = st.st_size
                entry["lines"] = len(content.split("\n"))
                entry["modified"] = datetime.fromtimestamp(st.st_mtime).isoformat(
                    timespec="seconds"
                )
        except (OSError, UnicodeDecodeError) as exc:
            entry["error"] = str(exc)
        entries.append(entry)

    if as_json:
        print(json.dumps(entries, indent=2, ensure_ascii=False))
        return 0

    print("=== AI Skills Hub - Available Skills ===\n")
    if not entries:
        print("No skill files found")
        print(f"Create SKILL.md files in subdirectories of {skills_dir}")
        print("(e.g. go-testing/SKILL.md)")
        return 0

    print(f"Found {len(entries)} skill{'s' if len(entries) > 1 else ''}:\n")
    for i, entry in enumerate(entries, start=1):
        if "error" in entry:
            print(f"x {entry['path']}")
            print("   Error: Unable to read file")
            if verbose:
                print(f"   {entry['error']}")
            print()
            continue
        print(f"{i}. {entry['path']}")
        print(f"   Tool name: {entry['tool_name']}")
        print(f"   Description: {entry['description']}")
        if verbose:
            print(f"   File size: {entry['size'] / 1024:.2f} KB")
            print(f"   Line count: {entry['lines']}")
            print(f"   Last modified: {entry['modified']}")
        print()
    return 0


def cmd_add(skills_dir: Path, url: str, force: bool = False) -> int:
    try:
        skill_file = add_skill(skills_dir, url, force=force)
    except (FileExistsError, SkillsHubError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    print(f"Skill successfully added: {skill_file}")
    return 0


def cmd_run(
    skills_dir: Path,
    settings: dict[str, Any],
    skill: str,
    script: str,
    args: list[str],
    yes: bool = False,
) -> int:
    if not (settings.get("auto_execute_scripts") or yes):
        print(
            "Error: script execution is disabled. Set 'auto_execute_scripts: true' in the "
            "settings file or pass --yes.",
            file=sys.stderr,
        )
        return 2
    try:
        result = asyncio.run(run_skill_script(skills_dir, skill, script, args))
    except SkillsHubError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    if result["stdout"]:
        print(result["stdout"])
    if result["stderr"]:
        print(result["stderr"], file=sys.stderr)
    return result["exit_code"]


def cmd_config(skills_dir: Path) -> int:
    server_entry: dict[str, Any] = {
        "command": sys.executable,
        "args": ["-m", "skills_hub", "serve"],
        "env": {"SKILLS_DIR": str(skills_dir)},
    }
    print(json.dumps({"mcpServers": {SERVER_NAME: server_entry}}, indent=2))
    return 0


def cli_main(argv: list[str] | None = None) -> None:
    """
    function_purpose: Parse arguments, resolve configuration once, dispatch the command.
    """
    args = _build_parser().parse_args(argv)
    configure_logging()
    skills_dir = resolve_skills_dir()

    if args.command in ("list", "l"):
        code = cmd_list(skills_dir, verbose=args.verbose, as_json=args.json)
    elif args.command in ("add", "a"):
        code = cmd_add(skills_dir, args.url, force=args.force)
    elif args.command == "run":
        settings = load_settings()
        code = cmd_run(skills_dir, settings, args.skill, args.script, args.args, yes=args.yes)
    elif args.command == "config":
        code = cmd_config(skills_dir)
    else:
        run(skills_dir)
        code = 0

    if code:
        sys.exit(code)


if __name__ == "__main__":
    cli_main()

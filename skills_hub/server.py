"""
skills_hub.server

MCP stdio server exposing a directory of Markdown skills as tools and resources.

Server-level documentation:
- Purpose: Every `<skill>/SKILL.md` under the skills directory becomes one MCP tool whose
  output is the skill document, followed by an index of the skill's `resources/`.
- Resources: skill documents and their resources are also readable as `skill://` URIs.
- State: none. Each request rescans the skills directory, so edits show up immediately.
- Failures: one unreadable skill is logged and left out of listings; it never takes
  the whole listing down.

Why the low-level server: tool names come from the filesystem at request time, so they
cannot be registered up front with FastMCP decorators. The handlers are registered on
`mcp.server.lowlevel.Server` instead.

Usage:
- python -m skills_hub serve
- MCP client config (stdio):
  command: skillshub
  args: ["serve"]
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import anyio
import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.lowlevel.helper_types import ReadResourceContents
from mcp.server.stdio import stdio_server

from skills_hub import __version__
from skills_hub.descriptions import extract_description
from skills_hub.errors import UnknownToolError
from skills_hub.naming import find_collisions, to_skill_path, to_tool_name
from skills_hub.resources import (
    MARKDOWN_MIME_TYPE,
    display_name,
    index_skill_resources,
    read_document,
    read_resource_by_uri,
    render_resources_section,
    scan_all_resources,
)
from skills_hub.scanner import scan_skills_directory

SERVER_NAME = "ai-skills-hub"

EMPTY_INPUT_SCHEMA: dict[str, Any] = {"type": "object", "properties": {}, "required": []}

logger = logging.getLogger(__name__)


def _server_instructions() -> str:
    return (
        "AI Skills Hub MCP Server\n"
        "\n"
        "Each tool is a team skill: a Markdown guide for one kind of task (testing, API design, ...).\n"
        "Call the tool whose description matches the task to receive the full guidance. The output\n"
        "ends with an 'Available Resources' list when the skill ships extra reference documents;\n"
        "read those as resources at skill://<skill>/resources/<file>.md.\n"
    )


# --- Request handlers (filesystem in, plain data out) ---
def list_skill_tools(skills_dir: Path) -> list[dict[str, Any]]:
    """
    function_purpose: Describe every skill as a tool: {name, description, inputSchema}.

    Unreadable skills are logged and left out. When two skills share a tool name, the
    first in sorted path order is listed and the other is reported as shadowed.
    """
    skill_paths = scan_skills_directory(skills_dir)
    for name, paths in find_collisions(skill_paths).items():
        logger.warning(
            "Tool name '%s' is shared by %s; only %s is reachable",
            name,
            ", ".join(paths),
            paths[0],
        )

    tools: list[dict[str, Any]] = []
    seen: set[str] = set()
    skipped = 0
    for skill_path in skill_paths:
        tool_name = to_tool_name(skill_path)
        if tool_name in seen:
            continue
        seen.add(tool_name)
        try:
            content = read_document(skills_dir / skill_path)
        except (OSError, UnicodeDecodeError) as exc:
            logger.error("Error processing skill file %s: %s", skill_path, exc)
            skipped += 1
            continue
        tools.append(
            {
                "name": tool_name,
                "description": extract_description(content, skill_path),
                "inputSchema": dict(EMPTY_INPUT_SCHEMA),
            }
        )

    if skipped:
        logger.warning("Listed %d tools, skipped %d unreadable skills", len(tools), skipped)
    return tools


def call_skill_tool(skills_dir: Path, name: str) -> str:
    """
    function_purpose: Return a skill document plus the index of its resources.

    The resources section is appended only when the skill has at least one resource;
    otherwise the document is returned exactly as stored.
    """
    skill_path = to_skill_path(skills_dir, name)
    try:
        content = read_document(skills_dir / skill_path)
    except (OSError, UnicodeDecodeError) as exc:
        raise UnknownToolError(
            name, f"Failed to read skill file: {skill_path}. {exc}"
        ) from exc

    resources = index_skill_resources(skills_dir, skill_path)
    return content + render_resources_section(resources)


def list_skill_resources(skills_dir: Path) -> list[dict[str, Any]]:
    """
    function_purpose: Describe skill documents and resources: {uri, name, description, mimeType}.

    Any unexpected failure while scanning yields an empty list.
    """
    try:
        entries, skipped = scan_all_resources(skills_dir)
    except Exception:
        logger.exception("Error listing resources")
        return []

    if skipped:
        logger.warning(
            "Listed %d resources, skipped %d unreadable skills", len(entries), skipped
        )
    return [
        {
            "uri": entry["uri"],
            "name": display_name(entry["uri"]),
            "description": entry["description"],
            "mimeType": MARKDOWN_MIME_TYPE,
        }
        for entry in entries
    ]


def read_skill_resource(skills_dir: Path, uri: str) -> str:
    return read_resource_by_uri(skills_dir, uri)


# --- MCP wiring ---
def create_server(skills_dir: Path) -> Server:
    """
    function_purpose: Build the MCP server bound to one skills directory.

    The directory is the only state the handlers share; it is never mutated.
    """
    server: Server = Server(
        SERVER_NAME, version=__version__, instructions=_server_instructions()
    )

    @server.list_tools()
    async def handle_list_tools() -> list[types.Tool]:
        return [types.Tool(**tool) for tool in list_skill_tools(skills_dir)]

    @server.call_tool()
    async def handle_call_tool(
        name: str, arguments: dict[str, Any] | None
    ) -> list[types.TextContent]:
        # Skills declare no parameters; arguments are accepted and ignored.
        text = call_skill_tool(skills_dir, name)
        return [types.TextContent(type="text", text=text)]

    @server.list_resources()
    async def handle_list_resources() -> list[types.Resource]:
        resources: list[types.Resource] = []
        for entry in list_skill_resources(skills_dir):
            try:
                resources.append(types.Resource(**entry))
            except ValueError as exc:
                # pydantic rejects URIs it cannot parse; drop that entry only
                logger.error("Skipping resource %s: %s", entry["uri"], exc)
        return resources

    @server.read_resource()
    async def handle_read_resource(uri: Any) -> list[ReadResourceContents]:
        text = read_skill_resource(skills_dir, str(uri) if uri else "")
        return [ReadResourceContents(content=text, mime_type=MARKDOWN_MIME_TYPE)]

    return server


async def serve(skills_dir: Path) -> None:
    server = create_server(skills_dir)
    async with stdio_server() as (read_stream, write_stream):
        logger.info("AI Skills Hub MCP server running on stdio")
        await server.run(
            read_stream, write_stream, server.create_initialization_options()
        )


def run(skills_dir: Path) -> None:
    """
    function_purpose: Entry point to start the MCP stdio server.
    """
    logger.info("Server starting with skills_dir=%s", str(skills_dir))
    if not skills_dir.is_dir():
        logger.warning("Skills directory %s does not exist; no tools will be listed", skills_dir)
    anyio.run(serve, skills_dir)

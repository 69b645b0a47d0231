from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

import pytest
from mcp.shared.memory import create_connected_server_and_client_session

from skills_hub.errors import InvalidURIError, MissingURIError, UnknownToolError
from skills_hub.server import (
    EMPTY_INPUT_SCHEMA,
    call_skill_tool,
    create_server,
    list_skill_resources,
    list_skill_tools,
    read_skill_resource,
)
from tests.conftest import API_DESIGN_SKILL, GO_TESTING_SKILL, write_file


def test_list_tools(skills_dir: Path) -> None:
    tools = list_skill_tools(skills_dir)
    assert tools == [
        {
            "name": "api_design",
            "description": "Design RESTful APIs",
            "inputSchema": EMPTY_INPUT_SCHEMA,
        },
        {
            "name": "go_testing",
            "description": "Go Testing",
            "inputSchema": EMPTY_INPUT_SCHEMA,
        },
    ]


def test_list_tools_empty_library(tmp_path: Path) -> None:
    assert list_skill_tools(tmp_path / "missing") == []


def test_list_tools_skips_unreadable_skill(skills_dir: Path) -> None:
    (skills_dir / "broken").mkdir()
    (skills_dir / "broken" / "SKILL.md").write_bytes(b"\xff\xfe\xfa")
    names = [t["name"] for t in list_skill_tools(skills_dir)]
    assert names == ["api_design", "go_testing"]


def test_list_tools_lists_colliding_name_once(skills_dir: Path) -> None:
    write_file(skills_dir / "other" / "go_testing" / "SKILL.md", "# Other\n")
    tools = list_skill_tools(skills_dir)
    go = [t for t in tools if t["name"] == "go_testing"]
    # 'other/go_testing' sorts before 'team/go-testing'
    assert [t["description"] for t in go] == ["Other"]


def test_call_tool_without_resources_is_unchanged(skills_dir: Path) -> None:
    (skills_dir / "api-design" / "resources").mkdir()
    assert call_skill_tool(skills_dir, "api_design") == API_DESIGN_SKILL


def test_call_tool_appends_resource_index(skills_dir: Path) -> None:
    text = call_skill_tool(skills_dir, "go_testing")
    assert text == (
        GO_TESTING_SKILL
        + "\n\n---\n\n## Available Resources\n\n"
        + "The following resource files are available for this skill. "
        + "Each resource provides detailed guidance on specific topics.\n\n"
        + "- **fixtures**: Test fixtures\n"
        + "- **mocks**: Mocking with interfaces\n"
        + "\n"
    )
    assert "never show up" not in text


def test_call_tool_unknown(skills_dir: Path) -> None:
    with pytest.raises(UnknownToolError, match="no_such_skill"):
        call_skill_tool(skills_dir, "no_such_skill")


def test_call_tool_name_cannot_leave_root(tmp_path: Path) -> None:
    root = tmp_path / "skills"
    write_file(root / "ok" / "SKILL.md", "# Ok\n")
    write_file(tmp_path / "outside" / "SKILL.md", "# Secret outside root\n")
    with pytest.raises(UnknownToolError, match="outside"):
        call_skill_tool(root, "../outside")


def test_list_resources(skills_dir: Path) -> None:
    resources = list_skill_resources(skills_dir)
    assert [r["name"] for r in resources] == [
        "api-design/SKILL",
        "team/go-testing/SKILL",
        "team/go-testing/resources/fixtures",
        "team/go-testing/resources/mocks",
    ]
    assert {r["mimeType"] for r in resources} == {"text/markdown"}


def test_list_resources_empty_on_scan_failure(
    skills_dir: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    def boom(_skills_dir: Path) -> Any:
        raise RuntimeError("disk on fire")

    monkeypatch.setattr("skills_hub.server.scan_all_resources", boom)
    assert list_skill_resources(skills_dir) == []


def test_read_resource(skills_dir: Path) -> None:
    assert read_skill_resource(skills_dir, "skill://api-design/SKILL.md") == API_DESIGN_SKILL
    with pytest.raises(MissingURIError):
        read_skill_resource(skills_dir, "")
    with pytest.raises(InvalidURIError):
        read_skill_resource(skills_dir, "http://api-design/SKILL.md")


# --- Through an in-memory MCP session ---
def _with_session(skills_dir: Path, fn: Any) -> Any:
    async def main() -> Any:
        server = create_server(skills_dir)
        async with create_connected_server_and_client_session(server) as session:
            return await fn(session)

    return asyncio.run(main())


def test_mcp_list_and_call_tool(skills_dir: Path) -> None:
    async def scenario(session: Any) -> Any:
        listed = await session.list_tools()
        called = await session.call_tool("api_design", {})
        return listed, called

    listed, called = _with_session(skills_dir, scenario)
    assert [t.name for t in listed.tools] == ["api_design", "go_testing"]
    assert listed.tools[0].inputSchema["type"] == "object"
    assert not called.isError
    assert called.content[0].text == API_DESIGN_SKILL


def test_mcp_call_unknown_tool_is_error_result(skills_dir: Path) -> None:
    async def scenario(session: Any) -> Any:
        return await session.call_tool("no_such_skill", {})

    result = _with_session(skills_dir, scenario)
    assert result.isError
    assert "Invalid tool name: no_such_skill" in result.content[0].text


def test_mcp_resources(skills_dir: Path) -> None:
    async def scenario(session: Any) -> Any:
        listed = await session.list_resources()
        read = await session.read_resource(listed.resources[1].uri)
        return listed, read

    listed, read = _with_session(skills_dir, scenario)
    assert [str(r.uri) for r in listed.resources][:2] == [
        "skill://api-design/SKILL.md",
        "skill://team/go-testing/SKILL.md",
    ]
    assert read.contents[0].text == GO_TESTING_SKILL
    assert read.contents[0].mimeType == "text/markdown"


def test_mcp_resources_with_spaces_round_trip(tmp_path: Path) -> None:
    root = tmp_path / "skills"
    write_file(root / "go" / "SKILL.md", "# Go\n")
    write_file(root / "go" / "resources" / "my notes.md", "# Notes\n")
    write_file(root / "my skill" / "SKILL.md", "# Spaced\n")

    async def scenario(session: Any) -> Any:
        listed = await session.list_resources()
        texts = []
        for resource in listed.resources:
            read = await session.read_resource(resource.uri)
            texts.append(read.contents[0].text)
        return listed, texts

    listed, texts = _with_session(root, scenario)
    assert [r.name for r in listed.resources] == [
        "go/SKILL",
        "go/resources/my notes",
        "my skill/SKILL",
    ]
    assert texts == ["# Go\n", "# Notes\n", "# Spaced\n"]


def test_mcp_list_resources_drops_unparseable_uri(
    skills_dir: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    def entries(_skills_dir: Path) -> list[dict[str, Any]]:
        return [
            {
                "uri": f"skill://{name}/SKILL.md",
                "name": f"{name}/SKILL",
                "description": name,
                "mimeType": "text/markdown",
            }
            for name in ("bad host", "ok")
        ]

    monkeypatch.setattr("skills_hub.server.list_skill_resources", entries)

    async def scenario(session: Any) -> Any:
        return await session.list_resources()

    listed = _with_session(skills_dir, scenario)
    assert [r.name for r in listed.resources] == ["ok/SKILL"]

"""
skills_hub: MCP stdio server exposing a directory of Markdown skills as tools.

Every `<skill>/SKILL.md` under the skills directory is served as one tool, and the
skill documents plus their `resources/` are readable through `skill://` URIs.
"""

__version__: str = "1.0.0"


def version() -> str:
    return __version__


__all__: list[str] = ["__version__", "version"]

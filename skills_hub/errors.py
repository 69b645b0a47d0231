"""
skills_hub.errors

Exception taxonomy shared by the resolution core, the MCP handlers and the CLI.

- NotFoundError subclasses: the addressed tool, skill, script or resource is absent.
- ValidationError subclasses: caller input is rejected before touching the filesystem.
- LaunchError: a helper script could not be started at all.

A script that starts and exits non-zero is not an error; it is reported as a result.
"""

from __future__ import annotations


class SkillsHubError(Exception):
    """Base class for every error raised by skills_hub."""


class NotFoundError(SkillsHubError, LookupError):
    pass


class UnknownToolError(NotFoundError):
    def __init__(self, name: str, detail: str | None = None) -> None:
        message = f"Invalid tool name: {name}"
        if detail:
            message = f"{message}. {detail}"
        super().__init__(message)
        self.name = name


class SkillNotFoundError(NotFoundError):
    def __init__(self, skill_name: str) -> None:
        super().__init__(f"skill '{skill_name}' not found")
        self.skill_name = skill_name


class ScriptNotFoundError(NotFoundError):
    def __init__(self, skill_name: str, script_path: str) -> None:
        super().__init__(f"script '{script_path}' not found in skill '{skill_name}'")
        self.skill_name = skill_name
        self.script_path = script_path


class ResourceReadError(NotFoundError):
    def __init__(self, uri: str, detail: str) -> None:
        super().__init__(f"Failed to read resource: {uri}. {detail}")
        self.uri = uri


class ValidationError(SkillsHubError, ValueError):
    pass


class MissingURIError(ValidationError):
    def __init__(self) -> None:
        super().__init__("Resource URI is required")


class InvalidURIError(ValidationError):
    def __init__(self, uri: str, reason: str) -> None:
        super().__init__(f"Invalid resource URI: {uri}. {reason}")
        self.uri = uri


class PathEscapeError(ValidationError):
    def __init__(self, path: str) -> None:
        super().__init__(f"path must be within the skill directory: {path}")
        self.path = path


class LaunchError(SkillsHubError):
    """The interpreter for a helper script could not be started."""


class FetchError(SkillsHubError):
    """Downloading a remote skill file failed."""

"""
skills_hub.fetch

Download a SKILL.md from a URL into the local skills directory.

GitHub 'blob' page URLs are rewritten to raw.githubusercontent.com so the file
content, not the HTML page, is downloaded.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

import httpx

from skills_hub.errors import FetchError
from skills_hub.scanner import SKILL_FILENAME

DEFAULT_SKILL_NAME = "skill"
FETCH_TIMEOUT = 30.0

_GITHUB_BLOB = re.compile(r"github\.com/([^/]+/[^/]+)/blob/(.+)")

logger = logging.getLogger(__name__)


def to_raw_url(url: str) -> str:
    """
    https://github.com/org/repo/blob/main/skills/create-pr/SKILL.md
      -> https://raw.githubusercontent.com/org/repo/main/skills/create-pr/SKILL.md
    """
    if "raw.githubusercontent.com" in url:
        return url
    match = _GITHUB_BLOB.search(url)
    if match:
        repo, path = match.groups()
        return f"https://raw.githubusercontent.com/{repo}/{path}"
    return url


def skill_name_from_url(url: str) -> str:
    """Directory name right before SKILL.md in the URL path, or 'skill'."""
    parts = url.split("/")
    if SKILL_FILENAME in parts:
        idx = parts.index(SKILL_FILENAME)
        if idx > 0 and parts[idx - 1]:
            return parts[idx - 1]
    return DEFAULT_SKILL_NAME


def download_skill(url: str, client: httpx.Client | None = None) -> str:
    """
    function_purpose: Fetch the text of a remote skill file.

    Raises FetchError on transport failures and non-2xx responses.
    """
    own_client = client is None
    http = client or httpx.Client(follow_redirects=True, timeout=FETCH_TIMEOUT)
    try:
        response = http.get(url)
        response.raise_for_status()
        return response.text
    except httpx.HTTPError as exc:
        raise FetchError(f"Failed to download file from {url}: {exc}") from exc
    finally:
        if own_client:
            http.close()


def add_skill(
    skills_dir: Path,
    url: str,
    force: bool = False,
    client: httpx.Client | None = None,
) -> Path:
    """
    function_purpose: Download a remote SKILL.md into <skills_dir>/<name>/SKILL.md.

    Refuses to replace an existing skill unless force=True. Returns the written path.
    """
    raw_url = to_raw_url(url)
    name = skill_name_from_url(raw_url)
    skill_file = skills_dir / name / SKILL_FILENAME

    if skill_file.exists() and not force:
        raise FileExistsError(f"Skill '{name}' already exists (use --force to overwrite)")

    logger.info("Downloading skill '%s' from %s", name, raw_url)
    content = download_skill(raw_url, client=client)

    skill_file.parent.mkdir(parents=True, exist_ok=True)
    skill_file.write_text(content, encoding="utf-8")
    logger.info("Skill '%s' written to %s", name, skill_file)
    return skill_file

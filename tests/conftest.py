from __future__ import annotations

from pathlib import Path

import pytest

API_DESIGN_SKILL = """\
---
name: api-design
description: "Design RESTful APIs"
---
# API Design

Use nouns for resources.
"""

GO_TESTING_SKILL = """\
# Go Testing

Table-driven tests first.
"""

MOCKS_RESOURCE = """\
---
description: 'Mocking with interfaces'
---
# Mocks
"""

FIXTURES_RESOURCE = """\
## Test fixtures

Body that should never show up in an index.
"""


def write_file(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture
def skills_dir(tmp_path: Path) -> Path:
    """
    A small skills library:

    skills/
      api-design/SKILL.md
      team/go-testing/SKILL.md
      team/go-testing/resources/{mocks.md, fixtures.md, notes.txt, nested/deep.md}
      team/go-testing/scripts/hello.sh
    """
    root = tmp_path / "skills"
    write_file(root / "api-design" / "SKILL.md", API_DESIGN_SKILL)
    go = root / "team" / "go-testing"
    write_file(go / "SKILL.md", GO_TESTING_SKILL)
    write_file(go / "resources" / "mocks.md", MOCKS_RESOURCE)
    write_file(go / "resources" / "fixtures.md", FIXTURES_RESOURCE)
    write_file(go / "resources" / "notes.txt", "not markdown\n")
    write_file(go / "resources" / "nested" / "deep.md", "# Deep\n")
    write_file(
        go / "scripts" / "hello.sh",
        'echo "hello from $(basename "$PWD")"\necho "args: $*"\necho oops >&2\n',
    )
    return root

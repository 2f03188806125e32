"""
Summary: Validate Where/What/Why header docstrings for client modules.
Why: Prevent regression to inconsistent header formats across touched files.
"""

from __future__ import annotations

import ast
from pathlib import Path

import pytest

HEADER_PREFIXES: tuple[str, ...] = ("Where: ", "What: ", "Why: ")

TARGET_MODULES: tuple[Path, ...] = (
    Path("src/mbclient/platform/logging/__init__.py"),
    Path("src/mbclient/platform/logging/config.py"),
    Path("src/mbclient/platform/logging/handlers.py"),
    Path("src/mbclient/platform/musicbrainz/__init__.py"),
    Path("src/mbclient/platform/musicbrainz/classifier.py"),
    Path("src/mbclient/platform/musicbrainz/client.py"),
    Path("src/mbclient/platform/musicbrainz/dispatcher.py"),
    Path("src/mbclient/platform/musicbrainz/errors.py"),
    Path("src/mbclient/platform/musicbrainz/http_client.py"),
    Path("src/mbclient/platform/musicbrainz/models.py"),
    Path("src/mbclient/platform/musicbrainz/queries.py"),
    Path("src/mbclient/platform/musicbrainz/rate_limit.py"),
    Path("src/mbclient/platform/musicbrainz/request_builder.py"),
    Path("src/mbclient/platform/musicbrainz/user_agent.py"),
)

REPO_ROOT: Path = Path(__file__).resolve().parents[1]


@pytest.mark.parametrize("module_path", TARGET_MODULES, ids=lambda path: str(path))
def test_module_headers_follow_where_what_why_schema(module_path: Path) -> None:
    """Ensure the module docstring carries Where, What and Why lines in order."""

    source = (REPO_ROOT / module_path).read_text(encoding="utf-8")
    docstring = ast.get_docstring(ast.parse(source))
    assert docstring, f"{module_path} must start with a header docstring"

    lines = [line.strip() for line in docstring.splitlines()]
    positions: list[int] = []
    for prefix in HEADER_PREFIXES:
        index = next((i for i, line in enumerate(lines) if line.startswith(prefix)), None)
        assert index is not None, f"{module_path} header must contain a '{prefix.strip()}' line"
        assert lines[index].removeprefix(prefix).strip(), (
            f"{module_path} '{prefix.strip()}' text cannot be empty"
        )
        positions.append(index)

    assert positions == sorted(positions), f"{module_path} header lines must read Where, What, Why"
    assert str(module_path).endswith(
        lines[positions[0]].removeprefix("Where: ").strip()
    ), f"{module_path} Where line must name the module"

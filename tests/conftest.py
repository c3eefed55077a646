"""Shared fixtures and helpers for tests."""

import json
from pathlib import Path

import pytest

from annotated_snippets.analyzer import TreeSitterProject, TypeDeclarationLoader
from annotated_snippets.config import Settings
from annotated_snippets.core.render import RenderContext
from annotated_snippets.core.theme import default_theme
from annotated_snippets.models import Theme

_REPO_ROOT = Path(__file__).parent.parent

UI_DECLARATIONS = """\
export declare function Button(props: { label: string }): any;
export declare function Card(props: { title: string }): any;
"""


# ---------------------------------------------------------------------------
# Auto-marker: tag tests as "unit" or "integration" based on directory
# ---------------------------------------------------------------------------


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        test_path = Path(str(item.fspath))
        rel = test_path.relative_to(_REPO_ROOT / "tests")
        parts = rel.parts
        if parts and parts[0] == "integration":
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)


# ---------------------------------------------------------------------------
# Shared unit-test fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def theme() -> Theme:
    return default_theme()


@pytest.fixture
def project() -> TreeSitterProject:
    return TreeSitterProject()


@pytest.fixture
def ui_project(project: TreeSitterProject) -> TreeSitterProject:
    """A project with declarations for a ``ui`` module exporting ``Button`` and ``Card``."""
    project.register("node_modules/ui/index.d.ts", UI_DECLARATIONS)
    return project


@pytest.fixture
def types_path(tmp_path: Path) -> Path:
    path = tmp_path / "types.json"
    path.write_text(
        json.dumps([{"path": "node_modules/ui/index.d.ts", "code": UI_DECLARATIONS}]),
        encoding="utf-8",
    )
    return path


@pytest.fixture
def render_context(types_path: Path) -> RenderContext:
    project = TreeSitterProject()
    settings = Settings(types_path=types_path)
    return RenderContext(
        registry=project,
        declarations=TypeDeclarationLoader(project, settings.types_path),
        settings=settings,
    )

from __future__ import annotations

from pathlib import Path

import pytest

SAMPLE_DOCS = {
    "getting-started/01-introduction.md": (
        "---\n"
        "title: Introduction\n"
        "---\n"
        "\n"
        "Start with [installation](./02-installation.md), then read about\n"
        "[sandboxing](../concepts/01-sandboxing.md).\n"
    ),
    "getting-started/02-installation.md": (
        "Install it.\n"
        "\n"
        "See [the intro](01-introduction.md).\n"
    ),
    "concepts/01-sandboxing.md": (
        "---\n"
        "title: Sandboxing\n"
        "description: How runs are isolated\n"
        "---\n"
        "\n"
        "Back to [install](getting-started/02-installation.md).\n"
        "External [site](https://example.com/x.md).\n"
    ),
}


def write_tree(root: Path, files: dict[str, str]) -> Path:
    for rel, text in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    return root


@pytest.fixture
def mirror(tmp_path: Path) -> Path:
    """A local checkout of the moat repo with docs under docs/content."""
    root = tmp_path / "mirror"
    write_tree(root / "docs" / "content", SAMPLE_DOCS)
    return root


@pytest.fixture
def content_root(tmp_path: Path) -> Path:
    return tmp_path / "src" / "content"

from __future__ import annotations

from pathlib import Path

import pytest

from conftest import write_tree
from docsite.fetch_docs import fetch_product_docs
from docsite.products import PRODUCTS
from docsite.remote import LocalMirrorSource
from docsite.validate_links import build_valid_paths, find_broken_links, find_internal_links, main

MOAT = PRODUCTS["moat"]

STORE = {
    "getting-started/01-introduction.md": "---\ntitle: Introduction\n---\n",
    "concepts/01-sandboxing.md": "---\ntitle: Sandboxing\n---\n",
    "concepts/02-credentials.md": "---\ntitle: Credentials\n---\n",
}


def test_build_valid_paths(content_root: Path) -> None:
    write_tree(content_root / "moat", STORE)
    assert build_valid_paths(content_root / "moat", "moat") == {
        "/moat/getting-started/introduction",
        "/moat/concepts/sandboxing",
        "/moat/concepts/credentials",
    }


def test_find_internal_links_reports_line_numbers() -> None:
    text = "intro\n[a](/moat/concepts/x) and [b](/moat/y \"Y\")\n\n```\n[c](/moat/z)\n```\n[ext](https://e.com)\n"
    refs = find_internal_links(text, "doc.md", "moat")
    assert [(r.line, r.link, r.target) for r in refs] == [
        (2, "[a](/moat/concepts/x)", "/moat/concepts/x"),
        (2, '[b](/moat/y "Y")', "/moat/y"),
    ]


def test_links_to_known_pages_are_clean(content_root: Path) -> None:
    store = dict(STORE)
    store["concepts/02-credentials.md"] += (
        "\nSee [sandboxing](/moat/concepts/sandboxing) and [intro](/moat/getting-started/introduction#setup).\n"
    )
    write_tree(content_root / "moat", store)

    valid, broken = find_broken_links(content_root, [MOAT])
    assert len(valid) == 3
    assert broken == []


def test_unknown_targets_are_reported(content_root: Path) -> None:
    store = dict(STORE)
    store["concepts/01-sandboxing.md"] += "\nok [x](/moat/concepts/credentials)\nbad [y](/moat/concepts/missing)\n"
    write_tree(content_root / "moat", store)

    _, broken = find_broken_links(content_root, [MOAT])

    assert len(broken) == 1
    ref = broken[0]
    assert ref.file == content_root / "moat" / "concepts" / "01-sandboxing.md"
    assert ref.line == 6
    assert ref.link == "[y](/moat/concepts/missing)"
    assert ref.target == "/moat/concepts/missing"


def test_synced_store_validates_clean(mirror: Path, content_root: Path) -> None:
    fetch_product_docs(MOAT, LocalMirrorSource(mirror), content_root)
    _, broken = find_broken_links(content_root, [MOAT])
    assert broken == []


def test_main_exit_codes(content_root: Path, capsys: pytest.CaptureFixture[str]) -> None:
    write_tree(content_root / "moat", STORE)
    assert main(["--content-root", str(content_root)]) == 0
    assert "All internal links are valid" in capsys.readouterr().out

    (content_root / "moat" / "concepts" / "01-sandboxing.md").write_text(
        "---\ntitle: Sandboxing\n---\n[gone](/moat/guides/gone)\n", encoding="utf-8"
    )
    assert main(["--content-root", str(content_root)]) == 1
    err = capsys.readouterr().err
    assert "Found 1 broken link(s)" in err
    assert "01-sandboxing.md:4" in err
    assert "Target: /moat/guides/gone (not found)" in err


def test_missing_product_directory_is_skipped(content_root: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["--content-root", str(content_root)]) == 0
    assert "no content for moat" in capsys.readouterr().out


def test_nested_same_directory_links_validate_after_sync(tmp_path: Path, content_root: Path) -> None:
    mirror = write_tree(
        tmp_path / "mirror",
        {
            "docs/content/guides/deep/01-a.md": "---\ntitle: A\n---\n\nNext: [b](./02-b.md)\n",
            "docs/content/guides/deep/02-b.md": "---\ntitle: B\n---\n\nBack: [a](01-a.md)\n",
        },
    )
    assert fetch_product_docs(MOAT, LocalMirrorSource(mirror), content_root) is True

    a = (content_root / "moat" / "guides" / "deep" / "01-a.md").read_text("utf-8")
    assert "[b](/moat/guides/b)" in a
    valid, broken = find_broken_links(content_root, [MOAT])
    assert valid == {"/moat/guides/a", "/moat/guides/b"}
    assert broken == []


def test_links_in_inline_code_are_not_checked() -> None:
    text = "Use `[x](/moat/nowhere)` as a template; see [`cfg`](/moat/guides/cfg).\n"
    refs = find_internal_links(text, "doc.md", "moat")
    assert [r.target for r in refs] == ["/moat/guides/cfg"]

from __future__ import annotations

import re

import markdown
import pytest

from docsite.fetch_docs import rewrite_markdown_links
from docsite.rewrite_links import RewriteLinksExtension

LINKS = [
    "./02-installation.md",
    "02-installation.md",
    "../concepts/01-sandboxing.md",
    "concepts/01-sandboxing.md",
    "../concepts/deep/03-x.md",
    "./sub/01-y.md",
    "01-a.md#usage",
    "https://example.com/a.md",
    "/moat/concepts/sandboxing",
]
DOCS = ["getting-started/01-introduction.md", "index.md"]


def render_href(link: str, doc_path: str) -> str:
    html = markdown.markdown(
        f"[t]({link})",
        extensions=[RewriteLinksExtension(product_id="moat", doc_path=doc_path)],
    )
    return re.search(r'href="([^"]+)"', html).group(1)


def sync_href(link: str, doc_path: str) -> str:
    out = rewrite_markdown_links(f"[t]({link})", doc_path, "moat")
    return re.search(r"\]\(([^)]+)\)", out).group(1)


@pytest.mark.parametrize("doc_path", DOCS)
@pytest.mark.parametrize("link", LINKS)
def test_render_and_sync_rewriters_agree(link: str, doc_path: str) -> None:
    assert render_href(link, doc_path) == sync_href(link, doc_path)


def test_render_rewriter_output() -> None:
    html = markdown.markdown(
        "Read [install](./02-installation.md) and [docs](https://example.com/).",
        extensions=[RewriteLinksExtension(product_id="moat", doc_path="getting-started/01-introduction.md")],
    )
    assert 'href="/moat/getting-started/installation"' in html
    assert 'href="https://example.com/"' in html


def test_render_rewriter_skips_code() -> None:
    html = markdown.markdown(
        "`[x](./01-a.md)`",
        extensions=[RewriteLinksExtension(product_id="moat", doc_path="guides/01-b.md")],
    )
    assert "href" not in html


def test_rewriters_agree_on_code_span_link_text() -> None:
    doc = "guides/01-b.md"
    text = "[`cfg`](./02-a.md)"
    html = markdown.markdown(text, extensions=[RewriteLinksExtension(product_id="moat", doc_path=doc)])
    assert 'href="/moat/guides/a"' in html
    assert rewrite_markdown_links(text, doc, "moat") == "[`cfg`](/moat/guides/a)"

# docsite/rewrite_links.py
"""
Python-Markdown extension that rewrites relative .md links while a synced
document is rendered:

    ./02-installation.md -> /moat/getting-started/installation

Uses the same canonicalization as the sync step, so a link gets the same
target whether it was rewritten at sync time or at render time.
"""

from markdown.extensions import Extension
from markdown.treeprocessors import Treeprocessor

from .utils import canonicalize_link, is_rewritable_link

class RewriteLinksTreeprocessor(Treeprocessor):
    def __init__(self, md, product_id: str, doc_path: str):
        super().__init__(md)
        self.product_id = product_id
        self.doc_path = doc_path

    def run(self, root):
        for el in root.iter("a"):
            href = el.get("href", "")
            if is_rewritable_link(href):
                el.set("href", canonicalize_link(href, self.doc_path, self.product_id))
        return None

class RewriteLinksExtension(Extension):
    def __init__(self, **kwargs):
        self.config = {
            "product_id": ["", "Site namespace prefix, e.g. 'moat'"],
            "doc_path": ["", "Path of the document being rendered, relative to the product root"],
        }
        super().__init__(**kwargs)

    def extendMarkdown(self, md):
        md.treeprocessors.register(
            RewriteLinksTreeprocessor(md, self.getConfig("product_id"), self.getConfig("doc_path")),
            "rewrite_links",
            # after inline parsing has produced the <a> elements
            5,
        )

def makeExtension(**kwargs):
    return RewriteLinksExtension(**kwargs)

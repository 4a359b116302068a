# docsite/validate_links.py
"""
Check that every internal link in the content store points at a page.

Valid pages come from where documents sit in the store
(src/content/moat/concepts/01-sandboxing.md -> /moat/concepts/sandboxing);
links are only recognised once they are in site-rooted form, i.e. after
fetch_docs has rewritten them.

Exit code 0 = all valid, 1 = broken links found.
"""

import os, re, sys, argparse
from pathlib import Path
from typing import NamedTuple

from .content import find_markdown_files
from .products import PRODUCTS
from .utils import code_span_ranges, is_fence_line, path_from_content_file, split_fragment

CONTENT_ROOT = os.environ.get("DOCS_CONTENT_ROOT", "src/content")

class LinkReference(NamedTuple):
    file: Path
    line: int
    link: str
    target: str

def build_valid_paths(product_root, product_id: str) -> set:
    product_root = Path(product_root)
    return {path_from_content_file(md, product_root, product_id) for md in find_markdown_files(product_root)}

def find_internal_links(text: str, file, product_id: str):
    """[text](/{product}/...) links with their 1-based line numbers, outside code fences and inline code."""
    pattern = re.compile(r"\[([^\]]+)\]\((/" + re.escape(product_id) + r"/[^)\s]+)[^)]*\)")
    results = []
    in_fence = False
    for i, line in enumerate(text.split("\n"), start=1):
        if is_fence_line(line):
            in_fence = not in_fence
            continue
        if in_fence:
            continue
        spans = code_span_ranges(line)
        for m in pattern.finditer(line):
            if any(start <= m.start(2) < end for start, end in spans):
                continue
            results.append(LinkReference(Path(file), i, m.group(0), m.group(2)))
    return results

def find_broken_links(content_root, products):
    """Returns (valid paths, broken LinkReferences) across the given products."""
    content_root = Path(content_root)
    valid_paths = set()
    broken = []
    for product in products:
        product_root = content_root / product["id"]
        if not product_root.is_dir():
            print(f"[validate] WARN no content for {product['id']} at {product_root}, skipping", flush=True)
            continue
        paths = build_valid_paths(product_root, product["id"])
        valid_paths |= paths
        for md in find_markdown_files(product_root):
            for ref in find_internal_links(md.read_text("utf-8"), md, product["id"]):
                target, _ = split_fragment(ref.target)
                if target not in paths:
                    broken.append(ref)
    return valid_paths, broken

def _display(path: Path) -> str:
    try:
        return str(path.resolve().relative_to(Path.cwd()))
    except ValueError:
        return str(path)

def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Validate internal links in the synced docs")
    ap.add_argument("--content-root", default=CONTENT_ROOT)
    args = ap.parse_args(argv)

    print("Validating internal markdown links...\n", flush=True)
    valid_paths, broken = find_broken_links(args.content_root, PRODUCTS.values())

    print(f"Found {len(valid_paths)} valid pages:\n")
    for p in sorted(valid_paths):
        print(f"  {p}")
    print(flush=True)

    if not broken:
        print("✓ All internal links are valid!")
        return 0

    print(f"✗ Found {len(broken)} broken link(s):\n", file=sys.stderr)
    for ref in broken:
        print(f"  {_display(ref.file)}:{ref.line}", file=sys.stderr)
        print(f"    Link: {ref.link}", file=sys.stderr)
        print(f"    Target: {ref.target} (not found)", file=sys.stderr)
        print(file=sys.stderr)
    return 1

if __name__ == "__main__":
    sys.exit(main())

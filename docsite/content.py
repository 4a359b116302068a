# docsite/content.py
from pathlib import Path
from typing import NamedTuple

import frontmatter
from slugify import slugify

from .errors import ContentError
from .products import default_description
from .utils import numeric_prefix, path_from_content_file, title_case

class DocumentRecord(NamedTuple):
    source_path: str      # relative to the product root
    local_path: Path
    text: str             # body, frontmatter removed
    frontmatter: dict
    canonical_path: str
    category: str
    number: str

def find_markdown_files(root):
    root = Path(root)
    if not root.is_dir():
        return []
    return sorted(p for p in root.rglob("*.md") if p.is_file())

def validate_frontmatter(meta: dict, product: dict, where: str) -> dict:
    """Apply the collection schema: title required, description/keywords defaulted."""
    title = str(meta.get("title") or "").strip()
    if not title:
        raise ContentError(f"{where}: title cannot be empty")
    keywords = meta.get("keywords") or []
    if isinstance(keywords, str):
        keywords = [keywords]
    out = dict(meta)
    out["title"] = title
    out["description"] = str(meta.get("description") or default_description(product))
    out["keywords"] = [str(k) for k in keywords]
    return out

def load_collection(content_root, product: dict):
    """All documents of one product, with validated frontmatter, in store order."""
    product_root = Path(content_root) / product["id"]
    records = []
    for md in find_markdown_files(product_root):
        post = frontmatter.load(md)
        rel = md.relative_to(product_root).as_posix()
        parts = rel.split("/")
        records.append(DocumentRecord(
            source_path=rel,
            local_path=md,
            text=post.content,
            frontmatter=validate_frontmatter(post.metadata, product, rel),
            canonical_path=path_from_content_file(md, product_root, product["id"]),
            category=parts[0] if len(parts) >= 2 else "",
            number=numeric_prefix(parts[-1]),
        ))
    return records

def build_navigation(records):
    """
    Sidebar sections, one per category, in the order documents are stored:

      [{"title": "Getting Started", "id": "getting-started",
        "items": [{"href": "/moat/getting-started/introduction", "number": "01", "label": "Introduction"}]}]
    """
    sections = []
    by_category = {}
    for rec in records:
        section = by_category.get(rec.category)
        if section is None:
            title = title_case(rec.category) if rec.category else "Overview"
            section = {"title": title, "id": slugify(title), "items": []}
            by_category[rec.category] = section
            sections.append(section)
        section["items"].append({
            "href": rec.canonical_path,
            "number": rec.number,
            "label": rec.frontmatter["title"],
        })
    return sections

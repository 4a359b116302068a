# docsite/utils.py
import re
from pathlib import Path, PurePosixPath

NUMERIC_PREFIX_RE = re.compile(r"^\d+-")
SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*:")
FENCE_RE = re.compile(r"^\s*(```|~~~)")
CODE_SPAN_RE = re.compile(r"(`+).+?\1")

# -------------------------
# Filename helpers
# -------------------------
def strip_numeric_prefix(name: str) -> str:
    """01-introduction -> introduction; names without a prefix are unchanged."""
    return NUMERIC_PREFIX_RE.sub("", name or "", count=1)

def slug_from_filename(filename: str) -> str:
    """
    Slug for a document filename: ordering prefix and .md extension removed.

      02-installation.md -> installation
      installation.md    -> installation
    """
    name = re.sub(r"\.md$", "", filename or "")
    return strip_numeric_prefix(name)

def numeric_prefix(filename: str) -> str:
    m = re.match(r"^(\d+)-", filename or "")
    return m.group(1) if m else ""

def title_case(name: str) -> str:
    """getting-started / getting_started -> Getting Started"""
    words = re.split(r"[-_]", name or "")
    return " ".join(w[:1].upper() + w[1:] for w in words)

def title_from_filename(filename: str) -> str:
    return title_case(slug_from_filename(PurePosixPath(filename).name))

# -------------------------
# Canonical site paths
# -------------------------
def canonical_path(product_id: str, category: str, slug: str) -> str:
    """/{product}/{category}/{slug}, skipping empty segments."""
    parts = [p.strip("/") for p in (product_id, category, slug)]
    return "/" + "/".join(p for p in parts if p)

def split_fragment(url: str):
    path, sep, fragment = (url or "").partition("#")
    return path, (sep + fragment) if sep else ""

def is_rewritable_link(url: str) -> bool:
    """Relative .md references only; absolute URLs and site-rooted paths pass through."""
    url = (url or "").strip()
    if not url or url.startswith(("/", "#")) or SCHEME_RE.match(url):
        return False
    path, _ = split_fragment(url)
    return path.endswith(".md")

def canonicalize_link(raw_link: str, referencing_doc_path: str, product_id: str) -> str:
    """
    Map a relative .md link to the canonical site path it should resolve to.

    Rules, by shape of the link:
      ../concepts/01-sandboxing.md  -> /{product}/concepts/sandboxing
      concepts/01-sandboxing.md     -> /{product}/concepts/sandboxing
      ./02-installation.md          -> /{product}/{referencing doc's directory}/installation

    Never raises: odd input produces a best-effort path, which the link
    validator reports if it does not exist.
    """
    path, fragment = split_fragment((raw_link or "").strip())

    if path.startswith("../"):
        while path.startswith("../"):
            path = path[3:]
        parts = [p for p in path.split("/") if p and p != "."]
        category = parts[0] if len(parts) >= 2 else ""
        filename = parts[-1] if parts else ""
        return canonical_path(product_id, category, slug_from_filename(filename)) + fragment

    while path.startswith("./"):
        path = path[2:]

    if "/" in path:
        parts = [p for p in path.split("/") if p]
        category = parts[0] if len(parts) >= 2 else ""
        filename = parts[-1] if parts else ""
        return canonical_path(product_id, category, slug_from_filename(filename)) + fragment

    return canonical_path(product_id, doc_category(referencing_doc_path, product_id), slug_from_filename(path)) + fragment

def doc_category(doc_path: str, product_id: str) -> str:
    """
    Top-level directory of a document under its product root:

      guides/deep/01-a.md                          -> guides
      src/content/moat/getting-started/01-intro.md -> getting-started
      index.md                                     -> ""
    """
    path = (doc_path or "").replace("\\", "/")
    marker = f"/{product_id}/"
    if marker in path:
        path = path.split(marker, 1)[1]
    parts = [p for p in path.split("/") if p and p != "."]
    return parts[0] if len(parts) >= 2 else ""

def path_from_content_file(file_path, product_root, product_id: str) -> str:
    """
    Canonical path of a stored document, derived from where it sits:

      <product_root>/concepts/01-sandboxing.md -> /{product}/concepts/sandboxing
      <product_root>/index.md                  -> /{product}/index
    """
    rel = Path(file_path).relative_to(product_root).as_posix()
    parts = rel.split("/")
    category = parts[0] if len(parts) >= 2 else ""
    return canonical_path(product_id, category, slug_from_filename(parts[-1]))

def is_fence_line(line: str) -> bool:
    return bool(FENCE_RE.match(line))

def code_span_ranges(line: str):
    return [m.span() for m in CODE_SPAN_RE.finditer(line)]

def split_code_spans(line: str):
    """[(text, is_code), ...] so callers can leave `inline code` untouched."""
    pieces = []
    pos = 0
    for start, end in code_span_ranges(line):
        pieces.append((line[pos:start], False))
        pieces.append((line[start:end], True))
        pos = end
    pieces.append((line[pos:], False))
    return pieces

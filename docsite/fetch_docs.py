# docsite/fetch_docs.py
import os, re, sys, shutil, tempfile, argparse
from pathlib import Path, PurePosixPath

import frontmatter

from .errors import ContentError, DocsiteError
from .products import PRODUCTS, get_product
from .remote import make_source
from .utils import (
    canonicalize_link, is_rewritable_link, is_fence_line, canonical_path,
    slug_from_filename, split_code_spans, title_from_filename,
)

def log(*args): print("[fetch-docs]", *args, flush=True)
def warn(*args): print("[fetch-docs] WARN", *args, flush=True)
def error(*args): print("[fetch-docs] ERROR", *args, file=sys.stderr, flush=True)

# ----- ENV -------------------------------------------------------------------
CONTENT_ROOT = os.environ.get("DOCS_CONTENT_ROOT", "src/content")
DOCS_SOURCE  = os.environ.get("DOCS_SOURCE", "gh")
DOCS_MIRROR  = os.environ.get("DOCS_MIRROR", "").strip()

# ](target) or ](target "title")
LINK_TARGET_RE = re.compile(r'\]\(\s*([^)\s]+)(\s+"[^"]*")?\s*\)')

# ----- Link rewriting --------------------------------------------------------
def rewrite_markdown_links(text: str, doc_path: str, product_id: str) -> str:
    """
    Rewrite relative .md links to canonical site paths.
    doc_path is the document's path relative to the docs root.
    Fenced code blocks and inline code spans are left as written.
    """
    def _sub(m):
        target = m.group(1)
        if not is_rewritable_link(target):
            return m.group(0)
        return f"]({canonicalize_link(target, doc_path, product_id)}{m.group(2) or ''})"

    out = []
    in_fence = False
    for line in text.splitlines(keepends=True):
        if is_fence_line(line):
            in_fence = not in_fence
            out.append(line)
            continue
        if in_fence:
            out.append(line)
            continue
        out.append("".join(
            piece if is_code else LINK_TARGET_RE.sub(_sub, piece)
            for piece, is_code in split_code_spans(line)
        ))
    return "".join(out)

# ----- Per-file normalization ------------------------------------------------
def normalize_document(raw: bytes, doc_path: str, product_id: str) -> str:
    if b"\0" in raw:
        raise ContentError(f"File {doc_path} appears to be binary, not markdown")
    try:
        content = raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ContentError(f"File {doc_path} is not valid UTF-8: {e}") from e

    if not content.strip().startswith("---"):
        warn(f"{doc_path} missing frontmatter, adding default")
        post = frontmatter.Post(content, title=title_from_filename(doc_path))
        content = frontmatter.dumps(post) + "\n"

    return rewrite_markdown_links(content, doc_path, product_id)

# ----- Tree sync -------------------------------------------------------------
def sync_directory(source, repo: str, remote_root: str, local_dir, product_id: str):
    """
    Mirror remote_root into local_dir, depth first, one fetch at a time.
    Returns the written paths. Raises ContentError if two files would be
    served at the same canonical path.
    """
    local_dir = Path(local_dir)
    root = PurePosixPath(remote_root.strip("/"))
    seen = {}
    written = []

    stack = [(remote_root, local_dir)]
    while stack:
        remote_path, local_path = stack.pop()
        log(f"Syncing {remote_path}...")
        entries = source.list_dir(repo, remote_path)
        subdirs = []
        for item in entries:
            item_local = local_path / item.name
            if item.kind == "dir":
                subdirs.append((item.path, item_local))
                continue

            try:
                rel = PurePosixPath(item.path).relative_to(root).as_posix() if str(root) != "." else item.path
            except ValueError as e:
                raise ContentError(f"{item.path} is outside the docs root {remote_root}") from e
            parts = rel.split("/")
            key = canonical_path(product_id, parts[0] if len(parts) >= 2 else "", slug_from_filename(parts[-1]))
            if key in seen:
                raise ContentError(f"{item.path} and {seen[key]} both map to {key}")
            seen[key] = item.path

            log(f"  Downloading {item.name}...")
            content = normalize_document(source.read_file(repo, item.path), rel, product_id)
            item_local.parent.mkdir(parents=True, exist_ok=True)
            item_local.write_text(content, encoding="utf-8")
            written.append(item_local)
        # reversed so the first listed directory is visited first
        stack.extend(reversed(subdirs))
    return written

def has_content(path: Path) -> bool:
    return path.is_dir() and any(path.iterdir())

def fetch_product_docs(product: dict, source, content_root=CONTENT_ROOT) -> bool:
    """
    Sync one product into <content_root>/<id>. Returns True when fresh content
    was written, False when the run failed and earlier content was kept.
    Raises when the run failed and there is nothing to fall back to.
    """
    content_root = Path(content_root)
    output_dir = content_root / product["id"]

    log(f"Fetching {product['name']} documentation...")
    log(f"  Repo: {product['docs_repo']}")
    log(f"  Path: {product['docs_path']}")
    log(f"  Output: {output_dir}")

    content_root.mkdir(parents=True, exist_ok=True)
    staging = Path(tempfile.mkdtemp(prefix=f".{product['id']}-", dir=content_root))
    try:
        written = sync_directory(source, product["docs_repo"], product["docs_path"], staging, product["id"])
    except Exception as e:
        shutil.rmtree(staging, ignore_errors=True)
        error(f"✗ Error fetching {product['name']} documentation: {e}")
        if has_content(output_dir):
            warn(f"⚠ Using cached {product['name']} documentation from previous build")
            return False
        error(f"✗ No cached content available for {product['name']}, build cannot continue")
        raise

    if output_dir.exists():
        shutil.rmtree(output_dir)
    # mkdtemp creates 0700; the store is read by the site build
    staging.chmod(0o755)
    staging.rename(output_dir)
    log(f"✓ {product['name']} documentation synced successfully! ({len(written)} files)")
    return True

# ----- Main ------------------------------------------------------------------
def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Mirror product documentation into the content store")
    ap.add_argument("product", nargs="?", help="Product id (default: all products)")
    ap.add_argument("--source", default=DOCS_SOURCE, choices=["gh", "api", "local"])
    ap.add_argument("--mirror", default=DOCS_MIRROR or None, help="Docs checkout for --source local")
    ap.add_argument("--content-root", default=CONTENT_ROOT)
    args = ap.parse_args(argv)

    try:
        products = [get_product(args.product)] if args.product else list(PRODUCTS.values())
        source = make_source(args.source, args.mirror)
        if not args.product:
            log("Fetching documentation for all products...")
        for product in products:
            fetch_product_docs(product, source, args.content_root)
    except (DocsiteError, OSError) as e:
        error(f"Error fetching documentation: {e}")
        return 1

    if not args.product:
        log("✓ All documentation synced successfully!")
    return 0

if __name__ == "__main__":
    sys.exit(main())

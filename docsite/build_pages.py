# docsite/build_pages.py
import os, sys, argparse
from pathlib import Path

import jinja2
import markdown

from .content import build_navigation, load_collection
from .errors import DocsiteError
from .products import PRODUCTS, get_product
from .rewrite_links import RewriteLinksExtension

def log(*args): print("[build]", *args, flush=True)

CONTENT_ROOT = os.environ.get("DOCS_CONTENT_ROOT", "src/content")
SITE_ROOT    = os.environ.get("DOCS_SITE_ROOT", "dist")

PAGE_TEMPLATE = """<!doctype html>
<html lang="en">
<meta charset="utf-8">
<meta name="viewport" content="width=device-width,initial-scale=1">
<meta name="description" content="{{ description }}">
{% if keywords %}<meta name="keywords" content="{{ keywords|join(', ') }}">{% endif %}
<link rel="canonical" href="{{ canonical_path }}">
<title>{{ title }} — {{ product.display_name }}</title>
<style>
  body{font-family:ui-sans-serif, system-ui, sans-serif; margin:0; display:flex; line-height:1.6;}
  nav{width:16rem; padding:24px; border-right:1px solid #ddd;}
  nav h2{font-size:.8rem; text-transform:uppercase; margin:16px 0 4px;}
  nav ol{list-style:none; padding:0; margin:0;}
  nav .num{opacity:.6; margin-right:.5em; font-family:ui-monospace, monospace;}
  nav a.current{font-weight:600;}
  main{max-width:48rem; padding:24px 40px;}
</style>
<nav>
  <a href="/{{ product.id }}"><strong>{{ product.display_name }}</strong></a>
  {% for section in navigation %}
  <h2 id="nav-{{ section.id }}">{{ section.title }}</h2>
  <ol>
    {% for item in section["items"] %}
    <li><a href="{{ item.href }}"{% if item.href == canonical_path %} class="current"{% endif %}>{% if item.number %}<span class="num">{{ item.number }}</span>{% endif %}{{ item.label }}</a></li>
    {% endfor %}
  </ol>
  {% endfor %}
</nav>
<main>
<h1>{{ title }}</h1>
{{ body_html|safe }}
</main>
</html>
"""

def render_markdown(text: str, product_id: str, doc_path: str) -> str:
    md = markdown.Markdown(extensions=[
        "extra",
        "toc",
        RewriteLinksExtension(product_id=product_id, doc_path=doc_path),
    ])
    return md.convert(text)

def build_product_site(content_root, site_root, product: dict):
    """Render every document of a product to <site_root><canonical_path>/index.html."""
    records = load_collection(content_root, product)
    navigation = build_navigation(records)
    template = jinja2.Environment(autoescape=True).from_string(PAGE_TEMPLATE)

    written = []
    for rec in records:
        html = template.render(
            product=product,
            navigation=navigation,
            canonical_path=rec.canonical_path,
            title=rec.frontmatter["title"],
            description=rec.frontmatter["description"],
            keywords=rec.frontmatter["keywords"],
            body_html=render_markdown(rec.text, product["id"], rec.source_path),
        )
        out = Path(site_root) / rec.canonical_path.strip("/") / "index.html"
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(html, encoding="utf-8")
        written.append(out)
    log(f"{product['name']}: wrote {len(written)} page(s) to {site_root}")
    return written

def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Render the synced content store to HTML")
    ap.add_argument("product", nargs="?", help="Product id (default: all products)")
    ap.add_argument("--content-root", default=CONTENT_ROOT)
    ap.add_argument("--site-root", default=SITE_ROOT)
    args = ap.parse_args(argv)

    try:
        products = [get_product(args.product)] if args.product else list(PRODUCTS.values())
        for product in products:
            build_product_site(args.content_root, args.site_root, product)
    except (DocsiteError, OSError) as e:
        print(f"[build] ERROR {e}", file=sys.stderr, flush=True)
        return 1
    return 0

if __name__ == "__main__":
    sys.exit(main())

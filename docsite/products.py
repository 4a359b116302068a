# docsite/products.py
from .errors import UnknownProductError

# Products whose docs are mirrored into the site. docs_repo/docs_path point at
# the markdown tree in the product's own repository.
PRODUCTS = {
    "moat": {
        "id": "moat",
        "name": "Moat",
        "display_name": "MOAT",
        "tagline": "Let agents break things safely",
        "github_url": "https://github.com/majorcontext/moat",
        "color": "sky",
        "docs_repo": "majorcontext/moat",
        "docs_path": "docs/content",
    },
}

def get_product(product_id: str) -> dict:
    product = PRODUCTS.get(product_id)
    if not product:
        raise UnknownProductError(
            f'Product "{product_id}" not found\n'
            f"Available products: {', '.join(sorted(PRODUCTS))}"
        )
    return product

def default_description(product: dict) -> str:
    return f"{product['name']} documentation"

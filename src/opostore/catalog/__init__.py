"""Product catalog lookups for item pages."""

from opostore.catalog.client import CatalogClient
from opostore.catalog.pages import ItemPageLoader, ItemPageResult
from opostore.catalog.products import build_product, collect_images, slug_search_terms, slugify
from opostore.catalog.transport import CatalogTransport, RestTransport

__all__ = [
    "CatalogClient",
    "CatalogTransport",
    "ItemPageLoader",
    "ItemPageResult",
    "RestTransport",
    "build_product",
    "collect_images",
    "slug_search_terms",
    "slugify",
]

"""
Catalog package for the storefront.

The store keeps the whole catalog (categories and products) in a single
JSON document. ``mutate`` holds the admin operations that change it,
``public`` the read-only view the site renders, and ``router`` exposes
that view over HTTP.
"""

from .mutate import create_category, create_product, delete_category, delete_product  # noqa: F401
from .public import get_public_catalog  # noqa: F401
from .router import router as catalog_router  # noqa: F401
from .store import CatalogStore  # noqa: F401

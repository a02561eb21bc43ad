"""Catalogue API package."""

from marketplace.catalogue.api.routes import (
    admin_product_router,
    category_router,
    product_router,
    vendor_product_router,
)

__all__ = ["category_router", "product_router", "vendor_product_router", "admin_product_router"]

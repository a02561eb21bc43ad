"""Ordering API package."""

from marketplace.ordering.api.routes import admin_order_router, cart_router, order_router, vendor_order_router

__all__ = ["cart_router", "order_router", "vendor_order_router", "admin_order_router"]

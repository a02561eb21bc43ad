"""Accounts API package."""

from marketplace.accounts.api.routes import address_router, admin_user_router, auth_router, user_router

__all__ = ["auth_router", "user_router", "address_router", "admin_user_router"]

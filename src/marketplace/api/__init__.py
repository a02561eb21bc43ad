"""HTTP surface of the marketplace."""

from marketplace.api.app import create_app

__all__ = ["create_app"]

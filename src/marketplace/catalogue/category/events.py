"""Domain events for the Category aggregate."""

from protean.fields import Identifier, String

from marketplace.domain import marketplace


@marketplace.event(part_of="Category")
class CategoryCreated:
    """A new category became available for products."""

    __version__ = 1

    category_id: Identifier(required=True)
    name: String(required=True, sanitize=False)
    slug: String(required=True)

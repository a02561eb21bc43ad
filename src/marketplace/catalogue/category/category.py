"""Category aggregate root for grouping products."""

import re
from datetime import datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, String

from marketplace.catalogue.category.events import CategoryCreated
from marketplace.domain import marketplace

_SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")


def slugify(text):
    """Lower-case, hyphen-separated form of ``text`` suitable for URLs."""
    return re.sub(r"[^a-z0-9]+", "-", (text or "").lower()).strip("-")


@marketplace.aggregate
class Category:
    """A flat grouping that products may belong to, addressed by slug in URLs."""

    name: String(required=True, max_length=100, sanitize=False)
    slug: String(required=True, max_length=120, unique=True)
    icon: String(max_length=100)
    created_at: DateTime(default=datetime.now)

    @invariant.post
    def slug_must_be_url_safe(self):
        if not _SLUG_PATTERN.match(self.slug or ""):
            raise ValidationError({"slug": ["Slug must contain only lowercase alphanumeric characters and hyphens"]})

    @classmethod
    def create(cls, name, slug=None, icon=None):
        category = cls(
            name=name,
            slug=slug or slugify(name),
            icon=icon,
            created_at=datetime.now(),
        )
        category.raise_(
            CategoryCreated(
                category_id=category.id,
                name=category.name,
                slug=category.slug,
            )
        )
        return category

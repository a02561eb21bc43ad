"""Tests for the Category aggregate and slug helper."""

import pytest
from protean.exceptions import ValidationError

from marketplace.catalogue.category.category import Category, slugify
from marketplace.catalogue.category.events import CategoryCreated


@pytest.mark.parametrize(
    "name, slug",
    [
        ("Home & Garden", "home-garden"),
        ("  Books  ", "books"),
        ("Kids' Toys 2024", "kids-toys-2024"),
    ],
)
def test_slugify(name, slug):
    assert slugify(name) == slug


def test_create_derives_slug():
    category = Category.create(name="Home & Garden", icon="sprout")
    assert category.slug == "home-garden"
    assert category.icon == "sprout"


def test_create_raises_event():
    category = Category.create(name="Books")
    assert isinstance(category._events[0], CategoryCreated)
    assert category._events[0].slug == "books"


def test_explicit_slug_must_be_url_safe():
    with pytest.raises(ValidationError) as exc:
        Category.create(name="Books", slug="Bad Slug!")
    assert "slug" in exc.value.messages

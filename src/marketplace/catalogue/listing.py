"""Catalogue reads: product listings enriched with category and vendor summaries.

Every call re-queries the repositories. There is no pagination, so listings
are capped only by ``QUERY_LIMIT``.
"""

import json
import os

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from marketplace.accounts.user import User
from marketplace.catalogue.category.category import Category
from marketplace.catalogue.product.product import Product
from marketplace.domain import QUERY_LIMIT

FEATURED_PRODUCT_LIMIT = int(os.environ.get("FEATURED_PRODUCT_LIMIT", "8"))


def category_summary(category):
    if category is None:
        return None
    return {
        "id": str(category.id),
        "name": category.name,
        "slug": category.slug,
        "icon": category.icon,
    }


def vendor_summary(user):
    if user is None:
        return None
    return {
        "id": str(user.id),
        "first_name": user.first_name,
        "last_name": user.last_name,
        "profile_image_url": user.profile_image_url,
    }


def _get_or_none(aggregate_cls, identifier):
    if not identifier:
        return None
    try:
        return current_domain.repository_for(aggregate_cls).get(identifier)
    except ObjectNotFoundError:
        return None


def product_details(product, category=None, vendor=None):
    """Flatten a product and its summaries into a response-ready dict."""
    return {
        "id": str(product.id),
        "name": product.name,
        "description": product.description,
        "price": product.price,
        "sale_price": product.sale_price,
        "effective_price": product.effective_price,
        "image_url": product.image_url,
        "image_urls": json.loads(product.image_urls) if product.image_urls else [],
        "stock": product.stock,
        "category_id": str(product.category_id) if product.category_id else None,
        "vendor_id": str(product.vendor_id),
        "is_featured": bool(product.is_featured),
        "is_active": bool(product.is_active),
        "rating": product.rating,
        "review_count": product.review_count,
        "created_at": product.created_at,
        "updated_at": product.updated_at,
        "category": category_summary(category),
        "vendor": vendor_summary(vendor),
    }


def _with_details(products):
    categories = {}
    vendors = {}
    details = []
    for product in products:
        category_id = str(product.category_id) if product.category_id else None
        if category_id not in categories:
            categories[category_id] = _get_or_none(Category, category_id)
        vendor_id = str(product.vendor_id)
        if vendor_id not in vendors:
            vendors[vendor_id] = _get_or_none(User, vendor_id)
        details.append(product_details(product, categories[category_id], vendors[vendor_id]))
    return details


def resolve_category_id(category):
    """Accept a category id or slug; return the id, or None if nothing matches."""
    if not category:
        return None
    found = _get_or_none(Category, category)
    if found is None:
        matches = current_domain.repository_for(Category)._dao.query.filter(slug=category).all().items
        found = matches[0] if matches else None
    return str(found.id) if found else None


def _matches_search(product, needle):
    haystacks = (product.name or "", product.description or "")
    return any(needle in text.casefold() for text in haystacks)


def find_products(category=None, vendor_id=None, search=None, include_inactive=False):
    """Products matching the filters, newest first, without details."""
    criteria = {}
    if not include_inactive:
        criteria["is_active"] = True
    if vendor_id:
        criteria["vendor_id"] = vendor_id
    if category:
        category_id = resolve_category_id(category)
        if category_id is None:
            return []
        criteria["category_id"] = category_id

    query = current_domain.repository_for(Product)._dao.query
    if criteria:
        query = query.filter(**criteria)
    products = query.order_by("-created_at").limit(QUERY_LIMIT).all().items

    if search:
        needle = search.strip().casefold()
        products = [p for p in products if _matches_search(p, needle)]
    return products


def list_products(category=None, vendor_id=None, search=None, include_inactive=False):
    return _with_details(
        find_products(
            category=category,
            vendor_id=vendor_id,
            search=search,
            include_inactive=include_inactive,
        )
    )


def list_featured(limit=None):
    """Active products, featured first, then by rating and review count."""
    products = find_products()
    products.sort(
        key=lambda p: (bool(p.is_featured), p.rating or 0.0, p.review_count or 0),
        reverse=True,
    )
    return _with_details(products[: limit or FEATURED_PRODUCT_LIMIT])


def get_product(product_id):
    """A single product with details. Inactive products are still returned."""
    product = current_domain.repository_for(Product).get(product_id)
    return _with_details([product])[0]

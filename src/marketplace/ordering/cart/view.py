"""Cart reads: lines joined to their products, with totals derived on every read."""

from datetime import datetime

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from marketplace.catalogue.category.category import Category
from marketplace.catalogue.listing import product_details
from marketplace.catalogue.product.product import Product
from marketplace.ordering.cart.cart import Cart


def cart_lines(user_id):
    """The user's cart lines, oldest first, each with its product and category."""
    try:
        cart = current_domain.repository_for(Cart).get(user_id)
    except ObjectNotFoundError:
        return []

    product_repo = current_domain.repository_for(Product)
    category_repo = current_domain.repository_for(Category)

    lines = []
    for item in sorted(cart.items, key=lambda i: i.added_at or datetime.min):
        product = product_repo.get(item.product_id)
        category = None
        if product.category_id:
            try:
                category = category_repo.get(product.category_id)
            except ObjectNotFoundError:
                category = None
        lines.append(
            {
                "id": str(item.id),
                "product_id": str(item.product_id),
                "quantity": item.quantity,
                "added_at": item.added_at,
                "product": product_details(product, category=category),
            }
        )
    return lines


def cart_summary(user_id):
    """Lines plus subtotal (quantity x effective price) and item count."""
    lines = cart_lines(user_id)
    subtotal = sum(line["quantity"] * line["product"]["effective_price"] for line in lines)
    return {
        "items": lines,
        "subtotal": round(subtotal, 2),
        "item_count": sum(line["quantity"] for line in lines),
    }

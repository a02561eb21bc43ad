"""Product edits by the owning vendor — command and handler."""

import json

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, Text
from protean.utils.globals import current_domain

from marketplace.catalogue.product.creation import ensure_category_exists
from marketplace.catalogue.product.product import Product
from marketplace.domain import marketplace
from marketplace.errors import AuthorizationError


def load_owned_product(product_id, vendor_id):
    """Fetch a product, refusing callers other than its vendor."""
    product = current_domain.repository_for(Product).get(product_id)
    if str(product.vendor_id) != str(vendor_id):
        raise AuthorizationError("Products can only be changed by the vendor that owns them")
    return product


@marketplace.command(part_of="Product")
class UpdateProduct:
    product_id: Identifier(required=True)
    vendor_id: Identifier(required=True)
    changes: Text(required=True, sanitize=False)  # JSON object of field -> new value


@marketplace.command_handler(part_of=Product)
class UpdateProductHandler:
    @handle(UpdateProduct)
    def update_product(self, command):
        changes = json.loads(command.changes) if isinstance(command.changes, str) else command.changes
        if not isinstance(changes, dict):
            raise ValidationError({"changes": ["Changes must be a JSON object"]})

        product = load_owned_product(command.product_id, command.vendor_id)
        if "category_id" in changes:
            ensure_category_exists(changes["category_id"])

        product.update_details(**changes)
        current_domain.repository_for(Product).add(product)

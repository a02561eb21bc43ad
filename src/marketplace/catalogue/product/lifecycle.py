"""Product withdrawal and admin visibility toggle — commands and handler."""

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from marketplace.catalogue.product.details import load_owned_product
from marketplace.catalogue.product.product import Product
from marketplace.domain import marketplace


@marketplace.command(part_of="Product")
class DeactivateProduct:
    """Soft delete by the owning vendor."""

    product_id: Identifier(required=True)
    vendor_id: Identifier(required=True)


@marketplace.command(part_of="Product")
class ToggleProductActive:
    """Administrative flip of the active flag, regardless of owner."""

    product_id: Identifier(required=True)


@marketplace.command_handler(part_of=Product)
class ManageLifecycleHandler:
    @handle(DeactivateProduct)
    def deactivate_product(self, command):
        product = load_owned_product(command.product_id, command.vendor_id)
        product.deactivate()
        current_domain.repository_for(Product).add(product)

    @handle(ToggleProductActive)
    def toggle_product_active(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        if product.is_active:
            product.deactivate()
        else:
            product.activate()
        repo.add(product)
        return product.is_active

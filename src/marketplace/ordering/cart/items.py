"""Cart item management — commands and handler.

Every command is addressed by the caller's user id, so a line id belonging to
someone else's cart is simply not found.
"""

from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from marketplace.catalogue.product.product import Product
from marketplace.domain import marketplace
from marketplace.ordering.cart.cart import Cart


def load_cart(user_id):
    """The user's cart, or a fresh unsaved one if they never had one."""
    try:
        return current_domain.repository_for(Cart).get(user_id)
    except ObjectNotFoundError:
        return Cart.create(user_id=user_id)


@marketplace.command(part_of="Cart")
class AddToCart:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(default=1, min_value=1)


@marketplace.command(part_of="Cart")
class UpdateCartQuantity:
    user_id = Identifier(required=True)
    item_id = Identifier(required=True)
    quantity = Integer(required=True)


@marketplace.command(part_of="Cart")
class RemoveFromCart:
    user_id = Identifier(required=True)
    item_id = Identifier(required=True)


@marketplace.command(part_of="Cart")
class ClearCart:
    user_id = Identifier(required=True)


@marketplace.command_handler(part_of=Cart)
class ManageCartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        product = current_domain.repository_for(Product).get(command.product_id)
        if not product.is_active:
            raise ValidationError({"product_id": ["Product is no longer available"]})

        cart = load_cart(command.user_id)
        item = cart.add_item(product_id=command.product_id, quantity=command.quantity or 1)
        current_domain.repository_for(Cart).add(cart)
        return str(item.id)

    @handle(UpdateCartQuantity)
    def update_cart_quantity(self, command):
        repo = current_domain.repository_for(Cart)
        cart = load_cart(command.user_id)
        cart.set_quantity(item_id=command.item_id, quantity=command.quantity)
        repo.add(cart)

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        repo = current_domain.repository_for(Cart)
        cart = load_cart(command.user_id)
        cart.remove_item(item_id=command.item_id)
        repo.add(cart)

    @handle(ClearCart)
    def clear_cart(self, command):
        repo = current_domain.repository_for(Cart)
        cart = load_cart(command.user_id)
        if not cart.items:
            return
        cart.clear()
        repo.add(cart)

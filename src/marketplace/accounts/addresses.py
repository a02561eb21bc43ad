"""Address book management — commands and handler."""

from protean import handle
from protean.fields import Boolean, Identifier, String
from protean.utils.globals import current_domain

from marketplace.accounts.user import User
from marketplace.domain import marketplace

_ADDRESS_FIELDS = ("label", "street", "city", "state", "postal_code", "country")


@marketplace.command(part_of="User")
class AddAddress:
    user_id: Identifier(required=True)
    label: String(max_length=50, sanitize=False)
    street: String(required=True, max_length=255, sanitize=False)
    city: String(required=True, max_length=100, sanitize=False)
    state: String(max_length=100, sanitize=False)
    postal_code: String(required=True, max_length=20, sanitize=False)
    country: String(required=True, max_length=100, sanitize=False)
    is_default: Boolean(default=False)


@marketplace.command(part_of="User")
class UpdateAddress:
    user_id: Identifier(required=True)
    address_id: Identifier(required=True)
    label: String(max_length=50, sanitize=False)
    street: String(max_length=255, sanitize=False)
    city: String(max_length=100, sanitize=False)
    state: String(max_length=100, sanitize=False)
    postal_code: String(max_length=20, sanitize=False)
    country: String(max_length=100, sanitize=False)
    is_default: Boolean()


@marketplace.command(part_of="User")
class RemoveAddress:
    user_id: Identifier(required=True)
    address_id: Identifier(required=True)


@marketplace.command(part_of="User")
class SetDefaultAddress:
    user_id: Identifier(required=True)
    address_id: Identifier(required=True)


@marketplace.command_handler(part_of=User)
class ManageAddressesHandler:
    @handle(AddAddress)
    def add_address(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)
        address = user.add_address(
            street=command.street,
            city=command.city,
            postal_code=command.postal_code,
            country=command.country,
            label=command.label,
            state=command.state,
            is_default=bool(command.is_default),
        )
        repo.add(user)
        return str(address.id)

    @handle(UpdateAddress)
    def update_address(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)

        updates = {}
        for field in _ADDRESS_FIELDS:
            value = getattr(command, field, None)
            if value is not None:
                updates[field] = value
        if command.is_default:
            updates["is_default"] = True

        user.update_address(command.address_id, **updates)
        repo.add(user)

    @handle(RemoveAddress)
    def remove_address(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)
        user.remove_address(command.address_id)
        repo.add(user)

    @handle(SetDefaultAddress)
    def set_default_address(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)
        user.set_default_address(command.address_id)
        repo.add(user)


def list_addresses(user_id):
    """The user's addresses, default first."""
    user = current_domain.repository_for(User).get(user_id)
    return user.sorted_addresses

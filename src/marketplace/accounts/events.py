"""Domain events for the User aggregate."""

from protean.fields import Boolean, DateTime, Identifier, String

from marketplace.domain import marketplace


@marketplace.event(part_of="User")
class UserRegistered:
    """A new account was created, locally or from an external identity."""

    __version__ = 1

    user_id: Identifier(required=True)
    email: String(required=True)
    first_name: String(sanitize=False)
    last_name: String(sanitize=False)
    oauth_provider: String()
    registered_at: DateTime(required=True)


@marketplace.event(part_of="User")
class ProfileUpdated:
    """A user's display details were changed."""

    __version__ = 1

    user_id: Identifier(required=True)
    first_name: String(sanitize=False)
    last_name: String(sanitize=False)
    profile_image_url: String(sanitize=False)


@marketplace.event(part_of="User")
class UserRolesChanged:
    """Vendor/admin flags or the email verification flag were changed."""

    __version__ = 1

    user_id: Identifier(required=True)
    is_vendor: Boolean(required=True)
    is_admin: Boolean(required=True)
    email_verified: Boolean(required=True)


@marketplace.event(part_of="User")
class AddressAdded:
    """A new address was added to a user's address book."""

    __version__ = 1

    user_id: Identifier(required=True)
    address_id: Identifier(required=True)
    label: String(sanitize=False)
    street: String(required=True, sanitize=False)
    city: String(required=True, sanitize=False)
    state: String(sanitize=False)
    postal_code: String(required=True, sanitize=False)
    country: String(required=True, sanitize=False)
    is_default: Boolean(required=True)


@marketplace.event(part_of="User")
class AddressUpdated:
    """An existing address was modified."""

    __version__ = 1

    user_id: Identifier(required=True)
    address_id: Identifier(required=True)
    label: String(sanitize=False)
    street: String(sanitize=False)
    city: String(sanitize=False)
    state: String(sanitize=False)
    postal_code: String(sanitize=False)
    country: String(sanitize=False)


@marketplace.event(part_of="User")
class AddressRemoved:
    __version__ = 1

    user_id: Identifier(required=True)
    address_id: Identifier(required=True)


@marketplace.event(part_of="User")
class DefaultAddressChanged:
    __version__ = 1

    user_id: Identifier(required=True)
    address_id: Identifier(required=True)
    previous_default_address_id: Identifier()

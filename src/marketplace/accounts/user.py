"""User aggregate root with the Address entity."""

from datetime import datetime

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, HasMany, String

from marketplace.accounts.events import (
    AddressAdded,
    AddressRemoved,
    AddressUpdated,
    DefaultAddressChanged,
    ProfileUpdated,
    UserRegistered,
    UserRolesChanged,
)
from marketplace.domain import marketplace

_FORBIDDEN_EMAIL_CHARS = (" ", "\t", "\n", ";", ",", "(", ")", '"', ":", "<", ">", "[", "]", "\\")

# Sentinel for distinguishing "not provided" from None in partial updates
_UNSET = object()


def normalize_email(email):
    return email.strip().lower() if email else email


def is_well_formed_email(email):
    """Structural check: one @, non-empty local and dotted domain parts, no stray characters."""
    if not email or any(ch in email for ch in _FORBIDDEN_EMAIL_CHARS):
        return False
    if email.count("@") != 1:
        return False

    local_part, domain_part = email.split("@", 1)
    if not local_part or local_part.startswith(".") or local_part.endswith("."):
        return False
    if not domain_part or "." not in domain_part:
        return False
    if domain_part.startswith(".") or domain_part.endswith(".") or ".." in email:
        return False
    return all(label and not label.startswith("-") and not label.endswith("-") for label in domain_part.split("."))


@marketplace.entity(part_of="User")
class Address:
    """A shipping destination in a user's address book.

    Exactly one address is the default whenever the book is non-empty.
    """

    label: String(max_length=50, sanitize=False)
    street: String(required=True, max_length=255, sanitize=False)
    city: String(required=True, max_length=100, sanitize=False)
    state: String(max_length=100, sanitize=False)
    postal_code: String(required=True, max_length=20, sanitize=False)
    country: String(required=True, max_length=100, sanitize=False)
    is_default: Boolean(default=False)
    added_at: DateTime(default=datetime.now)


@marketplace.aggregate
class User:
    """A person who can buy, and optionally sell or administer.

    A user signs in either with an email and password (``password_hash``) or
    through an external identity provider (``oauth_provider`` and
    ``oauth_subject``). Role flags gate vendor and admin operations.
    """

    email: String(required=True, max_length=254, unique=True)
    password_hash: String(max_length=255)
    oauth_provider: String(max_length=50)
    oauth_subject: String(max_length=255)
    first_name: String(max_length=100, sanitize=False)
    last_name: String(max_length=100, sanitize=False)
    profile_image_url: String(max_length=500, sanitize=False)
    is_vendor: Boolean(default=False)
    is_admin: Boolean(default=False)
    email_verified: Boolean(default=False)
    addresses: HasMany(Address)
    created_at: DateTime(default=datetime.now)
    updated_at: DateTime(default=datetime.now)

    @invariant.post
    def email_must_be_well_formed(self):
        if not is_well_formed_email(self.email):
            raise ValidationError({"email": [f"Invalid email address: {self.email!r}"]})

    @invariant.post
    def exactly_one_default_address_when_addresses_exist(self):
        if not self.addresses:
            return
        defaults = [a for a in self.addresses if a.is_default]
        if len(defaults) != 1:
            raise ValidationError({"addresses": ["Exactly one address must be marked as default"]})

    @classmethod
    def register(
        cls,
        email,
        password_hash=None,
        first_name=None,
        last_name=None,
        oauth_provider=None,
        oauth_subject=None,
        profile_image_url=None,
    ):
        if not password_hash and not (oauth_provider and oauth_subject):
            raise ValidationError({"password": ["A password or an external identity is required"]})

        now = datetime.now()
        user = cls(
            email=normalize_email(email),
            password_hash=password_hash,
            oauth_provider=oauth_provider,
            oauth_subject=oauth_subject,
            first_name=first_name,
            last_name=last_name,
            profile_image_url=profile_image_url,
            # Identities asserted by the provider arrive verified
            email_verified=bool(oauth_provider),
            created_at=now,
            updated_at=now,
        )
        user.raise_(
            UserRegistered(
                user_id=user.id,
                email=user.email,
                first_name=first_name,
                last_name=last_name,
                oauth_provider=oauth_provider,
                registered_at=now,
            )
        )
        return user

    @property
    def display_name(self):
        name = " ".join(part for part in (self.first_name, self.last_name) if part)
        return name or self.email

    def update_profile(self, first_name=_UNSET, last_name=_UNSET, profile_image_url=_UNSET):
        if first_name is not _UNSET:
            self.first_name = first_name
        if last_name is not _UNSET:
            self.last_name = last_name
        if profile_image_url is not _UNSET:
            self.profile_image_url = profile_image_url
        self.updated_at = datetime.now()

        self.raise_(
            ProfileUpdated(
                user_id=self.id,
                first_name=self.first_name,
                last_name=self.last_name,
                profile_image_url=self.profile_image_url,
            )
        )

    def change_roles(self, is_vendor=None, is_admin=None, email_verified=None):
        """Flip any of the role flags; ``None`` leaves a flag as it is."""
        if is_vendor is not None:
            self.is_vendor = is_vendor
        if is_admin is not None:
            self.is_admin = is_admin
        if email_verified is not None:
            self.email_verified = email_verified
        self.updated_at = datetime.now()

        self.raise_(
            UserRolesChanged(
                user_id=self.id,
                is_vendor=self.is_vendor,
                is_admin=self.is_admin,
                email_verified=self.email_verified,
            )
        )

    def become_vendor(self):
        if self.is_vendor:
            return
        self.change_roles(is_vendor=True)

    # -------------------------------------------------------------------
    # Address book
    # -------------------------------------------------------------------
    def find_address(self, address_id):
        address = next((a for a in self.addresses if str(a.id) == str(address_id)), None)
        if address is None:
            raise ValidationError({"address_id": [f"Address {address_id} not found"]})
        return address

    def owns_address(self, address_id):
        return any(str(a.id) == str(address_id) for a in self.addresses)

    @property
    def sorted_addresses(self):
        """Default address first, then in the order they were added."""
        return sorted(
            self.addresses,
            key=lambda a: (not a.is_default, a.added_at or datetime.min),
        )

    def add_address(self, street, city, postal_code, country, label=None, state=None, is_default=False):
        # First address is always default
        if not self.addresses:
            is_default = True

        with atomic_change(self):
            if is_default:
                for addr in self.addresses:
                    if addr.is_default:
                        addr.is_default = False

            address = Address(
                label=label,
                street=street,
                city=city,
                state=state,
                postal_code=postal_code,
                country=country,
                is_default=is_default,
                added_at=datetime.now(),
            )
            self.add_addresses(address)

        self.raise_(
            AddressAdded(
                user_id=self.id,
                address_id=address.id,
                label=label,
                street=street,
                city=city,
                state=state,
                postal_code=postal_code,
                country=country,
                is_default=is_default,
            )
        )
        return address

    def update_address(self, address_id, **kwargs):
        address = self.find_address(address_id)
        is_default = kwargs.pop("is_default", None)

        for field, value in kwargs.items():
            setattr(address, field, value)

        self.raise_(
            AddressUpdated(
                user_id=self.id,
                address_id=address.id,
                **kwargs,
            )
        )

        if is_default and not address.is_default:
            self.set_default_address(address.id)

    def remove_address(self, address_id):
        address = self.find_address(address_id)
        was_default = address.is_default

        with atomic_change(self):
            self.remove_addresses(address)

            # Promote the oldest remaining address
            if was_default and self.addresses:
                self.sorted_addresses[0].is_default = True

        self.raise_(AddressRemoved(user_id=self.id, address_id=address.id))

    def set_default_address(self, address_id):
        address = self.find_address(address_id)
        previous_default = next((a for a in self.addresses if a.is_default), None)

        with atomic_change(self):
            for addr in self.addresses:
                if addr.is_default:
                    addr.is_default = False
            address.is_default = True

        self.raise_(
            DefaultAddressChanged(
                user_id=self.id,
                address_id=address.id,
                previous_default_address_id=previous_default.id if previous_default else None,
            )
        )

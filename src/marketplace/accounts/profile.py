"""Profile edits, self-service vendor upgrade and admin role changes."""

from protean import handle
from protean.fields import Boolean, Identifier, String
from protean.utils.globals import current_domain

from marketplace.accounts.user import User
from marketplace.domain import QUERY_LIMIT, marketplace


@marketplace.command(part_of="User")
class UpdateProfile:
    """Change display details. Omitted fields are left as they are."""

    user_id: Identifier(required=True)
    first_name: String(max_length=100, sanitize=False)
    last_name: String(max_length=100, sanitize=False)
    profile_image_url: String(max_length=500, sanitize=False)


@marketplace.command(part_of="User")
class BecomeVendor:
    user_id: Identifier(required=True)


@marketplace.command(part_of="User")
class ChangeUserRoles:
    """Administrative toggle of role and verification flags."""

    user_id: Identifier(required=True)
    is_vendor: Boolean()
    is_admin: Boolean()
    email_verified: Boolean()


@marketplace.command_handler(part_of=User)
class ManageProfileHandler:
    @handle(UpdateProfile)
    def update_profile(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)

        updates = {}
        for field in ("first_name", "last_name", "profile_image_url"):
            value = getattr(command, field, None)
            if value is not None:
                updates[field] = value

        user.update_profile(**updates)
        repo.add(user)

    @handle(BecomeVendor)
    def become_vendor(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)
        user.become_vendor()
        repo.add(user)

    @handle(ChangeUserRoles)
    def change_roles(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)
        user.change_roles(
            is_vendor=command.is_vendor,
            is_admin=command.is_admin,
            email_verified=command.email_verified,
        )
        repo.add(user)


def list_users():
    """Every account, newest first."""
    repo = current_domain.repository_for(User)
    return repo._dao.query.order_by("-created_at").limit(QUERY_LIMIT).all().items

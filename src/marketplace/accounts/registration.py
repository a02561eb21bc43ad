"""User registration — command, handler and lookup by email."""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import String
from protean.utils.globals import current_domain

from marketplace.accounts.user import User, normalize_email
from marketplace.domain import marketplace
from marketplace.utils.logging import get_logger

logger = get_logger(__name__)


def find_user_by_email(email):
    """Return the User registered under ``email``, or None."""
    repo = current_domain.repository_for(User)
    results = repo._dao.query.filter(email=normalize_email(email)).all().items
    return results[0] if results else None


@marketplace.command(part_of="User")
class RegisterUser:
    """Create an account. ``password_hash`` is already hashed by the caller."""

    email: String(required=True, max_length=254)
    password_hash: String(max_length=255)
    first_name: String(max_length=100, sanitize=False)
    last_name: String(max_length=100, sanitize=False)
    oauth_provider: String(max_length=50)
    oauth_subject: String(max_length=255)
    profile_image_url: String(max_length=500, sanitize=False)


@marketplace.command_handler(part_of=User)
class RegisterUserHandler:
    @handle(RegisterUser)
    def register_user(self, command):
        if find_user_by_email(command.email) is not None:
            raise ValidationError({"email": ["An account with this email already exists"]})

        user = User.register(
            email=command.email,
            password_hash=command.password_hash,
            first_name=command.first_name,
            last_name=command.last_name,
            oauth_provider=command.oauth_provider,
            oauth_subject=command.oauth_subject,
            profile_image_url=command.profile_image_url,
        )
        current_domain.repository_for(User).add(user)
        logger.info("user_registered", user_id=str(user.id))
        return str(user.id)

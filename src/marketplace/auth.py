"""Session identity provider.

The signed session cookie carries only the user id. Every request resolves
it to a ``CurrentUser`` through FastAPI dependencies, reloading the role
flags so that role changes take effect on the next request. Routes declare
what they need (``require_user``, ``require_vendor``, ``require_admin``);
handlers and queries receive the resolved identity as a plain argument.
"""

from dataclasses import dataclass

from fastapi import Depends, Request
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from marketplace.accounts.user import User
from marketplace.errors import AuthenticationError, AuthorizationError
from marketplace.utils.logging import bind_request_context

SESSION_USER_KEY = "user_id"


@dataclass(frozen=True)
class CurrentUser:
    id: str
    email: str
    is_vendor: bool = False
    is_admin: bool = False

    @classmethod
    def from_user(cls, user):
        return cls(
            id=str(user.id),
            email=user.email,
            is_vendor=bool(user.is_vendor),
            is_admin=bool(user.is_admin),
        )


def sign_in(request: Request, user) -> CurrentUser:
    request.session.clear()
    request.session[SESSION_USER_KEY] = str(user.id)
    return CurrentUser.from_user(user)


def sign_out(request: Request) -> None:
    request.session.clear()


async def get_current_user(request: Request) -> CurrentUser | None:
    """The signed-in user, or None for anonymous requests and stale sessions."""
    user_id = request.session.get(SESSION_USER_KEY)
    if not user_id:
        return None
    try:
        user = current_domain.repository_for(User).get(user_id)
    except ObjectNotFoundError:
        request.session.clear()
        return None

    bind_request_context(user_id=str(user.id))
    return CurrentUser.from_user(user)


async def require_user(user: CurrentUser | None = Depends(get_current_user)) -> CurrentUser:
    if user is None:
        raise AuthenticationError("Authentication required")
    return user


async def require_vendor(user: CurrentUser = Depends(require_user)) -> CurrentUser:
    if not user.is_vendor:
        raise AuthorizationError("Vendor access required")
    return user


async def require_admin(user: CurrentUser = Depends(require_user)) -> CurrentUser:
    if not user.is_admin:
        raise AuthorizationError("Admin access required")
    return user

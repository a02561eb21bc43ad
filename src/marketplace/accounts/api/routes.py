"""FastAPI routes for accounts: authentication, profile, addresses and user admin."""

from fastapi import APIRouter, Depends, Request
from protean.utils.globals import current_domain

from marketplace.accounts.addresses import (
    AddAddress,
    RemoveAddress,
    SetDefaultAddress,
    UpdateAddress,
    list_addresses,
)
from marketplace.accounts.api.schemas import (
    AddAddressRequest,
    AddressResponse,
    ChangeRolesRequest,
    LoginRequest,
    RegisterRequest,
    StatusResponse,
    UpdateAddressRequest,
    UpdateProfileRequest,
    UserResponse,
)
from marketplace.accounts.passwords import hash_password, verify_password
from marketplace.accounts.profile import BecomeVendor, ChangeUserRoles, UpdateProfile, list_users
from marketplace.accounts.registration import RegisterUser, find_user_by_email
from marketplace.accounts.user import User
from marketplace.auth import CurrentUser, require_admin, require_user, sign_in, sign_out
from marketplace.errors import AuthenticationError
from marketplace.utils.logging import get_logger

logger = get_logger(__name__)


def _load_user(user_id) -> User:
    return current_domain.repository_for(User).get(user_id)


# ---------------------------------------------------------------------------
# Auth Router
# ---------------------------------------------------------------------------
auth_router = APIRouter(prefix="/api/auth", tags=["auth"])


@auth_router.post("/register", status_code=201, response_model=UserResponse)
async def register(body: RegisterRequest, request: Request) -> UserResponse:
    command = RegisterUser(
        email=body.email,
        password_hash=hash_password(body.password),
        first_name=body.first_name,
        last_name=body.last_name,
    )
    user_id = current_domain.process(command, asynchronous=False)
    user = _load_user(user_id)
    sign_in(request, user)
    return UserResponse.from_user(user)


@auth_router.post("/login", response_model=UserResponse)
async def login(body: LoginRequest, request: Request) -> UserResponse:
    user = find_user_by_email(body.email)
    if user is None or not verify_password(body.password, user.password_hash):
        logger.info("login_failed", email=body.email)
        raise AuthenticationError("Invalid email or password")

    sign_in(request, user)
    logger.info("login_succeeded", user_id=str(user.id))
    return UserResponse.from_user(user)


@auth_router.post("/logout", response_model=StatusResponse)
async def logout(request: Request) -> StatusResponse:
    sign_out(request)
    return StatusResponse()


@auth_router.get("/user", response_model=UserResponse)
async def get_signed_in_user(user: CurrentUser = Depends(require_user)) -> UserResponse:
    return UserResponse.from_user(_load_user(user.id))


# ---------------------------------------------------------------------------
# Profile Router
# ---------------------------------------------------------------------------
user_router = APIRouter(prefix="/api/users", tags=["users"])


@user_router.patch("/profile", response_model=UserResponse)
async def update_profile(body: UpdateProfileRequest, user: CurrentUser = Depends(require_user)) -> UserResponse:
    command = UpdateProfile(user_id=user.id, **body.model_dump(exclude_unset=True))
    current_domain.process(command, asynchronous=False)
    return UserResponse.from_user(_load_user(user.id))


@user_router.post("/become-vendor", response_model=UserResponse)
async def become_vendor(user: CurrentUser = Depends(require_user)) -> UserResponse:
    current_domain.process(BecomeVendor(user_id=user.id), asynchronous=False)
    return UserResponse.from_user(_load_user(user.id))


# ---------------------------------------------------------------------------
# Address Router
# ---------------------------------------------------------------------------
address_router = APIRouter(prefix="/api/addresses", tags=["addresses"])


@address_router.get("", response_model=list[AddressResponse])
async def get_addresses(user: CurrentUser = Depends(require_user)) -> list[AddressResponse]:
    return [AddressResponse.from_address(address) for address in list_addresses(user.id)]


@address_router.post("", status_code=201, response_model=AddressResponse)
async def add_address(body: AddAddressRequest, user: CurrentUser = Depends(require_user)) -> AddressResponse:
    command = AddAddress(
        user_id=user.id,
        label=body.label,
        street=body.street,
        city=body.city,
        state=body.state,
        postal_code=body.postal_code,
        country=body.country,
        is_default=body.is_default,
    )
    address_id = current_domain.process(command, asynchronous=False)
    return AddressResponse.from_address(_load_user(user.id).find_address(address_id))


@address_router.patch("/{address_id}", response_model=AddressResponse)
async def update_address(
    address_id: str,
    body: UpdateAddressRequest,
    user: CurrentUser = Depends(require_user),
) -> AddressResponse:
    command = UpdateAddress(user_id=user.id, address_id=address_id, **body.model_dump(exclude_unset=True))
    current_domain.process(command, asynchronous=False)
    return AddressResponse.from_address(_load_user(user.id).find_address(address_id))


@address_router.delete("/{address_id}", response_model=StatusResponse)
async def remove_address(address_id: str, user: CurrentUser = Depends(require_user)) -> StatusResponse:
    current_domain.process(RemoveAddress(user_id=user.id, address_id=address_id), asynchronous=False)
    return StatusResponse()


@address_router.put("/{address_id}/default", response_model=StatusResponse)
async def set_default_address(address_id: str, user: CurrentUser = Depends(require_user)) -> StatusResponse:
    current_domain.process(SetDefaultAddress(user_id=user.id, address_id=address_id), asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Admin User Router
# ---------------------------------------------------------------------------
admin_user_router = APIRouter(prefix="/api/admin/users", tags=["admin"])


@admin_user_router.get("", response_model=list[UserResponse])
async def list_all_users(admin: CurrentUser = Depends(require_admin)) -> list[UserResponse]:
    return [UserResponse.from_user(user) for user in list_users()]


@admin_user_router.patch("/{user_id}", response_model=UserResponse)
async def change_user_roles(
    user_id: str,
    body: ChangeRolesRequest,
    admin: CurrentUser = Depends(require_admin),
) -> UserResponse:
    command = ChangeUserRoles(user_id=user_id, **body.model_dump(exclude_unset=True))
    current_domain.process(command, asynchronous=False)
    logger.info("user_roles_changed", user_id=user_id, changed_by=admin.id)
    return UserResponse.from_user(_load_user(user_id))

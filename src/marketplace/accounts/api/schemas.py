"""Pydantic request/response schemas for the accounts API."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from marketplace.accounts.passwords import MIN_PASSWORD_LENGTH

# --- Request Schemas ---


class RegisterRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "email": "jane.doe@example.com",
                    "password": "correct-horse-battery",
                    "first_name": "Jane",
                    "last_name": "Doe",
                }
            ]
        }
    }

    email: str = Field(..., max_length=254)
    password: str = Field(..., min_length=MIN_PASSWORD_LENGTH, max_length=128)
    first_name: str | None = Field(None, max_length=100)
    last_name: str | None = Field(None, max_length=100)


class LoginRequest(BaseModel):
    email: str = Field(..., max_length=254)
    password: str = Field(..., max_length=128)


class UpdateProfileRequest(BaseModel):
    first_name: str | None = Field(None, max_length=100)
    last_name: str | None = Field(None, max_length=100)
    profile_image_url: str | None = Field(None, max_length=500)


class ChangeRolesRequest(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"is_vendor": True}]}}

    is_vendor: bool | None = None
    is_admin: bool | None = None
    email_verified: bool | None = None


class AddAddressRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "label": "Home",
                    "street": "123 Elm Street",
                    "city": "Springfield",
                    "state": "IL",
                    "postal_code": "62701",
                    "country": "US",
                    "is_default": True,
                }
            ]
        }
    }

    label: str | None = Field(None, max_length=50)
    street: str = Field(..., max_length=255)
    city: str = Field(..., max_length=100)
    state: str | None = Field(None, max_length=100)
    postal_code: str = Field(..., max_length=20)
    country: str = Field(..., max_length=100)
    is_default: bool = False


class UpdateAddressRequest(BaseModel):
    label: str | None = Field(None, max_length=50)
    street: str | None = Field(None, max_length=255)
    city: str | None = Field(None, max_length=100)
    state: str | None = Field(None, max_length=100)
    postal_code: str | None = Field(None, max_length=20)
    country: str | None = Field(None, max_length=100)
    is_default: bool | None = None


# --- Response Schemas ---


class StatusResponse(BaseModel):
    status: str = "ok"


class UserResponse(BaseModel):
    id: str
    email: str
    first_name: str | None = None
    last_name: str | None = None
    profile_image_url: str | None = None
    is_vendor: bool = False
    is_admin: bool = False
    email_verified: bool = False
    oauth_provider: str | None = None
    created_at: datetime | None = None

    @classmethod
    def from_user(cls, user) -> UserResponse:
        return cls(
            id=str(user.id),
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            profile_image_url=user.profile_image_url,
            is_vendor=bool(user.is_vendor),
            is_admin=bool(user.is_admin),
            email_verified=bool(user.email_verified),
            oauth_provider=user.oauth_provider,
            created_at=user.created_at,
        )


class AddressResponse(BaseModel):
    id: str
    label: str | None = None
    street: str
    city: str
    state: str | None = None
    postal_code: str
    country: str
    is_default: bool = False

    @classmethod
    def from_address(cls, address) -> AddressResponse:
        return cls(
            id=str(address.id),
            label=address.label,
            street=address.street,
            city=address.city,
            state=address.state,
            postal_code=address.postal_code,
            country=address.country,
            is_default=bool(address.is_default),
        )

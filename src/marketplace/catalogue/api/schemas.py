"""Pydantic request/response schemas for the catalogue API."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

# --- Request Schemas ---


class CreateCategoryRequest(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"name": "Home & Garden", "icon": "sprout"}]}}

    name: str = Field(..., max_length=100)
    slug: str | None = Field(None, max_length=120)
    icon: str | None = Field(None, max_length=100)


class CreateProductRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Ceramic Pour-Over Set",
                    "description": "Hand-glazed dripper with two cups",
                    "price": 48.0,
                    "sale_price": 39.5,
                    "stock": 12,
                    "category_id": "c0ffee00-0000-4000-8000-000000000001",
                }
            ]
        }
    }

    name: str = Field(..., max_length=255)
    description: str | None = None
    price: float = Field(..., ge=0)
    sale_price: float | None = Field(None, ge=0)
    image_url: str | None = Field(None, max_length=500)
    image_urls: list[str] | None = None
    stock: int = Field(0, ge=0)
    category_id: str | None = None
    is_featured: bool = False


class UpdateProductRequest(BaseModel):
    """Partial update; only fields present in the body are changed."""

    name: str | None = Field(None, max_length=255)
    description: str | None = None
    price: float | None = Field(None, ge=0)
    sale_price: float | None = Field(None, ge=0)
    image_url: str | None = Field(None, max_length=500)
    image_urls: list[str] | None = None
    stock: int | None = Field(None, ge=0)
    category_id: str | None = None
    is_featured: bool | None = None


# --- Response Schemas ---


class StatusResponse(BaseModel):
    status: str = "ok"


class CategoryResponse(BaseModel):
    id: str
    name: str
    slug: str
    icon: str | None = None

    @classmethod
    def from_category(cls, category) -> CategoryResponse:
        return cls(id=str(category.id), name=category.name, slug=category.slug, icon=category.icon)


class VendorSummary(BaseModel):
    id: str
    first_name: str | None = None
    last_name: str | None = None
    profile_image_url: str | None = None


class ProductResponse(BaseModel):
    id: str
    name: str
    description: str | None = None
    price: float
    sale_price: float | None = None
    effective_price: float
    image_url: str | None = None
    image_urls: list[str] = []
    stock: int = 0
    category_id: str | None = None
    vendor_id: str
    is_featured: bool = False
    is_active: bool = True
    rating: float | None = None
    review_count: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    category: CategoryResponse | None = None
    vendor: VendorSummary | None = None


class ToggleResponse(BaseModel):
    id: str
    is_active: bool

"""FastAPI routes for the catalogue: categories, products and their management views."""

import json

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from marketplace.auth import CurrentUser, require_admin, require_user, require_vendor
from marketplace.catalogue import listing
from marketplace.catalogue.api.schemas import (
    CategoryResponse,
    CreateCategoryRequest,
    CreateProductRequest,
    ProductResponse,
    StatusResponse,
    ToggleResponse,
    UpdateProductRequest,
)
from marketplace.catalogue.category.category import Category
from marketplace.catalogue.category.management import CreateCategory, list_categories
from marketplace.catalogue.product.creation import CreateProduct
from marketplace.catalogue.product.details import UpdateProduct
from marketplace.catalogue.product.lifecycle import DeactivateProduct, ToggleProductActive

# ---------------------------------------------------------------------------
# Category Router
# ---------------------------------------------------------------------------
category_router = APIRouter(prefix="/api/categories", tags=["categories"])


@category_router.get("", response_model=list[CategoryResponse])
async def get_categories() -> list[CategoryResponse]:
    return [CategoryResponse.from_category(category) for category in list_categories()]


@category_router.post("", status_code=201, response_model=CategoryResponse)
async def create_category(body: CreateCategoryRequest, user: CurrentUser = Depends(require_user)) -> CategoryResponse:
    command = CreateCategory(created_by=user.id, name=body.name, slug=body.slug, icon=body.icon)
    category_id = current_domain.process(command, asynchronous=False)
    return CategoryResponse.from_category(current_domain.repository_for(Category).get(category_id))


# ---------------------------------------------------------------------------
# Product Router
# ---------------------------------------------------------------------------
product_router = APIRouter(prefix="/api/products", tags=["products"])


@product_router.get("", response_model=list[ProductResponse])
async def get_products(
    category: str | None = None,
    vendor: str | None = None,
    search: str | None = None,
) -> list[ProductResponse]:
    return listing.list_products(category=category, vendor_id=vendor, search=search)


@product_router.get("/featured", response_model=list[ProductResponse])
async def get_featured_products() -> list[ProductResponse]:
    return listing.list_featured()


@product_router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: str) -> ProductResponse:
    return listing.get_product(product_id)


@product_router.post("", status_code=201, response_model=ProductResponse)
async def create_product(body: CreateProductRequest, vendor: CurrentUser = Depends(require_vendor)) -> ProductResponse:
    command = CreateProduct(
        vendor_id=vendor.id,
        name=body.name,
        description=body.description,
        price=body.price,
        sale_price=body.sale_price,
        image_url=body.image_url,
        image_urls=json.dumps(body.image_urls) if body.image_urls is not None else None,
        stock=body.stock,
        category_id=body.category_id,
        is_featured=body.is_featured,
    )
    product_id = current_domain.process(command, asynchronous=False)
    return listing.get_product(product_id)


@product_router.patch("/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: str,
    body: UpdateProductRequest,
    vendor: CurrentUser = Depends(require_vendor),
) -> ProductResponse:
    command = UpdateProduct(
        product_id=product_id,
        vendor_id=vendor.id,
        changes=json.dumps(body.model_dump(exclude_unset=True)),
    )
    current_domain.process(command, asynchronous=False)
    return listing.get_product(product_id)


@product_router.delete("/{product_id}", response_model=StatusResponse)
async def delete_product(product_id: str, vendor: CurrentUser = Depends(require_vendor)) -> StatusResponse:
    current_domain.process(DeactivateProduct(product_id=product_id, vendor_id=vendor.id), asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Vendor Product Router
# ---------------------------------------------------------------------------
vendor_product_router = APIRouter(prefix="/api/vendor/products", tags=["vendor"])


@vendor_product_router.get("", response_model=list[ProductResponse])
async def get_vendor_products(vendor: CurrentUser = Depends(require_vendor)) -> list[ProductResponse]:
    return listing.list_products(vendor_id=vendor.id, include_inactive=True)


# ---------------------------------------------------------------------------
# Admin Product Router
# ---------------------------------------------------------------------------
admin_product_router = APIRouter(prefix="/api/admin/products", tags=["admin"])


@admin_product_router.get("", response_model=list[ProductResponse])
async def get_all_products(admin: CurrentUser = Depends(require_admin)) -> list[ProductResponse]:
    return listing.list_products(include_inactive=True)


@admin_product_router.patch("/{product_id}/toggle", response_model=ToggleResponse)
async def toggle_product(product_id: str, admin: CurrentUser = Depends(require_admin)) -> ToggleResponse:
    is_active = current_domain.process(ToggleProductActive(product_id=product_id), asynchronous=False)
    return ToggleResponse(id=product_id, is_active=is_active)

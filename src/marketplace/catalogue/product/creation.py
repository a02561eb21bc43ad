"""Product creation — command and handler."""

from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Boolean, Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from marketplace.accounts.user import User
from marketplace.catalogue.category.category import Category
from marketplace.catalogue.product.product import Product
from marketplace.domain import marketplace
from marketplace.errors import AuthorizationError
from marketplace.utils.logging import get_logger

logger = get_logger(__name__)


@marketplace.command(part_of="Product")
class CreateProduct:
    vendor_id: Identifier(required=True)
    name: String(required=True, max_length=255, sanitize=False)
    description: Text(sanitize=False)
    price: Float(required=True, min_value=0.0)
    sale_price: Float(min_value=0.0)
    image_url: String(max_length=500, sanitize=False)
    image_urls: Text(sanitize=False)  # JSON array
    stock: Integer(default=0, min_value=0)
    category_id: Identifier()
    is_featured: Boolean(default=False)


def ensure_category_exists(category_id):
    if not category_id:
        return
    try:
        current_domain.repository_for(Category).get(category_id)
    except ObjectNotFoundError:
        raise ValidationError({"category_id": [f"Category {category_id} does not exist"]}) from None


@marketplace.command_handler(part_of=Product)
class CreateProductHandler:
    @handle(CreateProduct)
    def create_product(self, command):
        vendor = current_domain.repository_for(User).get(command.vendor_id)
        if not vendor.is_vendor:
            raise AuthorizationError("Only vendors can list products")

        ensure_category_exists(command.category_id)

        product = Product.create(
            vendor_id=command.vendor_id,
            name=command.name,
            price=command.price,
            description=command.description,
            sale_price=command.sale_price,
            image_url=command.image_url,
            image_urls=command.image_urls,
            stock=command.stock,
            category_id=command.category_id,
            is_featured=command.is_featured,
        )
        current_domain.repository_for(Product).add(product)
        logger.info("product_created", product_id=str(product.id), vendor_id=str(command.vendor_id))
        return str(product.id)

"""Category management — command, handler and listing."""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from marketplace.accounts.user import User
from marketplace.catalogue.category.category import Category, slugify
from marketplace.domain import QUERY_LIMIT, marketplace
from marketplace.errors import AuthorizationError


@marketplace.command(part_of="Category")
class CreateCategory:
    created_by: Identifier(required=True)
    name: String(required=True, max_length=100, sanitize=False)
    slug: String(max_length=120)
    icon: String(max_length=100)


@marketplace.command_handler(part_of=Category)
class CreateCategoryHandler:
    @handle(CreateCategory)
    def create_category(self, command):
        creator = current_domain.repository_for(User).get(command.created_by)
        if not (creator.is_vendor or creator.is_admin):
            raise AuthorizationError("Only vendors and administrators can create categories")

        repo = current_domain.repository_for(Category)
        slug = command.slug or slugify(command.name)
        if repo._dao.query.filter(slug=slug).all().items:
            raise ValidationError({"slug": [f"Category '{slug}' already exists"]})

        category = Category.create(name=command.name, slug=slug, icon=command.icon)
        repo.add(category)
        return str(category.id)


def list_categories():
    """All categories, alphabetically by name."""
    repo = current_domain.repository_for(Category)
    return repo._dao.query.order_by("name").limit(QUERY_LIMIT).all().items

"""Category management: commands, handler and lookups."""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from commerce.catalogue.category import Category
from commerce.catalogue.product import Product
from commerce.domain import commerce
from commerce.shared.exceptions import BusinessRuleError, DuplicateResourceError


@commerce.command(part_of="Category")
class CreateCategory:
    name: String(required=True, max_length=100)
    description: String(max_length=500)
    parent_category_id: Identifier()


@commerce.command(part_of="Category")
class UpdateCategory:
    category_id: Identifier(required=True)
    name: String(max_length=100)
    description: String(max_length=500)
    parent_category_id: Identifier()


@commerce.command(part_of="Category")
class DeleteCategory:
    category_id: Identifier(required=True)


def _name_taken(name, exclude_id=None):
    wanted = (name or "").strip().lower()
    return any(
        category.name.lower() == wanted and str(category.id) != str(exclude_id) for category in list_categories()
    )


@commerce.command_handler(part_of=Category)
class CategoryManagementHandler:
    @handle(CreateCategory)
    def create_category(self, command):
        repo = current_domain.repository_for(Category)

        if _name_taken(command.name):
            raise DuplicateResourceError("Category", "name", command.name.strip())
        if command.parent_category_id:
            repo.get(command.parent_category_id)

        category = Category.create(
            name=command.name,
            description=command.description,
            parent_category_id=command.parent_category_id,
        )
        repo.add(category)
        return str(category.id)

    @handle(UpdateCategory)
    def update_category(self, command):
        repo = current_domain.repository_for(Category)
        category = repo.get(command.category_id)

        if command.name is not None and _name_taken(command.name, exclude_id=category.id):
            raise DuplicateResourceError("Category", "name", command.name.strip())
        if command.parent_category_id:
            repo.get(command.parent_category_id)

        category.update_details(
            name=command.name,
            description=command.description,
            parent_category_id=command.parent_category_id,
        )
        repo.add(category)

    @handle(DeleteCategory)
    def delete_category(self, command):
        repo = current_domain.repository_for(Category)
        category = repo.get(command.category_id)

        in_use = current_domain.repository_for(Product)._dao.query.filter(category_id=str(category.id)).all()
        if in_use.total > 0:
            raise BusinessRuleError(
                {"category_id": [f"Cannot delete category with {in_use.total} product(s) assigned to it"]}
            )

        category.mark_removed()
        repo._dao.delete(category)


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------
def get_category(category_id) -> Category:
    return current_domain.repository_for(Category).get(category_id)


def list_categories() -> list[Category]:
    return current_domain.repository_for(Category)._dao.query.order_by("name").all().items


def get_category_by_name(name) -> Category:
    if not name or not name.strip():
        raise BusinessRuleError({"name": ["Category name cannot be empty"]})

    wanted = name.strip().lower()
    for category in list_categories():
        if category.name.lower() == wanted:
            return category
    raise ObjectNotFoundError(f"Category with name {name.strip()} not found")

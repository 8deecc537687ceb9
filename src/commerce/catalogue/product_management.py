"""Product management: commands and handler.

Listing a product opens its ledger row in the same Unit of Work, and
delisting removes both. Stock itself is never edited here.
"""

import structlog
from protean import handle
from protean.fields import Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from commerce.catalogue.category import Category
from commerce.catalogue.product import Product
from commerce.domain import commerce
from commerce.inventory.record import InventoryRecord

logger = structlog.get_logger(__name__)


@commerce.command(part_of="Product")
class CreateProduct:
    name: String(required=True, max_length=255)
    description: Text()
    price: String(required=True, max_length=20)
    category_id: Identifier(required=True)
    initial_quantity: Integer(default=0)


@commerce.command(part_of="Product")
class UpdateProduct:
    product_id: Identifier(required=True)
    name: String(max_length=255)
    description: Text()
    price: String(max_length=20)
    category_id: Identifier()


@commerce.command(part_of="Product")
class DeleteProduct:
    product_id: Identifier(required=True)


@commerce.command_handler(part_of=Product)
class ProductManagementHandler:
    @handle(CreateProduct)
    def create_product(self, command):
        current_domain.repository_for(Category).get(command.category_id)

        product = Product.create(
            name=command.name,
            description=command.description,
            price=command.price,
            category_id=command.category_id,
        )
        record = InventoryRecord.open(product_id=str(product.id), quantity=command.initial_quantity or 0)

        current_domain.repository_for(Product).add(product)
        current_domain.repository_for(InventoryRecord).add(record)

        logger.info("Product listed", product_id=str(product.id), initial_quantity=record.quantity)
        return str(product.id)

    @handle(UpdateProduct)
    def update_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)

        if command.category_id is not None:
            current_domain.repository_for(Category).get(command.category_id)

        product.update_details(
            name=command.name,
            description=command.description,
            price=command.price,
            category_id=command.category_id,
        )
        repo.add(product)

    @handle(DeleteProduct)
    def delete_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)

        inventory_repo = current_domain.repository_for(InventoryRecord)
        record = inventory_repo.get_or_none(str(product.id))
        if record is not None:
            inventory_repo._dao.delete(record)

        product.mark_removed()
        repo._dao.delete(product)

        logger.info("Product delisted", product_id=str(product.id))

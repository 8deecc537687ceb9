"""Product aggregate.

A product's stock lives in the ledger (``InventoryRecord``), not here: the
quantity shown alongside a product is joined in when the catalog cache
builds its views.
"""

from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import DateTime, Decimal, Identifier, String, Text

from commerce.catalogue.events import ProductAdded, ProductRemoved, ProductUpdated
from commerce.domain import commerce
from commerce.shared.money import to_money


def _parse_price(price):
    if price is None:
        raise ValidationError({"price": ["Price is required"]})
    amount = to_money(price)
    if amount <= 0:
        raise ValidationError({"price": ["Price must be greater than zero"]})
    return amount


@commerce.aggregate(limit=-1)
class Product:
    name: String(required=True, min_length=2, max_length=255)
    description: Text()
    price: Decimal(required=True, min_value=0, precision=12, scale=2)
    category_id: Identifier(required=True)
    created_at: DateTime()
    updated_at: DateTime()

    @classmethod
    def create(cls, name, price, category_id, description=None):
        amount = _parse_price(price)
        now = datetime.now(UTC)
        product = cls(
            name=(name or "").strip(),
            description=description,
            price=amount,
            category_id=category_id,
            created_at=now,
            updated_at=now,
        )
        product.raise_(
            ProductAdded(
                product_id=str(product.id),
                name=product.name,
                price=product.price,
                category_id=str(category_id),
                created_at=now,
            )
        )
        return product

    def update_details(self, name=None, description=None, price=None, category_id=None):
        previous_price = self.price

        if name is not None:
            self.name = name.strip()
        if description is not None:
            self.description = description
        if price is not None:
            self.price = _parse_price(price)
        if category_id is not None:
            self.category_id = category_id
        self.updated_at = datetime.now(UTC)

        self.raise_(
            ProductUpdated(
                product_id=str(self.id),
                name=self.name,
                price=self.price,
                previous_price=previous_price,
                category_id=str(self.category_id),
            )
        )

    def mark_removed(self):
        self.raise_(ProductRemoved(product_id=str(self.id), name=self.name))

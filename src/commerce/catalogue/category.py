"""Category aggregate: flat-or-nested grouping for products."""

from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, String

from commerce.catalogue.events import CategoryCreated, CategoryRemoved, CategoryUpdated
from commerce.domain import commerce


@commerce.aggregate(limit=-1)
class Category:
    name: String(required=True, min_length=2, max_length=100)
    description: String(max_length=500)
    parent_category_id: Identifier()
    created_at: DateTime()
    updated_at: DateTime()

    @classmethod
    def create(cls, name, description=None, parent_category_id=None):
        now = datetime.now(UTC)
        category = cls(
            name=(name or "").strip(),
            description=description,
            parent_category_id=parent_category_id,
            created_at=now,
            updated_at=now,
        )
        category.raise_(
            CategoryCreated(
                category_id=str(category.id),
                name=category.name,
                parent_category_id=parent_category_id,
            )
        )
        return category

    def update_details(self, name=None, description=None, parent_category_id=None):
        if parent_category_id is not None and str(parent_category_id) == str(self.id):
            raise ValidationError({"parent_category_id": ["A category cannot be its own parent"]})

        if name is not None:
            self.name = name.strip()
        if description is not None:
            self.description = description
        if parent_category_id is not None:
            self.parent_category_id = parent_category_id
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CategoryUpdated(
                category_id=str(self.id),
                name=self.name,
                parent_category_id=self.parent_category_id,
            )
        )

    def mark_removed(self):
        self.raise_(CategoryRemoved(category_id=str(self.id), name=self.name))

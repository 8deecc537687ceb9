"""User aggregate: the identity collaborator that carts and orders check against.

Only existence and lookups matter to the rest of the domain; nothing outside
this package mutates a user.
"""

import re
from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, String

from commerce.domain import commerce

_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def normalize_email(email):
    return (email or "").strip().lower()


@commerce.event(part_of="User")
class UserRegistered:
    """A new user account was created."""

    __version__ = 1

    user_id: Identifier(required=True)
    name: String(required=True)
    email: String(required=True)
    registered_at: DateTime(required=True)


@commerce.event(part_of="User")
class UserProfileUpdated:
    """A user's name or email changed."""

    __version__ = 1

    user_id: Identifier(required=True)
    name: String(required=True)
    email: String(required=True)


@commerce.aggregate
class User:
    name: String(required=True, min_length=2, max_length=100)
    email: String(required=True, max_length=254)
    created_at: DateTime()
    updated_at: DateTime()

    @invariant.post
    def email_must_be_well_formed(self):
        if self.email and not _EMAIL_PATTERN.match(self.email):
            raise ValidationError({"email": ["Invalid email format"]})

    @classmethod
    def register(cls, name, email):
        now = datetime.now(UTC)
        user = cls(
            name=(name or "").strip(),
            email=normalize_email(email),
            created_at=now,
            updated_at=now,
        )
        user.raise_(
            UserRegistered(
                user_id=str(user.id),
                name=user.name,
                email=user.email,
                registered_at=now,
            )
        )
        return user

    def update_profile(self, name=None, email=None):
        if name is not None:
            self.name = name.strip()
        if email is not None:
            self.email = normalize_email(email)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            UserProfileUpdated(
                user_id=str(self.id),
                name=self.name,
                email=self.email,
            )
        )

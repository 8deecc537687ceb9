"""User registration and profile updates: commands, handler and lookups."""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from commerce.domain import commerce
from commerce.identity.user import User, normalize_email
from commerce.shared.exceptions import DuplicateResourceError


@commerce.command(part_of="User")
class RegisterUser:
    name: String(required=True, max_length=100)
    email: String(required=True, max_length=254)


@commerce.command(part_of="User")
class UpdateUser:
    user_id: Identifier(required=True)
    name: String(max_length=100)
    email: String(max_length=254)


def _email_taken(email, exclude_user_id=None):
    matches = current_domain.repository_for(User)._dao.query.filter(email=normalize_email(email)).all().items
    return any(str(user.id) != str(exclude_user_id) for user in matches)


@commerce.command_handler(part_of=User)
class UserRegistrationHandler:
    @handle(RegisterUser)
    def register_user(self, command):
        if _email_taken(command.email):
            raise DuplicateResourceError("User", "email", normalize_email(command.email))

        user = User.register(name=command.name, email=command.email)
        current_domain.repository_for(User).add(user)
        return str(user.id)

    @handle(UpdateUser)
    def update_user(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)

        if command.email is not None and _email_taken(command.email, exclude_user_id=user.id):
            raise DuplicateResourceError("User", "email", normalize_email(command.email))

        user.update_profile(name=command.name, email=command.email)
        repo.add(user)
        return str(user.id)


# ---------------------------------------------------------------------------
# Lookups used by carts and orders
# ---------------------------------------------------------------------------
def user_exists(user_id) -> bool:
    return current_domain.repository_for(User).get_or_none(user_id) is not None


def get_user(user_id) -> User:
    return current_domain.repository_for(User).get(user_id)


def require_user(user_id) -> None:
    """Raise ``ObjectNotFoundError`` unless the user exists."""
    if not user_exists(user_id):
        raise ObjectNotFoundError(f"User with id {user_id} not found")


def find_user_by_email(email) -> User:
    users = current_domain.repository_for(User)._dao.query.filter(email=normalize_email(email)).all().items
    if not users:
        raise ObjectNotFoundError(f"User with email {normalize_email(email)} not found")
    return users[0]

import pytest
from protean.exceptions import ValidationError

from commerce.identity.user import User, UserProfileUpdated, UserRegistered


class TestUserRegistration:
    def test_register_normalizes_email(self):
        user = User.register(name="  Ada Lovelace ", email="  Ada@Example.COM ")
        assert user.name == "Ada Lovelace"
        assert user.email == "ada@example.com"

    def test_register_raises_event(self):
        user = User.register(name="Ada", email="ada@example.com")
        assert len(user._events) == 1
        assert isinstance(user._events[0], UserRegistered)
        assert user._events[0].email == "ada@example.com"

    def test_rejects_malformed_email(self):
        with pytest.raises(ValidationError) as exc:
            User.register(name="Ada", email="not-an-email")
        assert "email" in exc.value.messages

    def test_rejects_short_name(self):
        with pytest.raises(ValidationError):
            User.register(name="A", email="a@example.com")


class TestUserProfile:
    def test_update_changes_only_given_fields(self):
        user = User.register(name="Ada", email="ada@example.com")
        user._events.clear()

        user.update_profile(name="Ada King")

        assert user.name == "Ada King"
        assert user.email == "ada@example.com"
        assert isinstance(user._events[0], UserProfileUpdated)

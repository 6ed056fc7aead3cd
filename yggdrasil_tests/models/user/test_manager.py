import pendulum
import pytest

from yggdrasil.exceptions import ValidationError
from yggdrasil.models.user.exceptions import UserEmailAlreadyExists
from yggdrasil.models.user.model import User


@pytest.fixture
def user_manager(user_manager):
    # keep the hashing quick
    user_manager.password_hash_rounds = 4
    yield user_manager


def test_register_user(user_manager):
    user = user_manager.register_user({'email': 'sam@example.com', 'name': 'Sam', 'password': 'correct horse'})
    assert isinstance(user, User)
    assert user.email == 'sam@example.com'
    assert user.item['passwordHash'].startswith('$2b$04$')
    assert user_manager.get_user(user.id).id == user.id
    assert user_manager.get_user_by_email('sam@example.com').id == user.id

    serialized = user.serialize()
    assert 'passwordHash' not in serialized
    assert 'PK' not in serialized
    assert serialized['userId'] == user.id


def test_register_user_without_password(user_manager):
    user = user_manager.register_user({'email': 'sam@example.com', 'name': 'Sam'})
    assert 'passwordHash' not in user.item
    # such users can't log in here
    assert user_manager.authenticate('sam@example.com', '') is None
    assert user_manager.authenticate('sam@example.com', 'anything') is None


def test_register_user_email_taken(user_manager):
    user_manager.register_user({'email': 'sam@example.com', 'name': 'Sam'})
    with pytest.raises(UserEmailAlreadyExists):
        user_manager.register_user({'email': 'SAM@example.com', 'name': 'Sam Again'})


def test_register_user_invalid(user_manager):
    with pytest.raises(ValidationError) as error_info:
        user_manager.register_user({'email': 'not-an-email', 'name': 'Sam'})
    assert error_info.value.fields == ['email']


def test_authenticate(user_manager):
    user = user_manager.register_user({'email': 'sam@example.com', 'name': 'Sam', 'password': 'correct horse'})
    assert 'lastLoginAt' not in user.item

    assert user_manager.authenticate('sam@example.com', 'wrong horse') is None
    assert user_manager.authenticate('nobody@example.com', 'correct horse') is None

    now = pendulum.now('utc')
    authed = user_manager.authenticate('Sam@Example.com', 'correct horse', now=now)
    assert authed.id == user.id
    assert authed.item['lastLoginAt'] == now.to_iso8601_string()
    assert user_manager.get_user(user.id).item['lastLoginAt'] == now.to_iso8601_string()

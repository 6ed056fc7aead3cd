import logging
import uuid

import bcrypt
import pendulum

from .dynamo import UserDynamo
from .exceptions import UserEmailAlreadyExists
from .model import User
from .validation import validate_user_registration

logger = logging.getLogger()


class UserManager:

    password_hash_rounds = 10

    def __init__(self, clients, managers=None):
        managers = managers if managers is not None else {}
        managers['user'] = self

        self.clients = clients
        if 'dynamo' in clients:
            self.dynamo = UserDynamo(clients['dynamo'])

    def get_user(self, user_id, strongly_consistent=False):
        user_item = self.dynamo.get_user(user_id, strongly_consistent=strongly_consistent)
        return self.init_user(user_item) if user_item else None

    def get_user_by_email(self, email):
        user_item = self.dynamo.get_user_by_email(email)
        return self.init_user(user_item) if user_item else None

    def init_user(self, user_item):
        return User(user_item, self.dynamo)

    def hash_password(self, password):
        # bcrypt only looks at the first 72 bytes
        return bcrypt.hashpw(password.encode('utf-8')[:72], bcrypt.gensalt(rounds=self.password_hash_rounds)).decode()

    def register_user(self, data, now=None):
        """
        Register a new user.
        Email uniqueness is a check-before-write, so two racing registrations can both succeed.
        """
        record = validate_user_registration(data)
        if self.dynamo.get_user_by_email(record['email']):
            raise UserEmailAlreadyExists(record['email'])

        user_id = str(uuid.uuid4())
        password_hash = self.hash_password(record['password']) if record.get('password') else None
        user_item = self.dynamo.add_user(user_id, record['email'], record['name'], password_hash=password_hash, now=now)
        logger.info(f'Registered user `{user_id}`')
        return self.init_user(user_item)

    def authenticate(self, email, password, now=None):
        "Return the user if the email & password match, else None"
        user = self.get_user_by_email(email)
        if not user or not user.check_password(password):
            return None
        user.item = self.dynamo.set_last_login_at(user.id, now=now) or user.item
        return user

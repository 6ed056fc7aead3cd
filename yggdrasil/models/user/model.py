import logging

import bcrypt

from yggdrasil.utils.items import strip_keys

logger = logging.getLogger()


class User:
    def __init__(self, user_item, user_dynamo):
        assert user_item.get('EntityType') == 'User', f'Not a user item: `{user_item.get("EntityType")}`'
        self.dynamo = user_dynamo
        self.item = user_item
        self.id = user_item['userId']
        self.email = user_item['email']
        self.name = user_item['name']

    def serialize(self):
        return strip_keys(self.item, exclude=('passwordHash',))

    def check_password(self, password):
        "Users without a password hash authenticate elsewhere, and never match"
        password_hash = self.item.get('passwordHash')
        if not password_hash or not password:
            return False
        return bcrypt.checkpw(password.encode('utf-8')[:72], password_hash.encode('utf-8'))

from yggdrasil.exceptions import AlreadyExists


class UserAlreadyExists(AlreadyExists):
    def __init__(self, user_id):
        self.user_id = user_id
        super().__init__()

    def __str__(self):
        return f'User `{self.user_id}` already exists'


class UserEmailAlreadyExists(AlreadyExists):
    def __init__(self, email):
        self.email = email
        super().__init__()

    def __str__(self):
        return f'Email `{self.email}` is already registered'


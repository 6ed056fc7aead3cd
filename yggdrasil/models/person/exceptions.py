from yggdrasil.exceptions import AlreadyExists, NotFound, NotFoundOrUnauthorized


class PersonAlreadyExists(AlreadyExists):
    def __init__(self, person_id):
        self.person_id = person_id
        super().__init__()

    def __str__(self):
        return f'Person `{self.person_id}` already exists'


class PersonDoesNotExist(NotFound):
    def __init__(self, person_id):
        self.person_id = person_id
        super().__init__()

    def __str__(self):
        return f'Person `{self.person_id}` does not exist'


class PersonNotFoundOrUnauthorized(NotFoundOrUnauthorized):
    def __init__(self, person_id, user_id):
        self.person_id = person_id
        self.user_id = user_id
        super().__init__()

    def __str__(self):
        return f'Person `{self.person_id}` not found or not owned by user `{self.user_id}`'

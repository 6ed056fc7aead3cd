from yggdrasil.exceptions import AlreadyExists, NotFound, Unauthorized


class RelationshipAlreadyExists(AlreadyExists):
    def __init__(self, person1_id, person2_id):
        self.person1_id = person1_id
        self.person2_id = person2_id
        super().__init__()

    def __str__(self):
        return f'A relationship between persons `{self.person1_id}` and `{self.person2_id}` already exists'


class RelationshipDoesNotExist(NotFound):
    def __init__(self, relationship_id):
        self.relationship_id = relationship_id
        super().__init__()

    def __str__(self):
        return f'Relationship `{self.relationship_id}` does not exist'


class RelationshipUnauthorized(Unauthorized):
    def __init__(self, person_id, user_id):
        self.person_id = person_id
        self.user_id = user_id
        super().__init__()

    def __str__(self):
        return f'User `{self.user_id}` may not change the relationships of person `{self.person_id}`'

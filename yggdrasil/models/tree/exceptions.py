from yggdrasil.exceptions import AlreadyExists, NotFound, NotFoundOrUnauthorized


class TreeAlreadyExists(AlreadyExists):
    def __init__(self, tree_id):
        self.tree_id = tree_id
        super().__init__()

    def __str__(self):
        return f'Tree `{self.tree_id}` already exists'


class TreeDoesNotExist(NotFound):
    def __init__(self, tree_id):
        self.tree_id = tree_id
        super().__init__()

    def __str__(self):
        return f'Tree `{self.tree_id}` does not exist'


class TreeNotFoundOrUnauthorized(NotFoundOrUnauthorized):
    def __init__(self, tree_id, user_id):
        self.tree_id = tree_id
        self.user_id = user_id
        super().__init__()

    def __str__(self):
        return f'Tree `{self.tree_id}` not found or not owned by user `{self.user_id}`'

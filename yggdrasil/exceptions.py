class YggdrasilException(Exception):
    pass


class ValidationError(YggdrasilException):
    "Input failed validation. `errors` lists every violated rule as {'field': ..., 'message': ...}"

    def __init__(self, errors):
        self.errors = list(errors)
        super().__init__()

    def __str__(self):
        return 'Validation failed: ' + '; '.join(f'{e["field"]}: {e["message"]}' for e in self.errors)

    @property
    def fields(self):
        return [e['field'] for e in self.errors]


class NotFound(YggdrasilException):
    pass


class Unauthorized(YggdrasilException):
    pass


class NotFoundOrUnauthorized(NotFound, Unauthorized):
    "Deliberately does not tell the caller which of the two it was"
    pass


class AlreadyExists(YggdrasilException):
    pass


class StoreError(YggdrasilException):
    "The underlying store call failed for infrastructure reasons"

    def __init__(self, operation, message=None):
        self.operation = operation
        self.message = message
        super().__init__()

    def __str__(self):
        return f'Store operation `{self.operation}` failed' + (f': {self.message}' if self.message else '')


class PartialWriteError(StoreError):
    "A batch write was only partially applied. `unprocessed` holds the operations that were not"

    def __init__(self, unprocessed):
        self.unprocessed = unprocessed
        super().__init__('batch_write', f'{len(unprocessed)} operation(s) left unprocessed')

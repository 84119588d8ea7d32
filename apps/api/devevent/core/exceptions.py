class ServiceError(Exception):
    def __init__(self, code: str, message: str | None = None, field: str | None = None) -> None:
        self.code = code
        self.message = message or code
        self.field = field
        super().__init__(self.message)


class NotFoundError(ServiceError):
    pass


class ConflictError(ServiceError):
    pass


class UniquenessConflictError(ConflictError):
    pass


class ValidationError(ServiceError):
    pass


class ReferentialIntegrityError(ServiceError):
    pass


class DatabaseError(ServiceError):
    pass


class DatabaseConnectionError(DatabaseError):
    """Database unreachable or timed out; safe for the caller to retry."""

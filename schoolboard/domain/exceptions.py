"""Domain-specific exceptions — framework-independent."""


class EntityNotFoundError(Exception):
    """Raised when a requested entity does not exist."""

    def __init__(self, entity_type: str, entity_id: int | str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} with id '{entity_id}' not found")


class DuplicateEntityError(Exception):
    """Raised when attempting to create a duplicate entity."""

    def __init__(self, entity_type: str, field: str, value: str):
        self.entity_type = entity_type
        self.field = field
        self.value = value
        super().__init__(f"{entity_type} with {field}='{value}' already exists")


class InvalidFilterError(ValueError):
    """Raised when a filter key or value is outside the entity's domain."""

    def __init__(self, entity_type: str, key: str, value: str | None = None):
        self.entity_type = entity_type
        self.key = key
        self.value = value
        if value is None:
            message = f"{entity_type} cannot be filtered by '{key}'"
        else:
            message = f"'{value}' is not a valid {entity_type}.{key} value"
        super().__init__(message)


class InvalidStatusTransitionError(ValueError):
    """Raised when a status value does not belong to the entity's status enum."""

    def __init__(self, entity_type: str, status: str):
        self.entity_type = entity_type
        self.status = status
        super().__init__(f"'{status}' is not a valid {entity_type} status")


# ── Backend API errors ───────────────────────────────────────────────


class ApiError(Exception):
    """Base class for failures talking to the school backend.

    Every subclass carries a user-presentable ``message``.
    """

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class NetworkError(ApiError):
    """The request never reached the server or no response came back."""


class AuthError(ApiError):
    """Credentials are missing locally or were rejected by the server."""

    def __init__(self, message: str = "Authentication required. Please log in."):
        super().__init__(message)


class ServerError(ApiError):
    """The server answered with a non-2xx status and a structured message."""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        super().__init__(message)

    def __str__(self) -> str:
        return f"{self.status_code}: {self.message}"


class ParseError(ApiError):
    """A 2xx response whose envelope is missing the expected shape."""

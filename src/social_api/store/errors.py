"""Error kinds raised by the storage layer."""


class StoreError(Exception):
    """Base exception for storage errors."""

    def __init__(self, message: str = "Storage error") -> None:
        super().__init__(message)


class NotFoundError(StoreError):
    """Raised when an entity (or a version-matched row) does not exist."""

    def __init__(self, message: str = "Resource not found") -> None:
        super().__init__(message)


class ConflictError(StoreError):
    """Raised when a write collides with existing state."""

    def __init__(self, message: str = "Resource already exists") -> None:
        super().__init__(message)


class DuplicateEmailError(ConflictError):
    """Raised when the email is already registered."""

    def __init__(self, message: str = "A user with that email already exists") -> None:
        super().__init__(message)


class DuplicateUsernameError(ConflictError):
    """Raised when the username is already taken."""

    def __init__(self, message: str = "A user with that username already exists") -> None:
        super().__init__(message)


class VersionConflictError(ConflictError):
    """Raised when an update carries a stale version of an existing row."""

    def __init__(self, message: str = "Resource was modified concurrently") -> None:
        super().__init__(message)


class SelfFollowError(StoreError):
    """Raised when a user tries to follow themself."""

    def __init__(self, message: str = "Users cannot follow themselves") -> None:
        super().__init__(message)


class InternalError(StoreError):
    """Raised for any unclassified persistence failure (connectivity, timeout, ...)."""

    def __init__(self, message: str = "The server encountered a problem") -> None:
        super().__init__(message)

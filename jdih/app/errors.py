"""Domain errors raised by the query, feed and download paths."""


class CatalogError(Exception):
    """Base class for catalog errors."""


class QueryValidationError(CatalogError):
    """Malformed or out-of-range request parameter.

    Raised before any query executes.
    """

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


class NotFoundError(CatalogError):
    """Referenced document/type does not resolve or is not published."""

    def __init__(self, message: str = "Not found") -> None:
        super().__init__(message)
        self.message = message


class FileMissingError(NotFoundError):
    """Document record exists but its stored file does not."""

    def __init__(self, message: str = "File not found") -> None:
        super().__init__(message)


class StorageUnavailableError(CatalogError):
    """The document store cannot be reached."""

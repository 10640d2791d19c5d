"""Domain exceptions raised by the store and the export transform."""


class StoreError(Exception):
    """Unexpected failure inside the bookmark store."""

    status_code: int = 500
    message: str = "internal store error"

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)


class ConflictError(StoreError):
    """Raised when a write would violate the unique url constraint."""

    status_code = 409
    message = "bookmark for this url already exists"


class NotFoundError(StoreError):
    """Raised when no bookmark matched the given id."""

    status_code = 404
    message = "bookmark not found"


class StoreUnavailableError(StoreError):
    """Raised when the database cannot be reached."""

    message = "bookmark store is unavailable"


class ExportError(Exception):
    """Raised when a bookmark cannot be encoded into the export document."""

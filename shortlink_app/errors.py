"""
Domain errors for the shortlink service.

Every error carries the HTTP status it maps to and the message shown to
clients. Services raise them; the exception handler in main.py turns them
into responses.
"""

from fastapi import status


class ShortlinkError(Exception):
    """Base class for all shortlink errors"""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail: str = "Internal server error"

    def __init__(self, message: str = None):
        super().__init__(message or self.detail)


class SymbolNotFoundError(ShortlinkError):
    """No redirect is registered for the requested symbol"""

    status_code = status.HTTP_404_NOT_FOUND
    detail = ""

    def __init__(self, symbol: str):
        self.symbol = symbol
        super().__init__(f"No redirect for symbol '{symbol}'")


class StorageLoadFailedError(ShortlinkError):
    """
    The data file could not be read or parsed.

    Never surfaced to clients: the store logs it and starts empty.
    """


class StorageSaveFailedError(ShortlinkError):
    """The data file could not be written. In-memory state is kept."""

    detail = "Could not save"


class AllocationExhaustedError(ShortlinkError):
    """Every candidate produced by the keyed strategy is already taken"""

    detail = "Could not allocate a symbol"


class LockPoisonedError(ShortlinkError):
    """An allocation crashed while holding the cursor lock"""

    detail = "Server is poisoned"


class MissingSecretError(ShortlinkError):
    """A required secret is not configured"""

    detail = "Server is misconfigured"


class AuthorizationError(ShortlinkError):
    """Caller is not permitted to mutate redirects"""

    status_code = status.HTTP_401_UNAUTHORIZED
    detail = "Authorization failed"

    def __init__(self, message: str = None):
        super().__init__(message)
        self.detail = str(self)

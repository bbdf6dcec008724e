"""Exceptions related to Data Access Objects (DAO) operations.

Classes:
    DAOError:
        Generic base class for DAO-related exceptions.

    ShortURLNotFoundError:
        Raised when a short URL record is not found in the document store.

    DataStoreError:
        Raised when there is an error in the data store (e.g., connection issues, timeouts, OOM, etc.).

    DocumentCorruptedError:
        Raised when a stored document can't be decoded.

    StorageUnavailableError:
        Raised (or recorded) when a storage read or write failed and the caller
        degraded to its in-memory state.

Example:
    >>> from localshortener.dao.exceptions import ShortURLNotFoundError
    >>> raise ShortURLNotFoundError("Short URL with code 'abc123' not found.")
    Traceback (most recent call last):
        ...
    localshortener.dao.exceptions.ShortURLNotFoundError: Short URL with code 'abc123' not found.
"""

from localshortener.exceptions import ShortenerError


class DAOError(ShortenerError):
    """Generic base class for DAO-related exceptions."""

    error_code = 'dao:dao_error'


class ShortURLNotFoundError(DAOError):
    """Raised when a short URL record is not found in the document store."""

    error_code = 'dao:short_url_not_found_error'


class DataStoreError(DAOError):
    """Raised when the data store encounters an error.

    Examples include connection issues, timeouts, and out-of-memory failures.
    """

    error_code = 'dao:data_store_error'


class DocumentCorruptedError(DataStoreError):
    """Raised when a stored document isn't valid JSON or has an unexpected shape."""

    error_code = 'dao:document_corrupted_error'


class StorageUnavailableError(DAOError):
    """Raised when persistence failed and the caller fell back to in-memory state.

    Attributes:
        operation (str):
            Either 'load' or 'save'.
    """

    error_code = 'dao:storage_unavailable_error'

    def __init__(self, message: str = '', *, operation: str | None = None):
        super().__init__(message)
        self.operation = operation

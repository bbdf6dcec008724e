"""Best-effort persistence of record collections

Reads and writes go through a DocumentBaseDAO as whole-document replace
operations. Storage failures never propagate: reads fall back to the last
known in-memory copy (empty at first) and failed writes still update that
copy, which is served instead of the store until a later write succeeds.
The latest failure is kept as a StorageUnavailableError so callers can
report it on demand.
"""

import logging
from collections.abc import Callable
from typing import Any

from localshortener.dao.base import DocumentBaseDAO
from localshortener.dao.exceptions import DataStoreError, StorageUnavailableError


logger = logging.getLogger(__name__)


class BestEffortCollection[T]:
    """Typed view over the 'items' list of a stored document.

    Attributes:
        dao (DocumentBaseDAO):
            Document store access.
        error (StorageUnavailableError | None):
            Failure of the latest load or save, None if it succeeded.
        dirty (bool):
            True while the in-memory copy holds changes the store hasn't
            accepted. Reads then serve the in-memory copy (and keep reporting
            the failed save) until a later write succeeds.
    """

    def __init__(
        self,
        dao: DocumentBaseDAO,
        decode: Callable[[dict[str, Any]], T],
        encode: Callable[[T], dict[str, Any]],
    ):
        self.dao = dao
        self.decode = decode
        self.encode = encode
        self.error: StorageUnavailableError | None = None
        self.dirty = False
        self._items: list[T] = []

    def read(self) -> list[T]:
        if self.dirty:
            return list(self._items)

        try:
            document = self.dao.load()
            items = [self.decode(item) for item in document['items']]
        except (DataStoreError, KeyError, TypeError, ValueError) as e:
            self._fail('load', e)
        else:
            self._items = items
            self.error = None
        return list(self._items)

    def write(self, items: list[T]) -> None:
        self._items = list(items)
        try:
            self.dao.save({'items': [self.encode(item) for item in items]})
        except DataStoreError as e:
            self._fail('save', e)
            self.dirty = True
        else:
            self.error = None
            self.dirty = False

    def _fail(self, operation: str, error: Exception) -> None:
        logger.warning(
            'Storage %s failed. Continuing with in-memory state.',
            operation,
            extra={'operation': operation, 'reason': str(error), 'error': error.__class__.__name__},
        )
        self.error = StorageUnavailableError(f'Storage {operation} failed: {error}', operation=operation)
        self.error.__cause__ = error

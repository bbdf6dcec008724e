"""Diagnostic event log

A capped, most-recent-first list of `{id, timestamp, event, payload}` entries
persisted as its own document, separate from the short URL records.

Example:
    >>> from localshortener.dao import DocumentMemoryDAO
    >>> log = EventLog(DocumentMemoryDAO(document='logs'))
    >>> log.log('url_created', {'shortcode': 'abc123'}).event
    'url_created'
    >>> [entry.event for entry in log.entries()]
    ['url_created']
"""

import uuid
import logging
from datetime import datetime, UTC
from typing import Any

from localshortener.constants import Limits
from localshortener.dao.base import DocumentBaseDAO
from localshortener.dao.exceptions import StorageUnavailableError
from localshortener.models import EventLogEntryModel
from localshortener.registry.storage import BestEffortCollection


logger = logging.getLogger(__name__)


class EventLog:
    def __init__(self, dao: DocumentBaseDAO, capacity: int = Limits.EVENT_LOG_CAPACITY):
        if capacity <= 0:
            raise ValueError(f'Capacity must be a positive integer (given value: {capacity}).')

        self.capacity = capacity
        self._entries = BestEffortCollection(dao, decode=EventLogEntryModel.from_dict, encode=EventLogEntryModel.to_dict)

    @property
    def storage_error(self) -> StorageUnavailableError | None:
        return self._entries.error

    def log(self, event: str, payload: dict[str, Any] | None = None) -> EventLogEntryModel:
        """Prepend an entry, dropping the oldest ones beyond capacity."""
        entry = EventLogEntryModel(
            id=str(uuid.uuid4()),
            timestamp=datetime.now(UTC),
            event=str(event),
            payload=dict(payload or {}),
        )
        entries = [entry, *self._entries.read()][: self.capacity]
        self._entries.write(entries)

        logger.debug('Logged event %s.', entry.event, extra={'event': entry.event, 'payload': entry.payload})
        return entry

    def entries(self) -> list[EventLogEntryModel]:
        """Return all entries, most recent first."""
        return self._entries.read()

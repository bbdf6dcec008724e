from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from localshortener.utils.helpers import to_iso8601, from_iso8601


@dataclass(frozen=True)
class EventLogEntryModel:
    """Represent one diagnostic event log entry."""

    id: str
    timestamp: datetime
    event: str
    payload: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            'id': self.id,
            'timestamp': to_iso8601(self.timestamp),
            'event': self.event,
            'payload': self.payload,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> 'EventLogEntryModel':
        return cls(
            id=str(data['id']),
            timestamp=from_iso8601(data['timestamp']),
            event=str(data['event']),
            payload=dict(data.get('payload') or {}),
        )

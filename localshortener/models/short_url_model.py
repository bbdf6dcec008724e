from dataclasses import dataclass, field, replace
from datetime import datetime, UTC
from typing import Any

from localshortener.utils.helpers import to_iso8601, from_iso8601


@dataclass(frozen=True)
class ClickModel:
    """Represent a single visit of a short URL.

    Attributes:
        timestamp (datetime):
            When the click happened (UTC).
        locale (str):
            Coarse locale of the visitor, e.g. 'en-US'.
        timezone (str):
            Coarse timezone of the visitor, e.g. 'Europe/Sofia'.
    """

    timestamp: datetime
    locale: str = 'unknown'
    timezone: str = 'unknown'

    def to_dict(self) -> dict[str, Any]:
        return {
            'timestamp': to_iso8601(self.timestamp),
            'locale': self.locale,
            'timezone': self.timezone,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> 'ClickModel':
        return cls(
            timestamp=from_iso8601(data['timestamp']),
            locale=data.get('locale') or 'unknown',
            timezone=data.get('timezone') or 'unknown',
        )


@dataclass(frozen=True)
class ShortURLModel:
    """Represent a shortend URL mapping.

    Records are immutable. Recording a click produces a new record through
    `with_click()`; nothing else about a record ever changes after creation.

    Attributes:
        id (str):
            Unique identifier generated at creation.
        shortcode (str):
            The unique short identifier representing the shortened URL.
        target (str):
            The original long URL that the short code redirects to.
        created_at (datetime):
            Creation time (UTC).
        expires_at (datetime):
            Time after which the short URL no longer redirects. Expired records
            are kept for statistics.
        clicks (tuple[ClickModel, ...]):
            Append-only sequence of visits, oldest first.

    Example:
        >>> from datetime import datetime, timedelta, UTC
        >>> now = datetime.now(UTC)
        >>> url = ShortURLModel(
        ...     id='5f0c...',
        ...     shortcode='abc123',
        ...     target='https://example.com/article/123',
        ...     created_at=now,
        ...     expires_at=now + timedelta(minutes=30),
        ... )
        >>> url.is_live(now)
        True
        >>> url.click_count
        0
    """

    id: str
    shortcode: str
    target: str
    created_at: datetime
    expires_at: datetime
    clicks: tuple[ClickModel, ...] = field(default_factory=tuple)

    @property
    def click_count(self) -> int:
        return len(self.clicks)

    def is_live(self, now: datetime | None = None) -> bool:
        """Return True while `now` is strictly before the expiry time."""
        now = now or datetime.now(UTC)
        return now < self.expires_at

    def with_click(self, click: ClickModel) -> 'ShortURLModel':
        return replace(self, clicks=(*self.clicks, click))

    def to_dict(self) -> dict[str, Any]:
        """Serialize into the persisted document representation."""
        return {
            'id': self.id,
            'shortcode': self.shortcode,
            'longUrl': self.target,
            'createdAt': to_iso8601(self.created_at),
            'expireAt': to_iso8601(self.expires_at),
            'clicks': [click.to_dict() for click in self.clicks],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> 'ShortURLModel':
        """Deserialize from the persisted document representation.

        Raises:
            KeyError, TypeError, ValueError:
                If the stored record is malformed.
        """
        return cls(
            id=str(data['id']),
            shortcode=str(data['shortcode']),
            target=str(data['longUrl']),
            created_at=from_iso8601(data['createdAt']),
            expires_at=from_iso8601(data['expireAt']),
            clicks=tuple(ClickModel.from_dict(click) for click in data.get('clicks') or []),
        )

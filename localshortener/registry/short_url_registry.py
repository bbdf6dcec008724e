"""Short URL registry

The registry owns every ShortURLModel: it validates shorten requests, assigns
shortcodes, evaluates expiry and records clicks. All records live in a single
document (`{"items": [...]}`, most recent first) accessed through an injected
DocumentBaseDAO.

Responsibilities:
    - Validate shorten requests (URL, validity period, custom shortcode);
    - Keep shortcodes unique across the whole registry;
    - Create batches of records all-or-nothing;
    - Resolve records with or without expiry checks;
    - Append click events;
    - Persist on a best-effort basis and report storage failures on demand.

Classes:
    ShortURLRegistry:
        Registry of short URL records backed by a document DAO.

Example:
    >>> from localshortener.dao import DocumentMemoryDAO
    >>> from localshortener.registry import ShortURLRegistry

    >>> registry = ShortURLRegistry(DocumentMemoryDAO())
    >>> short_url = registry.create('https://example.com/page', validity_minutes=5, shortcode='page1')
    >>> registry.resolve_live('page1').target
    'https://example.com/page'
    >>> registry.create('https://example.com/other', shortcode='page1')
    Traceback (most recent call last):
        ...
    localshortener.exceptions.ShortcodeCollisionError: Shortcode 'page1' is already taken.
"""

import uuid
import builtins
import random
import logging
from datetime import datetime, timedelta, UTC
from collections.abc import Sequence
from typing import Any

from localshortener.constants import TTL, Limits, Shortcode, Event
from localshortener.dao.base import DocumentBaseDAO
from localshortener.dao.exceptions import ShortURLNotFoundError, StorageUnavailableError
from localshortener.exceptions import (
    ValidationError,
    InvalidUrlError,
    InvalidValidityError,
    InvalidShortcodeError,
    ShortcodeCollisionError,
    InvalidBatchError,
    ShortcodeGenerationError,
    ShortURLExpiredError,
)
from localshortener.models import ShortURLModel, ClickModel, ShortenRequestModel
from localshortener.registry.event_log import EventLog
from localshortener.registry.storage import BestEffortCollection
from localshortener.utils.shortener import generate_shortcode
from localshortener.utils.validators import is_valid_url, is_valid_shortcode, is_provided, parse_validity


logger = logging.getLogger(__name__)


class ShortURLRegistry:
    """Registry of short URL records

    Attributes:
        event_log (EventLog | None):
            Optional diagnostic event log.
        rng (random.Random | None):
            Random source for generated shortcodes (None means OS entropy).
        default_validity_minutes (int):
            Validity applied when a request doesn't specify one.
        max_batch_size (int):
            Maximum number of rows accepted by create_batch().
        max_generation_attempts (int):
            Upper bound of random draws per generated shortcode.

    Methods:
        create(long_url, validity_minutes=None, shortcode=None) -> ShortURLModel
        create_batch(requests) -> list[ShortURLModel]
        resolve(shortcode) -> ShortURLModel
        resolve_live(shortcode) -> ShortURLModel
        record_click(shortcode, locale=None, timezone=None) -> ShortURLModel | None
        list() -> list[ShortURLModel]
    """

    def __init__(
        self,
        dao: DocumentBaseDAO,
        event_log: EventLog | None = None,
        rng: random.Random | None = None,
        default_validity_minutes: int = TTL.DEFAULT_VALIDITY_MINUTES,
        max_batch_size: int = Limits.MAX_BATCH_SIZE,
        max_generation_attempts: int = Shortcode.MAX_GENERATION_ATTEMPTS,
    ):
        self._records = BestEffortCollection(dao, decode=ShortURLModel.from_dict, encode=ShortURLModel.to_dict)
        self.event_log = event_log
        self.rng = rng
        self.default_validity_minutes = parse_validity(default_validity_minutes) or TTL.DEFAULT_VALIDITY_MINUTES
        self.max_batch_size = max_batch_size
        self.max_generation_attempts = max_generation_attempts

    @property
    def storage_error(self) -> StorageUnavailableError | None:
        """Failure of the latest storage operation, None if it succeeded."""
        return self._records.error

    @property
    def storage_available(self) -> bool:
        return self._records.error is None

    def create(self, long_url: Any, validity_minutes: Any = None, shortcode: Any = None) -> ShortURLModel:
        """Validate and store a single short URL

        Args:
            long_url (str):
                Absolute http/https URL to shorten.
            validity_minutes (int | str | None):
                Positive number of minutes the link stays live.
                Defaults to `default_validity_minutes`.
            shortcode (str | None):
                Desired 3-15 character alphanumeric shortcode.
                A random 7-character one is generated when omitted.

        Returns:
            ShortURLModel: the stored record.

        Raises:
            InvalidUrlError, InvalidValidityError, InvalidShortcodeError, ShortcodeCollisionError:
                If the request is rejected. Nothing is stored.
            ShortcodeGenerationError:
                If no unique shortcode could be drawn.
        """
        try:
            [short_url] = self._create_many([ShortenRequestModel(long_url, validity_minutes, shortcode)])
        except ValidationError as error:
            error.row = None
            raise
        return short_url

    def create_batch(self, requests: Sequence[ShortenRequestModel]) -> builtins.list[ShortURLModel]:
        """Validate and store a batch of short URLs, all-or-nothing

        Every row is validated before anything is persisted. The first invalid
        row aborts the whole batch: its error carries the 1-based `row` number
        and the registry is left untouched.

        Args:
            requests (Sequence[ShortenRequestModel]):
                1 to `max_batch_size` rows.

        Returns:
            list[ShortURLModel]: the stored records, in row order.

        Raises:
            InvalidBatchError:
                If the batch is empty or too large.
            InvalidUrlError, InvalidValidityError, InvalidShortcodeError, ShortcodeCollisionError:
                If a row is rejected.
            ShortcodeGenerationError:
                If no unique shortcode could be drawn.
        """
        if not 0 < len(requests) <= self.max_batch_size:
            raise InvalidBatchError(f'A batch must hold between 1 and {self.max_batch_size} URLs (given: {len(requests)}).')
        return self._create_many(requests)

    def resolve(self, shortcode: str) -> ShortURLModel:
        """Return the record for a shortcode, expired or not

        Raises:
            ShortURLNotFoundError: If no record has this shortcode.
        """
        for short_url in self._records.read():
            if short_url.shortcode == shortcode:
                return short_url
        raise ShortURLNotFoundError(f"Short URL with code '{shortcode}' not found.")

    def resolve_live(self, shortcode: str) -> ShortURLModel:
        """Return the record for a shortcode only while it is live

        A record is live strictly before its expiry time. Exactly at
        `expires_at` it is already expired.

        Raises:
            ShortURLNotFoundError: If no record has this shortcode.
            ShortURLExpiredError: If the record exists but has expired.
        """
        short_url = self.resolve(shortcode)
        if not short_url.is_live(datetime.now(UTC)):
            raise ShortURLExpiredError(f"Short URL with code '{shortcode}' expired at {short_url.expires_at.isoformat()}.")
        return short_url

    def list(self) -> builtins.list[ShortURLModel]:
        """Return all records, most recent first (expired ones included)."""
        return self._records.read()

    def record_click(self, shortcode: str, locale: str | None = None, timezone: str | None = None) -> ShortURLModel | None:
        """Append a click event to a record

        Returns:
            ShortURLModel | None: the updated record, None if the shortcode doesn't exist.
        """
        records = self._records.read()
        for index, short_url in enumerate(records):
            if short_url.shortcode == shortcode:
                break
        else:
            logger.debug('Ignoring click on unknown shortcode.', extra={'shortcode': shortcode})
            return None

        click = ClickModel(timestamp=datetime.now(UTC), locale=locale or 'unknown', timezone=timezone or 'unknown')
        records[index] = short_url.with_click(click)
        self._records.write(records)

        self._log(Event.CLICK_RECORDED, {'shortcode': shortcode, 'locale': click.locale, 'timezone': click.timezone})
        return records[index]

    def _create_many(self, requests: Sequence[ShortenRequestModel]) -> builtins.list[ShortURLModel]:
        records = self._records.read()
        taken = {short_url.shortcode for short_url in records}

        # 1- Validate every row before touching the store
        validated = []
        for row, request in enumerate(requests, start=1):
            try:
                validated.append(self._validate(request, taken))
            except ValidationError as error:
                error.row = row
                logger.info(
                    'Rejected shorten batch.',
                    extra={'row': row, 'reason': error.message, 'error': error.__class__.__name__},
                )
                self._log(Event.BATCH_REJECTED, {'row': row, 'error': error.__class__.__name__, 'reason': error.message})
                raise

        # 2- Assign shortcodes to rows that didn't ask for one
        now = datetime.now(UTC)
        created = []
        for target, minutes, shortcode in validated:
            if shortcode is None:
                shortcode = self._unique_shortcode(taken)
                taken.add(shortcode)
            created.append(
                ShortURLModel(
                    id=str(uuid.uuid4()),
                    shortcode=shortcode,
                    target=target,
                    created_at=now,
                    expires_at=now + timedelta(minutes=minutes),
                )
            )

        # 3- Persist (most recent first), then report
        self._records.write([*reversed(created), *records])
        for short_url in created:
            logger.info(
                'Created short URL.',
                extra={'shortcode': short_url.shortcode, 'target': short_url.target, 'expiresAt': short_url.expires_at.isoformat()},
            )
            self._log(Event.URL_CREATED, {'shortcode': short_url.shortcode, 'longUrl': short_url.target})
        return created

    def _validate(self, request: ShortenRequestModel, taken: set[str]) -> tuple[str, int, str | None]:
        """Validate one row, reserving its desired shortcode in `taken`"""
        long_url = request.long_url.strip() if isinstance(request.long_url, str) else request.long_url
        if not is_valid_url(long_url):
            raise InvalidUrlError(f'{long_url!r} is not a valid absolute http(s) URL.' if long_url else 'A long URL is required.')

        try:
            minutes = parse_validity(request.validity) or self.default_validity_minutes
        except ValueError as e:
            raise InvalidValidityError(str(e)) from e

        shortcode = request.shortcode if is_provided(request.shortcode) else None
        if shortcode is not None:
            if not is_valid_shortcode(shortcode):
                raise InvalidShortcodeError(
                    f'Shortcode {shortcode!r} must be {Shortcode.MIN_LENGTH}-{Shortcode.MAX_LENGTH} letters or digits.'
                )
            if shortcode in taken:
                raise ShortcodeCollisionError(f"Shortcode '{shortcode}' is already taken.")
            taken.add(shortcode)

        return long_url, minutes, shortcode

    def _unique_shortcode(self, taken: set[str]) -> str:
        for _ in range(self.max_generation_attempts):
            shortcode = generate_shortcode(rng=self.rng)
            if shortcode not in taken:
                return shortcode
        raise ShortcodeGenerationError(f'No unique shortcode found after {self.max_generation_attempts} attempts.')

    def _log(self, event: str, payload: dict[str, Any]) -> None:
        if self.event_log is not None:
            self.event_log.log(event, payload)

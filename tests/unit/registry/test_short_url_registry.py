"""Unit tests for ShortURLRegistry

Test coverage includes:

1. Single short URL creation
   - Ensures defaults (generated shortcode, default validity) are applied.
   - Ensures custom shortcodes and validity periods are honored.
   - Confirms invalid URLs, shortcodes and validity periods are rejected without mutation.
   - Confirms shortcode collisions are rejected without mutation.

2. Shortcode generation
   - Ensures generated shortcodes are unique and redrawn on collision.
   - Confirms exhausted redraws raise ShortcodeGenerationError.

3. Batch creation
   - Ensures rows are created in order and stored most recent first.
   - Confirms a single invalid row rejects the whole batch and reports its row.
   - Confirms batch size limits.

4. Resolution and expiry
   - Ensures records are live strictly before expires_at.

5. Click recording

6. Best-effort storage
   - Confirms storage failures never propagate and are reported on demand.
"""

import json
import random
from datetime import datetime, timedelta, UTC

import pytest
from freezegun import freeze_time

from localshortener.dao.exceptions import ShortURLNotFoundError
from localshortener.exceptions import (
    InvalidUrlError,
    InvalidValidityError,
    InvalidShortcodeError,
    ShortcodeCollisionError,
    InvalidBatchError,
    ShortcodeGenerationError,
    ShortURLExpiredError,
)
from localshortener.models import ShortenRequestModel
from localshortener.registry import ShortURLRegistry
from localshortener.utils.shortener import ALPHABET


class ScriptedRandom(random.Random):
    """Random source drawing characters from a fixed script."""

    def __init__(self, script: str):
        super().__init__(0)
        self.script = iter(script)

    def choice(self, seq):
        return next(self.script)


def stored_document(links_dao) -> dict:
    return json.loads(links_dao.blobs[links_dao.key]) if links_dao.key in links_dao.blobs else {'items': []}


# -------------------------------
# 1. Single short URL creation
# -------------------------------


@freeze_time('2025-01-01 12:00:00')
def test_create_with_defaults(registry, links_dao):
    short_url = registry.create('https://example.com/some/long/path')

    assert short_url.target == 'https://example.com/some/long/path'
    assert len(short_url.shortcode) == 7
    assert all(char in ALPHABET for char in short_url.shortcode)
    assert short_url.created_at == datetime(2025, 1, 1, 12, 0, 0, tzinfo=UTC)
    assert short_url.expires_at == datetime(2025, 1, 1, 12, 30, 0, tzinfo=UTC)
    assert short_url.click_count == 0

    assert registry.resolve(short_url.shortcode) == short_url
    assert stored_document(links_dao)['items'] == [short_url.to_dict()]


@freeze_time('2025-01-01 12:00:00')
@pytest.mark.parametrize('validity, minutes', [(5, 5), ('15', 15), (None, 30), ('', 30)])
def test_create_with_validity(registry, validity, minutes):
    short_url = registry.create('https://example.com', validity_minutes=validity)
    assert short_url.expires_at - short_url.created_at == timedelta(minutes=minutes)


def test_create_with_custom_default_validity(links_dao):
    registry = ShortURLRegistry(links_dao, default_validity_minutes=90)
    short_url = registry.create('https://example.com')
    assert short_url.expires_at - short_url.created_at == timedelta(minutes=90)


def test_create_with_custom_shortcode(registry):
    short_url = registry.create('https://example.com', shortcode='myCode1')

    assert short_url.shortcode == 'myCode1'
    assert registry.resolve('myCode1').target == 'https://example.com'


def test_create_with_empty_shortcode_generates_one(registry):
    short_url = registry.create('https://example.com', shortcode='')
    assert len(short_url.shortcode) == 7


def test_create_strips_url(registry):
    assert registry.create('  https://example.com/page  ').target == 'https://example.com/page'


@pytest.mark.parametrize('long_url', ['not-a-url', 'ftp://example.com', 'example.com', 42])
def test_create_with_invalid_url(registry, links_dao, long_url):
    with pytest.raises(InvalidUrlError) as exc_info:
        registry.create(long_url)

    assert exc_info.value.row is None
    assert registry.list() == []
    assert links_dao.key not in links_dao.blobs


@pytest.mark.parametrize('long_url', [None, '', '   '])
def test_create_without_url(registry, long_url):
    with pytest.raises(InvalidUrlError, match='A long URL is required.'):
        registry.create(long_url)


@pytest.mark.parametrize('shortcode', ['ab', 'a' * 16, 'has space', 'dash-code', 'ünïcode'])
def test_create_with_invalid_shortcode(registry, shortcode):
    with pytest.raises(InvalidShortcodeError, match='must be 3-15 letters or digits'):
        registry.create('https://example.com', shortcode=shortcode)
    assert registry.list() == []


@pytest.mark.parametrize('validity', [0, -1, '0', 'abc', '1.5', 2.5, True])
def test_create_with_invalid_validity(registry, validity):
    with pytest.raises(InvalidValidityError, match='Validity must be a positive integer number of minutes'):
        registry.create('https://example.com', validity_minutes=validity)
    assert registry.list() == []


@pytest.mark.parametrize('validity', ['99999999999', 10**13, '9' * 40])
def test_create_with_too_long_validity(registry, validity):
    """Validity past the maximum is a validation error, not an overflow."""
    with pytest.raises(InvalidValidityError, match='Validity must not exceed') as exc_info:
        registry.create('https://example.com', validity_minutes=validity)
    assert exc_info.value.row is None
    assert registry.list() == []


def test_create_with_taken_shortcode(registry, links_dao):
    """A collision leaves the registry untouched."""
    registry.create('https://example.com/first', shortcode='taken')
    before = links_dao.blobs[links_dao.key]

    with pytest.raises(ShortcodeCollisionError, match="Shortcode 'taken' is already taken."):
        registry.create('https://example.com/second', shortcode='taken')

    assert links_dao.blobs[links_dao.key] == before
    assert registry.resolve('taken').target == 'https://example.com/first'


def test_shortcodes_are_case_sensitive(registry):
    registry.create('https://example.com/lower', shortcode='abcdef')
    registry.create('https://example.com/upper', shortcode='ABCDEF')

    assert registry.resolve('abcdef').target == 'https://example.com/lower'
    assert registry.resolve('ABCDEF').target == 'https://example.com/upper'


def test_collision_with_expired_record(registry):
    """Expired records keep their shortcode reserved."""
    with freeze_time('2025-01-01 12:00:00'):
        registry.create('https://example.com', validity_minutes=1, shortcode='old123')

    with freeze_time('2025-01-01 13:00:00'):
        with pytest.raises(ShortcodeCollisionError):
            registry.create('https://example.com', shortcode='old123')


def test_create_logs_event(registry, event_log):
    short_url = registry.create('https://example.com')

    [entry] = event_log.entries()
    assert entry.event == 'url_created'
    assert entry.payload == {'shortcode': short_url.shortcode, 'longUrl': 'https://example.com'}


# -------------------------------
# 2. Shortcode generation
# -------------------------------


def test_generated_shortcodes_are_unique(registry):
    shortcodes = {registry.create('https://example.com').shortcode for _ in range(200)}
    assert len(shortcodes) == 200
    assert len(registry.list()) == 200


def test_generated_shortcode_is_redrawn_on_collision(links_dao):
    registry = ShortURLRegistry(links_dao, rng=ScriptedRandom('a' * 7 + 'b' * 7))
    registry.create('https://example.com/first', shortcode='aaaaaaa')

    assert registry.create('https://example.com/second').shortcode == 'bbbbbbb'


def test_generated_shortcode_avoids_same_batch_codes(links_dao):
    registry = ShortURLRegistry(links_dao, rng=ScriptedRandom('a' * 7 + 'c' * 7))
    rows = [
        ShortenRequestModel(long_url='https://example.com/1', shortcode='aaaaaaa'),
        ShortenRequestModel(long_url='https://example.com/2'),
    ]

    assert [short_url.shortcode for short_url in registry.create_batch(rows)] == ['aaaaaaa', 'ccccccc']


def test_shortcode_generation_exhausted(links_dao):
    registry = ShortURLRegistry(links_dao, rng=ScriptedRandom('a' * 7 * 3), max_generation_attempts=3)
    registry.create('https://example.com/first', shortcode='aaaaaaa')

    with pytest.raises(ShortcodeGenerationError, match='after 3 attempts'):
        registry.create('https://example.com/second')

    assert [short_url.shortcode for short_url in registry.list()] == ['aaaaaaa']


# -------------------------------
# 3. Batch creation
# -------------------------------


def test_create_batch(registry):
    older = registry.create('https://example.com/older', shortcode='older')
    rows = [
        ShortenRequestModel(long_url='https://example.com/1', validity=5),
        ShortenRequestModel(long_url='https://example.com/2', shortcode='second'),
        ShortenRequestModel(long_url='https://example.com/3', validity='60'),
    ]

    created = registry.create_batch(rows)

    assert [short_url.target for short_url in created] == ['https://example.com/1', 'https://example.com/2', 'https://example.com/3']
    assert created[1].shortcode == 'second'
    assert len({short_url.shortcode for short_url in created}) == 3
    assert registry.list() == [*reversed(created), older]


def test_create_batch_is_all_or_nothing(registry, links_dao, event_log):
    rows = [
        ShortenRequestModel(long_url='https://example.com/1'),
        ShortenRequestModel(long_url='not-a-url'),
        ShortenRequestModel(long_url='https://example.com/3'),
    ]

    with pytest.raises(InvalidUrlError) as exc_info:
        registry.create_batch(rows)

    assert exc_info.value.row == 2
    assert exc_info.value.user_message.startswith('Row 2: ')
    assert registry.list() == []
    assert links_dao.key not in links_dao.blobs

    [entry] = event_log.entries()
    assert entry.event == 'batch_rejected'
    assert entry.payload['row'] == 2
    assert entry.payload['error'] == 'InvalidUrlError'


def test_create_batch_rejects_duplicate_shortcodes(registry):
    rows = [
        ShortenRequestModel(long_url='https://example.com/1', shortcode='same1'),
        ShortenRequestModel(long_url='https://example.com/2', shortcode='same1'),
    ]

    with pytest.raises(ShortcodeCollisionError) as exc_info:
        registry.create_batch(rows)

    assert exc_info.value.row == 2
    assert registry.list() == []


def test_create_batch_reports_first_invalid_row(registry):
    rows = [
        ShortenRequestModel(long_url='https://example.com/1'),
        ShortenRequestModel(long_url='https://example.com/2', validity=0),
        ShortenRequestModel(long_url='nope'),
    ]

    with pytest.raises(InvalidValidityError) as exc_info:
        registry.create_batch(rows)
    assert exc_info.value.row == 2


def test_create_batch_rejects_too_long_validity(registry):
    rows = [
        ShortenRequestModel(long_url='https://example.com/1'),
        ShortenRequestModel(long_url='https://example.com/2', validity='99999999999'),
    ]

    with pytest.raises(InvalidValidityError, match='Validity must not exceed') as exc_info:
        registry.create_batch(rows)
    assert exc_info.value.row == 2
    assert registry.list() == []


@pytest.mark.parametrize('size', [0, 6])
def test_create_batch_size_limits(registry, size):
    rows = [ShortenRequestModel(long_url=f'https://example.com/{i}') for i in range(size)]

    with pytest.raises(InvalidBatchError, match='between 1 and 5'):
        registry.create_batch(rows)


def test_create_batch_with_custom_size_limit(links_dao):
    registry = ShortURLRegistry(links_dao, max_batch_size=2)
    rows = [ShortenRequestModel(long_url='https://example.com')] * 3

    with pytest.raises(InvalidBatchError):
        registry.create_batch(rows)


# -------------------------------
# 4. Resolution and expiry
# -------------------------------


def test_resolve_unknown_shortcode(registry):
    with pytest.raises(ShortURLNotFoundError):
        registry.resolve('missing')
    with pytest.raises(ShortURLNotFoundError):
        registry.resolve_live('missing')


def test_resolve_live_expiry_boundary(registry):
    with freeze_time('2025-01-01 12:00:00') as frozen:
        registry.create('https://example.com', validity_minutes=1, shortcode='minute')

        frozen.move_to('2025-01-01 12:00:59')
        assert registry.resolve_live('minute').target == 'https://example.com'

        frozen.move_to('2025-01-01 12:01:00')
        with pytest.raises(ShortURLExpiredError):
            registry.resolve_live('minute')

        # Expired records remain listed and resolvable for statistics
        assert registry.resolve('minute').target == 'https://example.com'
        assert [short_url.shortcode for short_url in registry.list()] == ['minute']


def test_list_is_most_recent_first(registry):
    with freeze_time('2025-01-01 12:00:00') as frozen:
        registry.create('https://example.com/1', shortcode='first')
        frozen.tick(timedelta(seconds=1))
        registry.create('https://example.com/2', shortcode='second')

    assert [short_url.shortcode for short_url in registry.list()] == ['second', 'first']


# -------------------------------
# 5. Click recording
# -------------------------------


def test_record_click(registry, event_log):
    registry.create('https://example.com', shortcode='clicky')

    registry.record_click('clicky', locale='en-US', timezone='Europe/Sofia')
    updated = registry.record_click('clicky')

    assert updated.click_count == 2
    assert registry.resolve('clicky').click_count == 2
    assert updated.clicks[0].locale == 'en-US'
    assert updated.clicks[0].timezone == 'Europe/Sofia'
    assert updated.clicks[1].locale == 'unknown'
    assert [entry.event for entry in event_log.entries()][:2] == ['click_recorded', 'click_recorded']


def test_record_click_on_unknown_shortcode(registry):
    assert registry.record_click('missing') is None
    assert registry.list() == []


# -------------------------------
# 6. Best-effort storage
# -------------------------------


def test_storage_unavailable_on_read(failing_dao):
    failing_dao.fail_load = True
    registry = ShortURLRegistry(failing_dao)

    assert registry.list() == []
    assert registry.storage_available is False
    assert registry.storage_error.operation == 'load'


def test_storage_unavailable_on_write(failing_dao):
    """Creation succeeds in memory when the store is down."""
    failing_dao.fail_load = True
    failing_dao.fail_save = True
    registry = ShortURLRegistry(failing_dao)

    short_url = registry.create('https://example.com', shortcode='inmem')

    assert registry.storage_error.operation == 'save'
    assert registry.resolve('inmem') == short_url
    assert registry.storage_available is False


def test_storage_recovers(failing_dao):
    failing_dao.fail_save = True
    registry = ShortURLRegistry(failing_dao)
    registry.create('https://example.com/1')
    assert registry.storage_available is False

    failing_dao.fail_save = False
    registry.create('https://example.com/2')

    assert registry.storage_available is True
    assert registry.storage_error is None
    assert [r.target for r in registry.list()] == ['https://example.com/2', 'https://example.com/1']
    stored = json.loads(failing_dao.blobs[failing_dao.key])['items']
    assert [item['longUrl'] for item in stored] == ['https://example.com/2', 'https://example.com/1']


def test_unsaved_records_survive_store_coming_back(failing_dao):
    """A record whose save failed isn't dropped by the next successful load."""
    failing_dao.fail_save = True
    registry = ShortURLRegistry(failing_dao)
    short_url = registry.create('https://example.com', shortcode='abc123')

    failing_dao.fail_save = False

    assert registry.resolve('abc123') == short_url
    assert [r.shortcode for r in registry.list()] == ['abc123']
    assert registry.storage_error.operation == 'save'


def test_corrupted_records_are_reported(links_dao):
    links_dao.blobs[links_dao.key] = json.dumps({'items': [{'id': 'broken'}]})
    registry = ShortURLRegistry(links_dao)

    assert registry.list() == []
    assert registry.storage_error is not None

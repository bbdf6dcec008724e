"""Unit tests for the JSON log formatter in logging.py"""

import json
import logging
import sys

import pytest

from localshortener.utils.logging import JsonFormatter, initialize_logging


def make_record(msg='Created short URL.', args=(), exc_info=None, **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name='localshortener.registry.short_url_registry',
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=args,
        exc_info=exc_info,
    )
    record.__dict__.update(extra)
    return record


def test_format_includes_standard_fields():
    record = make_record('Listed %s short URL(s).', args=(3,))
    record.created = 1735732800.0  # 2025-01-01T12:00:00Z

    log = json.loads(JsonFormatter().format(record))

    assert log['timestamp'] == '2025-01-01T12:00:00.000Z'
    assert log['level'] == 'INFO'
    assert log['logger'] == 'localshortener.registry.short_url_registry'
    assert log['message'] == 'Listed 3 short URL(s).'
    assert 'msg' not in log
    assert 'args' not in log


def test_format_includes_extras():
    log = json.loads(JsonFormatter().format(make_record(shortcode='abc123', row=2)))

    assert log['shortcode'] == 'abc123'
    assert log['row'] == 2


def test_format_nests_other_extras_under_context():
    log = json.loads(JsonFormatter().format(make_record(event='URL_CREATED', target='https://example.com', expiresAt='2025-01-01T12:30:00.000Z')))

    assert log['event'] == 'URL_CREATED'
    assert log['context'] == {'target': 'https://example.com', 'expiresAt': '2025-01-01T12:30:00.000Z'}
    assert 'target' not in log


def test_format_without_extras_has_no_context():
    log = json.loads(JsonFormatter().format(make_record()))
    assert 'context' not in log
    assert list(log) == ['timestamp', 'level', 'logger', 'message']


def test_format_serializes_unknown_types():
    log = json.loads(JsonFormatter().format(make_record(path=object())))
    assert isinstance(log['context']['path'], str)


def test_format_includes_exception():
    try:
        raise RuntimeError('boom')
    except RuntimeError:
        record = make_record(exc_info=sys.exc_info())

    log = json.loads(JsonFormatter().format(record))

    assert 'RuntimeError: boom' in log['exception']


@pytest.mark.parametrize('level, expected', [('debug', logging.DEBUG), ('WARNING', logging.WARNING), (None, logging.INFO)])
def test_initialize_logging(monkeypatch, level, expected):
    if level is None:
        monkeypatch.delenv('LOG_LEVEL', raising=False)
    else:
        monkeypatch.setenv('LOG_LEVEL', level)

    root = logging.getLogger()
    original_level, original_handlers = root.level, root.handlers[:]
    try:
        initialize_logging()

        assert root.level == expected
        assert any(isinstance(handler.formatter, JsonFormatter) for handler in root.handlers)
        assert logging.getLogger('botocore').level == logging.WARNING
    finally:
        root.handlers = original_handlers
        root.setLevel(original_level)
        logging.getLogger('botocore').setLevel(logging.NOTSET)

"""Structured JSON logging for the Lambda handlers

IMPORTANT: Call `initialize_logging()` in the lambda handler's `__init__.py` file
before any other logging is done.

Every record becomes one JSON line. Fields shared by the shortener's log
calls (`event`, `shortcode`, `row`, ...) are lifted to the top level so log
queries can filter on them; any other `extra` values go under `context`:

{
    "timestamp": "2025-12-26T12:00:00.000Z",
    "level": "INFO",
    "logger": "localshortener.lambdas.shorten_url.app",
    "message": "Invalid shorten request. Responding with 400.",
    "event": "INVALID_URL",
    "row": 2,
    "context": {"target": "not-a-url"}
}
"""

import os
import json
import logging
import logging.config
from datetime import datetime, UTC

from localshortener.constants import ENV


# Top-level fields, in output order, when present in `extra`
CONTEXT_FIELDS = ('event', 'shortcode', 'row', 'view', 'operation', 'error', 'reason')

# Attributes every LogRecord has, i.e. not passed through `extra`
_RECORD_ATTRS = frozenset(logging.makeLogRecord({}).__dict__) | {'message', 'asctime'}

# Chatty third-party loggers kept at WARNING
QUIET_LOGGERS = ('botocore', 'boto3', 'urllib3')


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created, tz=UTC).isoformat(timespec='milliseconds').replace('+00:00', 'Z')
        log = {
            'timestamp': timestamp,
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }

        extras = {key: value for key, value in record.__dict__.items() if key not in _RECORD_ATTRS}
        for field in CONTEXT_FIELDS:
            if field in extras:
                log[field] = extras.pop(field)
        if extras:
            log['context'] = extras

        if record.exc_info:
            log['exception'] = self.formatException(record.exc_info)

        return json.dumps(log, default=str)


def initialize_logging() -> None:
    """Send JSON lines to stdout at LOG_LEVEL (INFO by default)."""
    log_level = os.getenv(ENV.App.LOG_LEVEL, 'INFO').upper()
    logging.config.dictConfig(
        {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {'json': {'()': JsonFormatter}},
            'handlers': {
                'stdout': {
                    'class': 'logging.StreamHandler',
                    'formatter': 'json',
                    'stream': 'ext://sys.stdout',
                }
            },
            'loggers': {name: {'level': 'WARNING'} for name in QUIET_LOGGERS},
            'root': {'level': log_level, 'handlers': ['stdout']},
        }
    )

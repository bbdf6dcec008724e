"""Helper utilities for AWS lambda functions.

Functions:
    base_url() -> str
        Extract correct public base URL from API Gateway event
    get_short_url() -> str
        Get string representation of short URL for a given shortcode
    visitor_locale() -> tuple[str, str]
        Extract coarse locale and timezone of the visitor from request headers
    to_iso8601() / from_iso8601()
        Convert UTC datetimes to and from their persisted string form
    require_environment(*names: str) -> Callable
        Decorator: Ensure required environment variables are present
    guarantee_500_response(handler) -> Callable
        Decorator: Turn unexpected handler errors into a 500 response

Example:
    Typical usage inside a Lambda handler:

        >>> from localshortener.utils.helpers import base_url
        >>> event = {
        ...     "requestContext": {
        ...         "domainName": "abc123.execute-api.us-east-1.amazonaws.com",
        ...         "stage": "Prod"
        ...     }
        ... }
        >>> base_url(event)
        'https://abc123.execute-api.us-east-1.amazonaws.com/Prod'

        >>> base_url({})
        'http://localhost:3000'
"""

import os
import json
import logging
import functools
from datetime import datetime, UTC
from typing import Any
from collections.abc import Callable

from localshortener.constants import UNKNOWN_INTERNAL_SERVER_ERROR
from localshortener.exceptions import MissingEnvironmentVariableError
from localshortener.utils.runtime import running_locally


logger = logging.getLogger(__name__)

LOCAL_HOSTS = ('localhost', '127.0.0.1')


def base_url(event: dict[str, Any]) -> str:
    """Extract public base URL from API Gateway event

    Works with both custom and default AWS API Gateway domains.
    If a custom domain is configured, the stage name is omitted.
    If using the default AWS execute-api domain, the stage name is included.

    Args:
        event (dict): API Gateway event object passed to Lambda handler

    Returns:
        str: Base URL, e.g.:
             - "https://sho.rt"
             - "https://abc123.execute-api.us-east-1.amazonaws.com/Prod"
             - "http://localhost:3000"
    """
    request_context = event.get('requestContext') or {}
    domain = request_context.get('domainName', '')
    stage = request_context.get('stage', '')

    if domain.split(':')[0] in LOCAL_HOSTS:
        return f'http://{domain}'
    elif domain and 'execute-api' not in domain:
        # If the domain is a custom domain (no execute-api), skip stage
        return f'https://{domain}'
    elif domain:
        # Otherwise include the stage (for AWS default domains)
        return f'https://{domain}/{stage}'
    else:
        # Fallback: local invocation (SAM CLI, tests, etc.)
        return 'http://localhost:3000'


def get_short_url(shortcode: str, event: dict[str, Any]) -> str:
    """Get string representation of shortened URL

    Args:
        shortcode (str): shortcode
        event (dict): API Gateway event object passed to Lambda handler

    Returns:
        str: short url string representation
    """
    return f'{base_url(event).rstrip("/")}/{shortcode}'


def visitor_locale(event: dict[str, Any]) -> tuple[str, str]:
    """Extract coarse locale and timezone of the visitor

    The locale is the first language tag of the `Accept-Language` header.
    The timezone comes from CloudFront's `CloudFront-Viewer-Time-Zone` header.
    Missing values are reported as 'unknown'.

    Args:
        event (dict): API Gateway event object passed to Lambda handler

    Returns:
        tuple[str, str]: (locale, timezone)

    Example:
        >>> visitor_locale({'headers': {'Accept-Language': 'bg-BG,bg;q=0.9,en;q=0.8'}})
        ('bg-BG', 'unknown')
    """
    headers = {k.lower(): v for k, v in (event.get('headers') or {}).items()}
    language = (headers.get('accept-language') or '').split(',')[0].split(';')[0].strip()
    timezone = (headers.get('cloudfront-viewer-time-zone') or '').strip()
    return language or 'unknown', timezone or 'unknown'


def to_iso8601(value: datetime) -> str:
    """Format a datetime as an ISO-8601 UTC string with a 'Z' suffix."""
    return value.astimezone(UTC).isoformat().replace('+00:00', 'Z')


def from_iso8601(value: str) -> datetime:
    """Parse an ISO-8601 string into an aware UTC datetime (naive values are assumed UTC)."""
    parsed = datetime.fromisoformat(value)
    return parsed.replace(tzinfo=UTC) if parsed.tzinfo is None else parsed.astimezone(UTC)


def require_environment(*names: str) -> Callable:
    """Decorator ensuring required environment variables are present.

    Args:
        *names (str):
            Names of required environment variables.

    Raises:
        MissingEnvironmentVariableError:
            If any required environment variable is missing or empty.

    Example:
        >>> @require_environment('APPCONFIG_APP_ID', 'APPCONFIG_ENV_ID')
        ... def my_function():
        ...     pass
        >>> my_function()
        MissingEnvironmentVariableError: Missing required environment variables: 'APPCONFIG_APP_ID', 'APPCONFIG_ENV_ID'
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            missing = [name for name in names if not os.environ.get(name)]
            if missing:
                missing_list = ', '.join(f"'{name}'" for name in missing)
                raise MissingEnvironmentVariableError(f'Missing required environment variables: {missing_list}')
            return func(*args, **kwargs)

        return wrapper

    return decorator


def guarantee_500_response(handler: Callable) -> Callable:
    """Decorator: respond with 500 when a Lambda handler raises unexpectedly

    When running locally the error is re-raised instead, so it shows up in
    the SAM console.
    """

    @functools.wraps(handler)
    def wrapper(event: dict[str, Any], context: Any) -> dict[str, Any]:
        try:
            return handler(event, context)
        except Exception:
            if running_locally():
                raise
            logger.exception('Unhandled error in Lambda handler. Responding with 500.', extra={'event': UNKNOWN_INTERNAL_SERVER_ERROR})
            return {
                'statusCode': 500,
                'body': json.dumps(
                    {
                        'message': 'Internal Server Error',
                        'errorCode': UNKNOWN_INTERNAL_SERVER_ERROR,
                    }
                ),
            }

    return wrapper

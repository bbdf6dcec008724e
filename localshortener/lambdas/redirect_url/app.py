import json
import logging
from typing import Any

from localshortener.constants import Redirect
from localshortener.exceptions import ConfigurationError
from localshortener.registry import RedirectResolver
from localshortener.registry.redirect_resolver import EXPIRED
from localshortener.utils import load_config, base_url, get_short_url, visitor_locale, app_prefix
from localshortener.utils.factory import build_registry
from localshortener.utils.helpers import guarantee_500_response
from localshortener.lambdas.redirect_url.constants import (
    MISSING_SHORTCODE,
    SHORT_URL_NOT_FOUND,
    SHORT_URL_EXPIRED,
    REDIRECT_SUCCESS,
)


logger = logging.getLogger(__name__)


def response_500(message: str | None = None) -> dict:
    base = 'Internal Server Error'
    body = {'message': base if not message else f'{base} ({message})'}
    return {
        'statusCode': 500,
        'body': json.dumps(body),
    }


def response_400(message: str | None = None, error_code: str | None = None) -> dict:
    base = 'Bad Request'
    body = {'message': base if not message else f'{base} ({message})'}
    if error_code:
        body['errorCode'] = error_code
    return {
        'statusCode': 400,
        'body': json.dumps(body),
    }


def response_302(*, location: str) -> dict:
    return {
        'statusCode': 302,
        'headers': {
            'Location': location,
        },
        'body': json.dumps({}),  # no body needed for redirects
    }


def response_refresh(*, location: str, delay: int) -> dict:
    """Navigate to `location` after `delay` seconds (HTTP Refresh header)"""
    return {
        'statusCode': 200,
        'headers': {
            'Refresh': f'{delay}; url={location}',
            'Content-Type': 'application/json',
        },
        'body': json.dumps({'message': f'Redirecting in {delay} second(s)', 'location': location}),
    }


@guarantee_500_response
def lambda_handler(event: dict, context: Any) -> dict:
    """Handle incoming API Gateway requests to redirect URLs

    This Lambda handler follows this procedure to redirect URLs:
    - Step 1: Extract shortcode from request path
    - Step 2: Resolve the shortcode to a live short URL record
    - Step 3: Redirect client to target URL, or back to the home view

    HTTP responses:
        200: Delayed redirect
            headers:
                Refresh: "<delay>; url=<target URL>"
        302: Immediate redirect (delay configured to 0) or fallback to home view
            headers:
                Location: target URL, or "<base url>/" when the short URL
                doesn't exist or has expired
        400: Bad client request
            message: missing shortcode in path parameters
        500: Internal server error
            message: server experienced an internal error

    Args:
        event (dict):
            API Gateway event payload containing the shortcode path parameter.
        context (LambdaContext):
            AWS Lambda runtime context object (not used directly).

    Returns:
        dict:
            API Gateway-compatible response including statusCode, headers, and body.

    Example:
        >>> event = {'pathParameters': {'shortcode': 'Gh71TCN'}}
        >>> response = lambda_handler(event, None)
        >>> response['headers']['Refresh']
        '1; url=https://example.com/my-page'
    """
    # 0- Get application's config
    try:
        app_config = load_config('redirect_url')
    except ConfigurationError:
        logger.exception('Failed to load config for redirect URL function. Responding with 500.')
        return response_500()

    settings = app_config.get('settings') or {}
    delay = int(settings.get('redirect_delay_seconds', Redirect.DEFAULT_DELAY_SECONDS))
    record_clicks = bool(settings.get('record_clicks', False))

    # 1- Extract shortcode from request's path
    shortcode = (event.get('pathParameters') or {}).get('shortcode')
    if shortcode is None:
        logger.info(
            'Missing "shortcode" in path. Responding with 400.',
            extra={'event': MISSING_SHORTCODE},
        )
        return response_400(message="missing 'shortcode' in path", error_code=MISSING_SHORTCODE)
    logger.debug('Client requested short URL %s.', get_short_url(shortcode, event))

    # 2- Resolve the shortcode to a live short URL record
    resolver = RedirectResolver(build_registry(app_config, prefix=app_prefix()), record_clicks=record_clicks)
    locale, timezone = visitor_locale(event)
    outcome = resolver.resolve_for_redirect(shortcode, locale=locale, timezone=timezone)

    # 3- Redirect client to target URL (or fall back to home view)
    if outcome.fallback:
        reason = SHORT_URL_EXPIRED if outcome.reason == EXPIRED else SHORT_URL_NOT_FOUND
        logger.info(
            'Short URL is not live. Redirecting to home view with 302.',
            extra={'shortcode': shortcode, 'event': reason},
        )
        return response_302(location=f'{base_url(event).rstrip("/")}/')

    logger.info(
        'Redirecting client to target URL.',
        extra={'shortcode': shortcode, 'event': REDIRECT_SUCCESS, 'delay': delay},
    )
    if delay <= 0:
        return response_302(location=outcome.target)
    return response_refresh(location=outcome.target, delay=delay)

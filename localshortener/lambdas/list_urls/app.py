import json
import logging
from typing import Any

from localshortener.exceptions import ConfigurationError
from localshortener.models import ShortURLModel
from localshortener.utils import load_config, get_short_url, app_prefix
from localshortener.utils.factory import build_registry
from localshortener.utils.helpers import guarantee_500_response, to_iso8601
from localshortener.lambdas.list_urls.constants import RESULTS_VIEW, STATISTICS_VIEW, INVALID_VIEW, URLS_LISTED


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


def response_200(*, view: str, links: list[dict], storage_available: bool) -> dict:
    return {
        'statusCode': 200,
        'headers': {
            'Content-Type': 'application/json',
            'Access-Control-Allow-Origin': '*',
        },
        'body': json.dumps(
            {
                'view': view,
                'count': len(links),
                'storage_available': storage_available,
                'links': links,
            }
        ),
    }


def results_row(short_url: ShortURLModel, event: dict) -> dict:
    return {
        'short_url': get_short_url(short_url.shortcode, event),
        'long_url': short_url.target,
        'expires_at': to_iso8601(short_url.expires_at),
    }


def statistics_row(short_url: ShortURLModel, event: dict) -> dict:
    return {
        'short_url': get_short_url(short_url.shortcode, event),
        'created_at': to_iso8601(short_url.created_at),
        'expires_at': to_iso8601(short_url.expires_at),
        'clicks': short_url.click_count,
    }


VIEWS = {
    RESULTS_VIEW: results_row,
    STATISTICS_VIEW: statistics_row,
}


def requested_view(event: dict) -> str:
    """Pick the listing view from `?view=` or the request path (`/statistics`)"""
    view = (event.get('queryStringParameters') or {}).get('view')
    if view:
        return view.lower()
    return STATISTICS_VIEW if (event.get('path') or '').rstrip('/').endswith(f'/{STATISTICS_VIEW}') else RESULTS_VIEW


@guarantee_500_response
def lambda_handler(event: dict, context: Any) -> dict:
    """Handle incoming API Gateway requests to list short URLs

    This Lambda handler follows this procedure to list short URLs:
    - Step 1: Determine the requested view (results or statistics)
    - Step 2: Read all short URL records (most recent first, expired included)
    - Step 3: Respond with the projection of each record for that view

    HTTP responses:
        200: Listing
            view: 'results' or 'statistics'
            count: number of records
            storage_available: False when records came from in-memory fallback
            links:
                results view: [{short_url, long_url, expires_at}]
                statistics view: [{short_url, created_at, expires_at, clicks}]
        400: Bad client request
            message: unknown view
        500: Internal server error
            message: server experienced an internal error

    Example:
        >>> event = {'path': '/statistics'}
        >>> response = lambda_handler(event, None)
        >>> json.loads(response['body'])['links'][0]['clicks']
        3
    """
    # 0- Get application's config
    try:
        app_config = load_config('list_urls')
    except ConfigurationError:
        logger.exception('Failed to load config for list URLs function. Responding with 500.')
        return response_500()

    # 1- Determine the requested view
    view = requested_view(event)
    if view not in VIEWS:
        logger.info('Unknown listing view. Responding with 400.', extra={'event': INVALID_VIEW, 'view': view})
        return response_400(message=f"unknown view '{view}'", error_code=INVALID_VIEW)

    # 2- Read all short URL records
    registry = build_registry(app_config, prefix=app_prefix())
    short_urls = registry.list()

    # 3- Respond with the projection for the view
    project = VIEWS[view]
    logger.info('Listed %s short URL(s).', len(short_urls), extra={'event': URLS_LISTED, 'view': view})
    return response_200(
        view=view,
        links=[project(short_url, event) for short_url in short_urls],
        storage_available=registry.storage_available,
    )

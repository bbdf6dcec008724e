import json
import logging
from typing import Any

from localshortener.exceptions import (
    ConfigurationError,
    ValidationError,
    InvalidUrlError,
    InvalidValidityError,
    InvalidShortcodeError,
    ShortcodeCollisionError,
    InvalidBatchError,
    ShortcodeGenerationError,
)
from localshortener.models import ShortURLModel, ShortenRequestModel
from localshortener.utils import load_config, get_short_url, app_prefix
from localshortener.utils.factory import build_registry
from localshortener.utils.helpers import guarantee_500_response, to_iso8601
from localshortener.lambdas.shorten_url.constants import (
    URLS_SHORTENED,
    INVALID_JSON,
    INVALID_REQUEST,
    INVALID_URL,
    INVALID_VALIDITY,
    INVALID_SHORTCODE,
    SHORTCODE_COLLISION,
    INVALID_BATCH,
    SHORTCODE_GENERATION_FAILED,
)


logger = logging.getLogger(__name__)

ERROR_CODES = {
    InvalidUrlError: INVALID_URL,
    InvalidValidityError: INVALID_VALIDITY,
    InvalidShortcodeError: INVALID_SHORTCODE,
    ShortcodeCollisionError: SHORTCODE_COLLISION,
    InvalidBatchError: INVALID_BATCH,
}

CORS_HEADERS = {
    'Access-Control-Allow-Origin': '*',
    'Access-Control-Allow-Headers': 'Content-Type',
    'Access-Control-Allow-Methods': 'OPTIONS,POST,GET',
}


def response_500(message: str | None = None, error_code: str | None = None) -> dict:
    base = 'Internal Server Error'
    body = {'message': base if not message else f'{base} ({message})'}
    if error_code:
        body['errorCode'] = error_code
    return {
        'statusCode': 500,
        'body': json.dumps(body),
    }


def response_400(message: str | None = None, error_code: str | None = None, row: int | None = None) -> dict:
    base = 'Bad Request'
    body = {'message': base if not message else f'{base} ({message})'}
    if error_code:
        body['errorCode'] = error_code
    if row is not None:
        body['row'] = row
    return {
        'statusCode': 400,
        'headers': CORS_HEADERS,
        'body': json.dumps(body),
    }


def response_409(message: str, error_code: str, row: int | None = None) -> dict:
    body = {'message': f'Conflict ({message})', 'errorCode': error_code}
    if row is not None:
        body['row'] = row
    return {
        'statusCode': 409,
        'headers': CORS_HEADERS,
        'body': json.dumps(body),
    }


def response_201(*, links: list[dict]) -> dict:
    return {
        'statusCode': 201,
        'headers': CORS_HEADERS,
        'body': json.dumps(
            {
                'message': f'Successfully shortened {len(links)} URL(s)',
                'links': links,
            }
        ),
    }


def parse_requests(body: Any) -> list[ShortenRequestModel]:
    """Turn a request body into shorten request rows

    Accepts either `{"urls": [{...}, ...]}` or a single row object
    `{"long_url": ..., "validity": ..., "shortcode": ...}`.

    Raises:
        ValueError: If the body isn't shaped like either form.
    """
    if not isinstance(body, dict):
        raise ValueError('JSON body must be an object')

    rows = body['urls'] if 'urls' in body else [body]
    if not isinstance(rows, list) or not all(isinstance(row, dict) for row in rows):
        raise ValueError("'urls' must be a list of objects")

    return [ShortenRequestModel(long_url=row.get('long_url'), validity=row.get('validity'), shortcode=row.get('shortcode')) for row in rows]


def link_view(short_url: ShortURLModel, event: dict) -> dict:
    return {
        'shortcode': short_url.shortcode,
        'short_url': get_short_url(short_url.shortcode, event),
        'long_url': short_url.target,
        'expires_at': to_iso8601(short_url.expires_at),
    }


@guarantee_500_response
def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """Handle incoming API Gateway requests to shorten URLs

    This Lambda handler follows this procedure to shorten URLs:
    - Step 1: Extract shorten request rows from request body
    - Step 2: Validate and store all rows as one batch (via ShortURLRegistry)
    - Step 3: Respond to user with 201 and the created links

    HTTP responses:
        201: Successful URL shortening
            message: success message
            links: list of {shortcode, short_url, long_url, expires_at}, in row order
        400: Bad client request
            message: cause of bad request (invalid JSON, invalid row, ...)
            errorCode: machine-readable cause
            row: 1-based offending row (when a row is at fault)
        409: Conflict
            message: requested shortcode is already taken
            errorCode: SHORTCODE_COLLISION
            row: 1-based offending row
        500: Internal server error
            message: indicate the server experienced an internal error

    Args:
        event (Dict[str, Any]):
            API Gateway event payload in Lambda Proxy format.
        context (Any):
            AWS Lambda context object containing runtime information.

    Returns:
        Dict[str, Any]:
            JSON-serializable response following API Gateway Lambda Proxy
            output format. Includes status code, headers, and response body.

    Example:
        >>> event = {'body': '{"urls": [{"long_url": "https://example.com", "validity": 10}]}'}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        201
        >>> json.loads(response['body'])['links'][0]['long_url']
        'https://example.com'
    """
    # 0- Get application's config
    try:
        app_config = load_config('shorten_url')
    except ConfigurationError:
        logger.exception('Failed to load config for shorten URL function. Responding with 500.')
        return response_500()

    # 1- Extract shorten request rows from request body
    try:
        request_body = json.loads(event.get('body') or '{}')
    except json.JSONDecodeError:
        logger.info('Invalid JSON body. Responding with 400.', extra={'event': INVALID_JSON})
        return response_400(message='invalid JSON body', error_code=INVALID_JSON)

    try:
        requests = parse_requests(request_body)
    except ValueError as e:
        logger.info('Malformed shorten request. Responding with 400.', extra={'event': INVALID_REQUEST, 'reason': str(e)})
        return response_400(message=str(e), error_code=INVALID_REQUEST)

    # 2- Validate and store all rows as one batch
    registry = build_registry(app_config, prefix=app_prefix())
    try:
        links = registry.create_batch(requests)
    except ShortcodeCollisionError as error:
        logger.info('Shortcode collision. Responding with 409.', extra={'event': SHORTCODE_COLLISION, 'row': error.row})
        return response_409(error.user_message, SHORTCODE_COLLISION, row=error.row)
    except ValidationError as error:
        error_code = ERROR_CODES.get(type(error), INVALID_REQUEST)
        logger.info('Invalid shorten request. Responding with 400.', extra={'event': error_code, 'row': error.row})
        return response_400(message=error.user_message, error_code=error_code, row=error.row)
    except ShortcodeGenerationError:
        logger.exception('Failed to generate a unique shortcode. Responding with 500.', extra={'event': SHORTCODE_GENERATION_FAILED})
        return response_500(message='could not generate a unique shortcode', error_code=SHORTCODE_GENERATION_FAILED)

    if not registry.storage_available:
        logger.warning('Short URLs were not persisted.', extra={'reason': str(registry.storage_error)})

    # 3- Return successful response to user
    logger.info('Shortened %s URL(s). Responding with 201.', len(links), extra={'event': URLS_SHORTENED})
    return response_201(links=[link_view(short_url, event) for short_url in links])

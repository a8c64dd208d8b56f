import json
import logging
from datetime import timedelta

from urlshortener.constants import (
    Defaults,
    SHORTEN_SUCCESS,
    RATE_LIMIT_EXCEEDED,
    INVALID_REQUEST_BODY,
    INVALID_URL,
    INVALID_DOMAIN,
    SHORT_URL_ALREADY_EXISTS,
    SHORT_URL_SAVE_FAILED,
)
from urlshortener.dao import LinkRegistry, StoreFactory
from urlshortener.dao.base import KeyValueBaseStore
from urlshortener.dao.exceptions import DataStoreError, ShortURLAlreadyExistsError
from urlshortener.exceptions import (
    InvalidDomainError,
    InvalidURLError,
    MalformedRequestError,
    RateLimitExceededError,
)
from urlshortener.services import RateLimiter, ShortcodeAllocator, ShortenService
from urlshortener.types import LambdaEvent, LambdaContext, LambdaResponse
from urlshortener.utils import load_config, app_prefix, client_address, guarantee_500_response, ShortenerSettings


logger = logging.getLogger(__name__)


def _minutes(delta: timedelta) -> float:
    return delta.total_seconds() / 60


def response(status_code: int, body: dict, headers: dict | None = None) -> LambdaResponse:
    return {
        'statusCode': status_code,
        'headers': {'Content-Type': 'application/json', **(headers or {})},
        'body': json.dumps(body),
    }


def response_400(error: str) -> LambdaResponse:
    return response(400, {'error': error})


def response_429(*, reset_in: timedelta) -> LambdaResponse:
    return response(
        429,
        {'error': 'rate limit exceeded', 'rate_limit_reset': _minutes(reset_in)},
        headers={'Retry-After': str(int(reset_in.total_seconds()))},
    )


def response_500(error: str = 'cannot save URL') -> LambdaResponse:
    return response(500, {'error': error})


def parse_body(event: LambdaEvent) -> tuple[str, str | None, int | float | None]:
    """Extract (url, short, expiry) from the JSON request body

    Raises:
        MalformedRequestError:
            If the body is not a JSON object or a field has the wrong type.
    """
    try:
        body = json.loads(event.get('body') or '{}')
    except json.JSONDecodeError as e:
        raise MalformedRequestError('Request body is not valid JSON.') from e
    if not isinstance(body, dict):
        raise MalformedRequestError('Request body must be a JSON object.')

    url = body.get('url', '')
    short = body.get('short')
    expiry = body.get('expiry')

    if not isinstance(url, str):
        raise MalformedRequestError("Field 'url' must be a string.")
    if short is not None and not isinstance(short, str):
        raise MalformedRequestError("Field 'short' must be a string.")
    # bool is an int subclass; JSON true/false is not an expiry
    if expiry is not None and (isinstance(expiry, bool) or not isinstance(expiry, int | float)):
        raise MalformedRequestError("Field 'expiry' must be a number of hours.")
    # json.loads accepts NaN and Infinity; NaN fails both comparisons
    if expiry is not None and not 0 <= expiry <= Defaults.MAX_LINK_EXPIRY_HOURS:
        raise MalformedRequestError(f"Field 'expiry' must be between 0 and {Defaults.MAX_LINK_EXPIRY_HOURS} hours.")

    return url, short, expiry


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to shorten URLs

    This Lambda handler follows this procedure to shorten URLs:
    - Step 1: Parse the JSON request body
    - Step 2: Identify the client by network address
    - Step 3: Build the store and services from configuration
    - Step 4: Shorten the URL (rate limit, validate, allocate, store)
    - Step 5: Respond with the short URL and the client's quota

    HTTP responses:
        200: Successfully shortened URL
            body: url, short, expiry (hours), rate_limit, rate_limit_reset (minutes)
        400: Bad client request
            error: 'cannot parse JSON', 'invalid URL' or 'invalid domain'
        403: Custom shortcode taken
            error: 'short URL already exists'
        429: Too many shortening requests in the current window
            error: 'rate limit exceeded', rate_limit_reset (minutes)
            headers: Retry-After (seconds)
        500: Internal server error
            error: 'cannot save URL'

    Args:
        event (LambdaEvent):
            API Gateway event payload in Lambda Proxy format.
        context (LambdaContext):
            AWS Lambda runtime context object (not used directly).

    Returns:
        LambdaResponse:
            API Gateway-compatible response including statusCode, headers, and body.

    Example:
        >>> event = {'body': '{"url": "example.com/page"}', 'requestContext': {'identity': {'sourceIp': '203.0.113.7'}}}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        200
        >>> json.loads(response['body'])['url']
        'http://example.com/page'
    """
    # 1- Parse request body
    try:
        url, short, expiry = parse_body(event)
    except MalformedRequestError as e:
        logger.info('Malformed request body. Responding with 400.', extra={'reason': str(e), 'event': INVALID_REQUEST_BODY})
        return response_400('cannot parse JSON')

    # 2- Identify client
    client = client_address(event)

    # 3- Build store and services from application's config
    try:
        app_config = load_config('shorten_url')
    except FileNotFoundError:
        logger.exception('Failed to load AppConfig for shorten URL function. Responding with 500.')
        return response_500()

    settings = ShortenerSettings.from_config(app_config)
    try:
        store = StoreFactory.create(app_config, prefix=app_prefix())
    except DataStoreError:
        logger.exception('Store is unreachable. Responding with 500.', extra={'event': SHORT_URL_SAVE_FAILED})
        return response_500()

    with store:
        return shorten(store, settings, client, url, short, expiry)


def shorten(
    store: KeyValueBaseStore,
    settings: ShortenerSettings,
    client: str,
    url: str,
    short: str | None,
    expiry: int | float | None,
) -> LambdaResponse:
    """Run steps 4 and 5 of the handler against an open store"""
    links = LinkRegistry(store)
    service = ShortenService(
        rate_limiter=RateLimiter(store, quota=settings.api_quota, window=settings.quota_window),
        allocator=ShortcodeAllocator(links, length=settings.shortcode_length, max_attempts=settings.max_shortcode_attempts),
        links=links,
        domain=settings.domain,
        default_expiry_hours=settings.default_expiry_hours,
    )

    # 4- Shorten URL
    try:
        result = service.shorten(client, url, short=short, expiry=expiry)
    except RateLimitExceededError as e:
        logger.info(
            'Client exceeded shortening quota. Responding with 429.',
            extra={'clientAddress': client, 'resetIn': e.reset_in.total_seconds(), 'event': RATE_LIMIT_EXCEEDED},
        )
        return response_429(reset_in=e.reset_in)
    except MalformedRequestError:
        logger.info('Invalid expiry in request body. Responding with 400.', extra={'event': INVALID_REQUEST_BODY})
        return response_400('cannot parse JSON')
    except InvalidURLError:
        logger.info('Invalid target URL. Responding with 400.', extra={'url': url, 'event': INVALID_URL})
        return response_400('invalid URL')
    except InvalidDomainError:
        logger.info('Target URL points at this service. Responding with 400.', extra={'url': url, 'event': INVALID_DOMAIN})
        return response_400('invalid domain')
    except ShortURLAlreadyExistsError:
        logger.info(
            'Custom shortcode already in use. Responding with 403.',
            extra={'shortcode': short, 'event': SHORT_URL_ALREADY_EXISTS},
        )
        return response(403, {'error': 'short URL already exists'})
    except DataStoreError:
        logger.exception('Failed to save short URL. Responding with 500.', extra={'event': SHORT_URL_SAVE_FAILED})
        return response_500()

    # 5- Respond with short URL and quota snapshot
    logger.info(
        'Shortened URL. Responding with 200.',
        extra={'shortcode': result.shortcode, 'clientAddress': client, 'event': SHORTEN_SUCCESS},
    )
    return response(
        200,
        {
            'url': result.url,
            'short': result.short,
            'expiry': result.expiry,
            'rate_limit': result.rate_limit,
            'rate_limit_reset': _minutes(result.rate_limit_reset),
        },
    )

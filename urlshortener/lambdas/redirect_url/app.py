import json
import logging

from urlshortener.constants import SHORT_URL_NOT_FOUND, REDIRECT_SUCCESS, DATABASE_ERROR
from urlshortener.dao import LinkRegistry, StoreFactory
from urlshortener.dao.exceptions import DataStoreError, ShortURLNotFoundError
from urlshortener.services import ResolveService
from urlshortener.types import LambdaEvent, LambdaContext, LambdaResponse
from urlshortener.utils import load_config, app_prefix, guarantee_500_response


logger = logging.getLogger(__name__)


def response_404() -> LambdaResponse:
    return {
        'statusCode': 404,
        'headers': {'Content-Type': 'application/json'},
        'body': json.dumps({'error': 'short url not found'}),
    }


def response_500() -> LambdaResponse:
    return {
        'statusCode': 500,
        'headers': {'Content-Type': 'application/json'},
        'body': json.dumps({'error': 'database error'}),
    }


def response_301(*, location: str) -> LambdaResponse:
    return {
        'statusCode': 301,
        'headers': {'Location': location},
        'body': '',
    }


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to redirect URLs

    This Lambda handler follows this procedure to redirect URLs:
    - Step 1: Extract shortcode from request path
    - Step 2: Resolve shortcode to its target URL (counts the redirect)
    - Step 3: Permanently redirect client to target URL

    HTTP responses:
        301: Successful redirect
            headers:
                Location: target URL destination
        404: Unknown or expired shortcode
            error: 'short url not found'
        500: Internal server error
            error: 'database error'

    Example:
        >>> event = {'pathParameters': {'shortcode': 'abc123'}}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        301
        >>> response['headers']['Location']
        'https://example.com/my-page'
    """
    # 0- Get application's config
    try:
        app_config = load_config('redirect_url')
    except FileNotFoundError:
        logger.exception('Failed to load AppConfig for redirect URL function. Responding with 500.')
        return response_500()

    # 1- Extract shortcode from request's path
    shortcode = (event.get('pathParameters') or {}).get('shortcode')
    if not shortcode:
        logger.info('Missing "shortcode" in path. Responding with 404.', extra={'event': SHORT_URL_NOT_FOUND})
        return response_404()

    # 2- Resolve shortcode
    try:
        store = StoreFactory.create(app_config, prefix=app_prefix())
        with store:
            target = ResolveService(LinkRegistry(store), store).resolve(shortcode)
    except ShortURLNotFoundError:
        logger.info(
            'Short URL record not found in database. Responding with 404.',
            extra={'shortcode': shortcode, 'event': SHORT_URL_NOT_FOUND},
        )
        return response_404()
    except DataStoreError:
        logger.exception('Failed to read short URL record. Responding with 500.', extra={'shortcode': shortcode, 'event': DATABASE_ERROR})
        return response_500()

    # 3- Redirect client to target URL
    logger.info('Redirecting client to target URL.', extra={'shortcode': shortcode, 'event': REDIRECT_SUCCESS})
    return response_301(location=target)

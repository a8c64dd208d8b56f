"""Helper utilities for AWS lambda functions.

Functions:
    get_short_url(shortcode: str, domain: str) -> str
        Get string representation of short URL for a given shortcode
    client_address(event: LambdaEvent) -> str
        Extract the caller's network address from an API Gateway event
    require_environment(*names: str) -> Callable
        Decorator: Ensure required environment variables are present
    guarantee_500_response(handler: Callable) -> Callable
        Decorator: Turn unexpected handler exceptions into HTTP 500 responses

Example:
    Typical usage inside a Lambda handler:

        >>> from urlshortener.utils.helpers import client_address
        >>> event = {'requestContext': {'identity': {'sourceIp': '203.0.113.7'}}}
        >>> client_address(event)
        '203.0.113.7'
"""

import os
import json
import ipaddress
import logging
import functools
from collections.abc import Callable

from urlshortener.constants import UNKNOWN_INTERNAL_SERVER_ERROR
from urlshortener.exceptions import MissingEnvironmentVariableError
from urlshortener.types import LambdaEvent, LambdaContext, LambdaResponse
from urlshortener.utils.runtime import running_locally


logger = logging.getLogger(__name__)


def get_short_url(shortcode: str, domain: str) -> str:
    """Get string representation of shortened URL

    Args:
        shortcode (str): shortcode
        domain (str): public domain of the service, e.g. 'short.ly' or 'https://short.ly'

    Returns:
        str: short url string representation, e.g. 'short.ly/abc123'
    """
    return f'{domain.rstrip("/")}/{shortcode}'


def client_address(event: LambdaEvent) -> str:
    """Extract the caller's network address from an API Gateway event

    Looks up, in order:
        - requestContext.identity.sourceIp (REST API, payload v1)
        - requestContext.http.sourceIp (HTTP API, payload v2)
        - first entry of the X-Forwarded-For header, if it is an IP address

    The result keys the client's quota record, so free-form header text is
    never used.

    Args:
        event (dict): API Gateway event object passed to Lambda handler

    Returns:
        str: client address, 'unknown' if the event carries none.
    """
    request_context = event.get('requestContext') or {}

    source_ip = (request_context.get('identity') or {}).get('sourceIp')
    if source_ip:
        return source_ip

    source_ip = (request_context.get('http') or {}).get('sourceIp')
    if source_ip:
        return source_ip

    headers = {k.lower(): v for k, v in (event.get('headers') or {}).items()}
    forwarded_for = headers.get('x-forwarded-for', '')
    source_ip = forwarded_for.split(',')[0].strip()
    try:
        return str(ipaddress.ip_address(source_ip))
    except ValueError:
        return 'unknown'


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


def guarantee_500_response(handler: Callable[[LambdaEvent, LambdaContext], LambdaResponse]) -> Callable:
    """Decorator: answer HTTP 500 when a lambda handler raises unexpectedly

    When running locally the exception is re-raised instead, so the stack
    trace shows up in the SAM console.

    Args:
        handler (Callable[[LambdaEvent, LambdaContext], LambdaResponse]):
            Lambda handler to protect.

    Returns:
        Callable: handler which always returns an API Gateway response in the cloud.
    """

    @functools.wraps(handler)
    def wrapper(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
        try:
            return handler(event, context)
        except Exception:
            if running_locally():
                raise
            logger.exception('Unhandled exception in lambda handler. Responding with 500.', extra={'event': UNKNOWN_INTERNAL_SERVER_ERROR})
            return {
                'statusCode': 500,
                'headers': {'Content-Type': 'application/json'},
                'body': json.dumps(
                    {
                        'error': 'Internal Server Error',
                        'error_code': UNKNOWN_INTERNAL_SERVER_ERROR,
                    }
                ),
            }

    return wrapper

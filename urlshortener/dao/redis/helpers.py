import functools
from collections.abc import Callable

import redis

from urlshortener.dao.exceptions import DataStoreError


__all__ = []

# Errors meaning "Redis did not answer"; everything else is a bug and propagates
CONNECTIVITY_ERRORS = (redis.exceptions.ConnectionError, redis.exceptions.TimeoutError)


def redis_location(client: redis.Redis) -> str:
    """Describe where a client points to as '<host>:<port>/<db>'"""
    kwargs = client.connection_pool.connection_kwargs
    return f'{kwargs.get("host")}:{kwargs.get("port")}/{kwargs.get("db")}'


def handle_redis_connection_error[F: Callable](method: F) -> F:
    """Decorator: report an unreachable Redis as DataStoreError

    Store methods run blocking commands bounded by the client's socket timeout,
    so a refused connection and a timed out command look the same to callers.

    Example:
        >>> class Store:
        ...     @handle_redis_connection_error
        ...     def count(self):
        ...         return self.redis.incr('count')
    """

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except CONNECTIVITY_ERRORS as e:
            raise DataStoreError(f"Can't connect to Redis at {redis_location(self.redis)}.") from e

    return wrapper

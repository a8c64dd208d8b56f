"""Shared Redis client setup for Redis-backed stores

RedisClientMixin builds (or adopts) a redis.Redis client, attaches the key
schema and PINGs the server once, so a misconfigured store fails when it is
created rather than on its first command.

Example:
    >>> class KeyValueRedisStore(RedisClientMixin, KeyValueBaseStore):
    ...     pass
    >>> store = KeyValueRedisStore(redis_host='localhost', prefix='urlshortener:dev')
    >>> store.keys.namespaced_key('links', 'abc123')
    'urlshortener:dev:links:abc123'
"""

from typing import Optional

import redis

from urlshortener.constants import Defaults
from urlshortener.dao.exceptions import DataStoreError
from urlshortener.dao.redis.helpers import CONNECTIVITY_ERRORS, redis_location
from urlshortener.dao.redis.redis_key_schema import RedisKeySchema


class RedisClientMixin:
    """Client construction, health check and cleanup for Redis stores

    Connection options are passed with a `redis_` prefix so a backend
    section of the app config maps onto them directly:

        {'host': 'localhost', 'port': 6379}  ->  redis_host='localhost', redis_port=6379

    Attributes:
        redis (redis.Redis):
            Client used for every command.
        keys (RedisKeySchema):
            Builds the prefixed key names.

    Raises:
        DataStoreError:
            From __init__, if the server does not answer the initial PING.
    """

    def __init__(
        self,
        redis_host: Optional[str] = 'localhost',
        redis_port: Optional[int] = 6379,
        redis_db: Optional[int] = 0,
        redis_decode_responses: Optional[bool] = True,
        redis_username: Optional[str] = None,
        redis_password: Optional[str] = None,
        redis_socket_timeout: Optional[float] = Defaults.REDIS_SOCKET_TIMEOUT,
        redis_client: Optional[redis.Redis] = None,
        prefix: Optional[str] = None,
    ):
        # An injected client wins over connection options (tests, shared pools)
        if redis_client is None:
            redis_client = redis.Redis(
                host=redis_host,
                port=int(redis_port),
                db=int(redis_db),
                decode_responses=redis_decode_responses,
                username=redis_username,
                password=redis_password,
                socket_timeout=redis_socket_timeout,
                socket_connect_timeout=redis_socket_timeout,
            )
        self.redis = redis_client
        self.keys = RedisKeySchema(prefix=prefix)

        self._healthcheck()

    def _healthcheck(self) -> None:
        """PING the server

        Raises:
            DataStoreError:
                When the server is unreachable.
        """
        try:
            self.redis.ping()
        except CONNECTIVITY_ERRORS as e:
            raise DataStoreError(
                f"Can't connect to Redis at {redis_location(self.redis)}. Check the provided configuration parameters."
            ) from e

    def close(self) -> None:
        """Release the client's pooled connections."""
        self.redis.close()

"""Redis implementation of the namespaced key/value store

This module provides a Redis-based implementation of KeyValueBaseStore. Both
logical namespaces (links, quota) live in the same Redis database and are
separated by key prefixes (see RedisKeySchema).

Responsibilities:
    - Map (namespace, key) pairs to prefixed Redis keys;
    - Delegate expiry to Redis (EX / TTL);
    - Perform multi-command updates of a single key atomically (MULTI/EXEC or Lua);
    - Translate Redis connectivity errors into DataStoreError.

Classes:
    KeyValueRedisStore:
        Key/value store backed by a Redis server.

Example:
    >>> from urlshortener.dao.base import Namespace
    >>> from urlshortener.dao.redis import KeyValueRedisStore

    >>> store = KeyValueRedisStore(prefix="app:dev")
    >>> store.consume(Namespace.QUOTA, '203.0.113.7', initial=10, ttl=1800)
    9
    >>> store.consume(Namespace.QUOTA, '203.0.113.7', initial=10, ttl=1800)
    8
    >>> store.restore(Namespace.QUOTA, '203.0.113.7')
    9
"""

from beartype import beartype

from urlshortener.dao.base import KeyValueBaseStore, Namespace
from urlshortener.dao.redis.mixins import RedisClientMixin
from urlshortener.dao.redis.helpers import handle_redis_connection_error


# Increment a key only while it is still alive. INCR alone would re-create an
# expired key without a TTL.
RESTORE_SCRIPT = """
if redis.call('EXISTS', KEYS[1]) == 1 then
    return redis.call('INCR', KEYS[1])
end
return false
"""


class KeyValueRedisStore(RedisClientMixin, KeyValueBaseStore):
    """Redis-based namespaced key/value store

    Attributes (see RedisClientMixin):
        redis (redis.Redis):
            Redis client used to communicate with the Redis datastore.
        keys (RedisKeySchema):
            Key schema helper for generating namespaced Redis keys.

    Example:
        >>> store = KeyValueRedisStore(redis_host="localhost", prefix="shortener:test")
        >>> store.set(Namespace.LINKS, "abc123", "https://example.com", ttl=86400, nx=True)
        True
        >>> store.set(Namespace.LINKS, "abc123", "https://example.org", ttl=86400, nx=True)
        False
    """

    @handle_redis_connection_error
    @beartype
    def set(self, namespace: Namespace, key: str, value: str | int, ttl: int | None = None, nx: bool = False) -> bool:
        redis_key = self.keys.namespaced_key(namespace, key)
        return bool(self.redis.set(redis_key, value, ex=ttl, nx=nx))

    @handle_redis_connection_error
    @beartype
    def get(self, namespace: Namespace, key: str) -> str | None:
        return self.redis.get(self.keys.namespaced_key(namespace, key))

    @handle_redis_connection_error
    @beartype
    def delete(self, namespace: Namespace, key: str) -> bool:
        return bool(self.redis.delete(self.keys.namespaced_key(namespace, key)))

    @handle_redis_connection_error
    @beartype
    def exists(self, namespace: Namespace, key: str) -> bool:
        return bool(self.redis.exists(self.keys.namespaced_key(namespace, key)))

    @handle_redis_connection_error
    @beartype
    def increment(self, namespace: Namespace, key: str) -> int:
        return self.redis.incr(self.keys.namespaced_key(namespace, key))

    @handle_redis_connection_error
    @beartype
    def decrement(self, namespace: Namespace, key: str) -> int:
        return self.redis.decr(self.keys.namespaced_key(namespace, key))

    @handle_redis_connection_error
    @beartype
    def time_to_live(self, namespace: Namespace, key: str) -> int:
        return self.redis.ttl(self.keys.namespaced_key(namespace, key))

    @handle_redis_connection_error
    @beartype
    def consume(self, namespace: Namespace, key: str, initial: int, ttl: int) -> int:
        """Initialize a missing counter and decrement it in one transaction

        NOTE: The SET NX and DECR commands are executed as an atomic operation.
              Without the transaction, two concurrent requests may both read a
              positive counter before either decrements it:

              (request 1): GET <app>:quota:<client>          => 1
                           ... interruption
              (request 2): GET <app>:quota:<client>          => 1
              (request 2): DECR <app>:quota:<client>         => 0
              (request 1): DECR <app>:quota:<client>         => -1
                           => both requests admitted with a quota of 1

              Inside MULTI/EXEC the decremented value is the admission decision,
              so every caller sees a distinct value.

        Args:
            namespace (Namespace):
                Logical partition of the key.
            key (str):
                Key inside the namespace.
            initial (int):
                Starting value for a missing key.
            ttl (int):
                Time-to-live in seconds for a newly created key.

        Returns:
            int: The counter value after the decrement (may be negative).

        Raises:
            DataStoreError:
                If Redis connectivity issues occur.
        """
        redis_key = self.keys.namespaced_key(namespace, key)
        with self.redis.pipeline(transaction=True) as pipe:
            pipe.set(redis_key, initial, nx=True, ex=ttl)
            pipe.decr(redis_key)
            _, value = pipe.execute()
        return value

    @handle_redis_connection_error
    @beartype
    def restore(self, namespace: Namespace, key: str) -> int | None:
        redis_key = self.keys.namespaced_key(namespace, key)
        return self.redis.eval(RESTORE_SCRIPT, 1, redis_key)

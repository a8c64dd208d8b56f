from urlshortener.dao.redis.redis_key_schema import RedisKeySchema
from urlshortener.dao.redis.mixins import RedisClientMixin
from urlshortener.dao.redis.key_value_redis_store import KeyValueRedisStore


__all__ = [
    'RedisKeySchema',
    'RedisClientMixin',
    'KeyValueRedisStore',
]

"""Factory for key/value store backends.

The active backend is the first key of the loaded app config, i.e. load_config()
returns `{'redis': {...}, 'shortener': {...}}` for the Redis backend.
"""

import logging
from enum import StrEnum

from urlshortener.dao.base import KeyValueBaseStore
from urlshortener.dao.memory import KeyValueMemoryStore
from urlshortener.dao.redis import KeyValueRedisStore
from urlshortener.exceptions import BadConfigurationError
from urlshortener.types import AppConfig


logger = logging.getLogger(__name__)


class StoreBackend(StrEnum):
    """Available key/value store backends"""

    REDIS = 'redis'
    MEMORY = 'memory'


class StoreFactory:
    """Create key/value stores from app config.

    Redis stores are created per call (one client per invocation).
    The memory store is a process-wide singleton, otherwise nothing would
    survive between two requests.
    """

    _memory_store: KeyValueMemoryStore | None = None

    @classmethod
    def backend(cls, app_config: AppConfig) -> StoreBackend:
        for name in app_config:
            try:
                return StoreBackend(name)
            except ValueError:
                continue
        raise BadConfigurationError(f'No supported store backend configured (expected one of: {", ".join(StoreBackend)}).')

    @classmethod
    def create(cls, app_config: AppConfig, prefix: str | None = None) -> KeyValueBaseStore:
        """Create the configured store

        Args:
            app_config (AppConfig):
                Lambda configuration as returned by load_config().
            prefix (str | None):
                Key prefix for Redis, e.g. 'urlshortener:dev'.

        Returns:
            KeyValueBaseStore: ready-to-use store.

        Raises:
            BadConfigurationError:
                If no supported backend is configured.
            DataStoreError:
                If Redis is unreachable.
        """
        backend = cls.backend(app_config)

        if backend == StoreBackend.REDIS:
            redis_config = {f'redis_{k}': v for k, v in app_config[backend].items()}
            logger.debug('Using Redis as the key/value store.', extra={'prefix': prefix})
            return KeyValueRedisStore(**redis_config, prefix=prefix)

        if cls._memory_store is None:
            logger.debug('Using an in-process memory key/value store.')
            cls._memory_store = KeyValueMemoryStore()
        return cls._memory_store

    @classmethod
    def clear_instance(cls) -> None:
        """Forget the memory store singleton (for testing)"""
        cls._memory_store = None

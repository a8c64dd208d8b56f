"""Abstract base class for namespaced key/value stores with per-key expiration.

This class establishes the storage contract shared by link records, quota
records and the global redirect counter, regardless of the backing store
(e.g., Redis, in-process memory).

Responsibilities:
    - Provide get/set/delete operations scoped to a logical namespace.
    - Provide atomic counter operations (increment, decrement, consume, restore).
    - Enforce per-key expiration: a key with an elapsed TTL behaves as absent.

Example:
    Typical usage with a datastore-specific implementation:

        >>> from urlshortener.dao.base import Namespace
        >>> from urlshortener.dao.redis import KeyValueRedisStore

        >>> store = KeyValueRedisStore(prefix='urlshortener:dev')
        >>> store.set(Namespace.LINKS, 'abc123', 'https://example.com', ttl=3600)
        True
        >>> store.get(Namespace.LINKS, 'abc123')
        'https://example.com'
        >>> store.time_to_live(Namespace.LINKS, 'abc123')
        3600
"""

from abc import ABC, abstractmethod
from enum import StrEnum
from typing import Self


class Namespace(StrEnum):
    """Logical partitions of the key/value store."""

    LINKS = 'links'  # shortcode -> target URL, TTL = requested link expiry
    QUOTA = 'quota'  # client address -> remaining quota, TTL = rate limiting window


class KeyValueBaseStore(ABC):
    """Interface for namespaced key/value stores.

    All operations on a single key are atomic with respect to each other.
    Operations spanning multiple keys are not transactional.

    Methods:
        set(namespace, key, value, ttl=None, nx=False) -> bool:
            Store a value, optionally with a TTL (seconds) and only if absent.

        get(namespace, key) -> str | None:
            Retrieve a value. None if the key is missing or expired.

        delete(namespace, key) -> bool:
            Remove a key. True if a key was removed.

        exists(namespace, key) -> bool:
            True if the key is live.

        increment(namespace, key) -> int / decrement(namespace, key) -> int:
            Atomically add/subtract 1. Missing keys count from 0 (without TTL).

        time_to_live(namespace, key) -> int:
            Remaining TTL in seconds, -1 for keys without expiry, -2 for missing keys.

        consume(namespace, key, initial, ttl) -> int:
            Atomically initialize a missing key with `initial` and `ttl`, then decrement it.

        restore(namespace, key) -> int | None:
            Atomically increment a key only if it still exists.

        close() -> None:
            Release connections. Stores are context managers that close on exit.

    All methods raise DataStoreError when the backing store is unreachable.
    """

    @abstractmethod
    def set(self, namespace: Namespace, key: str, value: str | int, ttl: int | None = None, nx: bool = False) -> bool:
        """Store a value under a namespaced key.

        Args:
            namespace (Namespace):
                Logical partition of the key.
            key (str):
                Key inside the namespace.
            value (str | int):
                Value to store.
            ttl (int | None):
                Time-to-live in seconds. None stores the key without expiry.
            nx (bool):
                If True, only write when the key does not exist.

        Returns:
            bool: True if the value was written, False if `nx` prevented the write.
        """
        pass

    @abstractmethod
    def get(self, namespace: Namespace, key: str) -> str | None:
        pass

    @abstractmethod
    def delete(self, namespace: Namespace, key: str) -> bool:
        pass

    @abstractmethod
    def exists(self, namespace: Namespace, key: str) -> bool:
        pass

    @abstractmethod
    def increment(self, namespace: Namespace, key: str) -> int:
        pass

    @abstractmethod
    def decrement(self, namespace: Namespace, key: str) -> int:
        pass

    @abstractmethod
    def time_to_live(self, namespace: Namespace, key: str) -> int:
        """Return the remaining TTL of a key in whole seconds.

        Returns:
            int: seconds left, -1 if the key never expires, -2 if the key is missing.
        """
        pass

    @abstractmethod
    def consume(self, namespace: Namespace, key: str, initial: int, ttl: int) -> int:
        """Atomically initialize a missing counter and decrement it.

        If the key is missing (or expired) it is created with `initial` and `ttl`
        first. The decrement is applied in the same atomic step, so concurrent
        callers never observe the same value twice.

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
        """
        pass

    @abstractmethod
    def restore(self, namespace: Namespace, key: str) -> int | None:
        """Atomically increment a counter only if it still exists.

        Returns:
            int | None: The counter value after the increment, None if the key is missing.
        """
        pass

    def close(self) -> None:
        """Release connections held by the store. Stores without connections keep the default no-op."""
        pass

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

"""In-process implementation of the namespaced key/value store

Keeps values in a Python dict together with their absolute expiry time and
mirrors the Redis semantics the application relies on (NX writes, TTL codes,
counters starting from 0). Expired keys are evicted lazily on access.

Pros:
    - No external dependencies (local runs, unit tests)

Cons:
    - Not shared between processes or Lambda containers
    - Lost on restart

Example:
    >>> store = KeyValueMemoryStore()
    >>> store.set(Namespace.LINKS, 'abc123', 'https://example.com', ttl=60)
    True
    >>> store.time_to_live(Namespace.LINKS, 'abc123')
    60
"""

import math
import threading
import time

from beartype import beartype

from urlshortener.dao.base import KeyValueBaseStore, Namespace


class KeyValueMemoryStore(KeyValueBaseStore):
    """Dict-backed key/value store with per-key expiration.

    A single lock serializes every operation, which gives the per-key
    atomicity the store contract promises.
    """

    def __init__(self):
        self._data: dict[tuple[str, str], tuple[str, float | None]] = {}
        self._lock = threading.Lock()

    def _live(self, item: tuple[str, str]) -> tuple[str, float | None] | None:
        entry = self._data.get(item)
        if entry is None:
            return None
        _, expires_at = entry
        if expires_at is not None and expires_at <= time.time():
            del self._data[item]
            return None
        return entry

    def _add(self, namespace: Namespace, key: str, amount: int) -> int:
        item = (namespace.value, key)
        entry = self._live(item)
        value, expires_at = entry if entry is not None else ('0', None)
        new_value = int(value) + amount
        self._data[item] = (str(new_value), expires_at)
        return new_value

    @beartype
    def set(self, namespace: Namespace, key: str, value: str | int, ttl: int | None = None, nx: bool = False) -> bool:
        item = (namespace.value, key)
        with self._lock:
            if nx and self._live(item) is not None:
                return False
            expires_at = time.time() + ttl if ttl is not None else None
            self._data[item] = (str(value), expires_at)
            return True

    @beartype
    def get(self, namespace: Namespace, key: str) -> str | None:
        with self._lock:
            entry = self._live((namespace.value, key))
            return entry[0] if entry is not None else None

    @beartype
    def delete(self, namespace: Namespace, key: str) -> bool:
        item = (namespace.value, key)
        with self._lock:
            if self._live(item) is None:
                return False
            del self._data[item]
            return True

    @beartype
    def exists(self, namespace: Namespace, key: str) -> bool:
        with self._lock:
            return self._live((namespace.value, key)) is not None

    @beartype
    def increment(self, namespace: Namespace, key: str) -> int:
        with self._lock:
            return self._add(namespace, key, 1)

    @beartype
    def decrement(self, namespace: Namespace, key: str) -> int:
        with self._lock:
            return self._add(namespace, key, -1)

    @beartype
    def time_to_live(self, namespace: Namespace, key: str) -> int:
        with self._lock:
            entry = self._live((namespace.value, key))
            if entry is None:
                return -2
            _, expires_at = entry
            if expires_at is None:
                return -1
            return math.ceil(expires_at - time.time())

    @beartype
    def consume(self, namespace: Namespace, key: str, initial: int, ttl: int) -> int:
        item = (namespace.value, key)
        with self._lock:
            if self._live(item) is None:
                self._data[item] = (str(initial), time.time() + ttl)
            return self._add(namespace, key, -1)

    @beartype
    def restore(self, namespace: Namespace, key: str) -> int | None:
        with self._lock:
            if self._live((namespace.value, key)) is None:
                return None
            return self._add(namespace, key, 1)

    def clear(self) -> None:
        """Drop every key in every namespace."""
        with self._lock:
            self._data.clear()

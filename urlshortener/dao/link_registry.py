"""Link registry: create, look up and delete link records

Link records map a shortcode to its target URL inside the link namespace of a
KeyValueBaseStore. Each record carries its own TTL; the store expires it, so
normal operation never deletes links explicitly.

Responsibilities:
    - Insert link records without ever overwriting a live one;
    - Resolve shortcodes to target URLs;
    - Report remaining lifetime of a record as an absolute expiry datetime.

Classes:
    LinkRegistry:
        Store-agnostic data access for link records.

Example:
    >>> from datetime import timedelta
    >>> from urlshortener.dao.memory import KeyValueMemoryStore

    >>> links = LinkRegistry(KeyValueMemoryStore())
    >>> links.create('abc123', 'https://example.com/page', timedelta(hours=24))
    ShortURLModel(target='https://example.com/page', shortcode='abc123', expires_at=...)
    >>> links.resolve('abc123')
    'https://example.com/page'
"""

import math
from datetime import datetime, timedelta, UTC

from beartype import beartype

from urlshortener.models import ShortURLModel
from urlshortener.dao.base import KeyValueBaseStore, Namespace
from urlshortener.dao.exceptions import ShortURLAlreadyExistsError, ShortURLNotFoundError


class LinkRegistry:
    """Data access for link records stored in the link namespace

    Attributes:
        store (KeyValueBaseStore):
            Backing key/value store.

    Methods:
        create(shortcode: str, target: str, ttl: timedelta) -> ShortURLModel:
            Insert a link record. Raises ShortURLAlreadyExistsError if the shortcode is live.
            Raises DataStoreError on store failure.

        resolve(shortcode: str) -> str:
            Return the target URL. Raises ShortURLNotFoundError if missing or expired.

        get(shortcode: str) -> ShortURLModel:
            Return the full link record including its expiry.

        exists(shortcode: str) -> bool / delete(shortcode: str) -> bool
    """

    def __init__(self, store: KeyValueBaseStore):
        self.store = store

    @beartype
    def create(self, shortcode: str, target: str, ttl: timedelta) -> ShortURLModel:
        """Insert a link record with its own TTL

        The write uses SET NX: if another request took the shortcode between the
        allocator's collision check and this call, the live record is kept and
        the insert fails.

        Args:
            shortcode (str):
                Allocated shortcode.
            target (str):
                Normalized target URL.
            ttl (timedelta):
                Lifetime of the link record.

        Returns:
            ShortURLModel: the stored link record.

        Raises:
            ShortURLAlreadyExistsError:
                If a live record already uses the shortcode.
            DataStoreError:
                If the store is unreachable.
        """
        seconds = math.ceil(ttl.total_seconds())
        if seconds <= 0:
            raise ValueError(f'Link TTL must be positive (given value: {ttl}).')

        if not self.store.set(Namespace.LINKS, shortcode, target, ttl=seconds, nx=True):
            raise ShortURLAlreadyExistsError(f"Short URL with code '{shortcode}' already exists.")

        return ShortURLModel(
            target=target,
            shortcode=shortcode,
            expires_at=datetime.now(UTC) + timedelta(seconds=seconds),
        )

    @beartype
    def resolve(self, shortcode: str) -> str:
        target = self.store.get(Namespace.LINKS, shortcode)
        if target is None:
            raise ShortURLNotFoundError(f"Short URL with code '{shortcode}' not found.")
        return target

    @beartype
    def get(self, shortcode: str) -> ShortURLModel:
        target = self.resolve(shortcode)
        ttl = self.store.time_to_live(Namespace.LINKS, shortcode)
        # TTL is -2 when the record expired between the two reads
        if ttl == -2:
            raise ShortURLNotFoundError(f"Short URL with code '{shortcode}' not found.")

        return ShortURLModel(
            target=target,
            shortcode=shortcode,
            expires_at=datetime.now(UTC) + timedelta(seconds=ttl) if ttl >= 0 else None,
        )

    @beartype
    def exists(self, shortcode: str) -> bool:
        return self.store.exists(Namespace.LINKS, shortcode)

    @beartype
    def delete(self, shortcode: str) -> bool:
        return self.store.delete(Namespace.LINKS, shortcode)

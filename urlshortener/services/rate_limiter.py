"""Per-client fixed-window rate limiter

Each client address owns one quota record in the quota namespace. The record
is created with the full quota on the client's first request of a window and
expires with the window; the next request after that starts a fresh window.

Admission and consumption are a single atomic step (store.consume): the
decremented value decides the admission, so concurrent requests from the
same client can never be admitted more than `quota` times per window. A
request that drives the counter below zero is rejected and its decrement is
reverted, leaving the record at 0 until it expires.

Example:
    >>> from datetime import timedelta
    >>> from urlshortener.dao.memory import KeyValueMemoryStore

    >>> limiter = RateLimiter(KeyValueMemoryStore(), quota=2, window=timedelta(minutes=30))
    >>> limiter.check_and_consume('203.0.113.7')
    RateLimitResult(admitted=True, remaining=1, reset_in=datetime.timedelta(seconds=1800))
    >>> limiter.check_and_consume('203.0.113.7')
    RateLimitResult(admitted=True, remaining=0, reset_in=datetime.timedelta(seconds=1800))
    >>> limiter.check_and_consume('203.0.113.7').admitted
    False
"""

import logging
from datetime import datetime, timedelta, UTC

from urlshortener.dao.base import KeyValueBaseStore, Namespace
from urlshortener.models import QuotaModel, RateLimitResult


logger = logging.getLogger(__name__)


class RateLimiter:
    """Fixed-window request quota per client address

    Attributes:
        store (KeyValueBaseStore):
            Store holding the quota namespace.
        quota (int):
            Requests admitted per client per window.
        window (timedelta):
            Window length (TTL of a quota record).
    """

    def __init__(self, store: KeyValueBaseStore, quota: int, window: timedelta):
        if quota <= 0:
            raise ValueError(f'Quota must be a positive integer (given value: {quota}).')
        if window.total_seconds() < 1:
            raise ValueError(f'Window must last at least one second (given value: {window}).')

        self.store = store
        self.quota = quota
        self.window = window

    def _reset_in(self, client_key: str) -> timedelta:
        ttl = self.store.time_to_live(Namespace.QUOTA, client_key)
        return timedelta(seconds=max(ttl, 0))

    def check_and_consume(self, client_key: str) -> RateLimitResult:
        """Admit a request and consume one unit of the client's quota

        Args:
            client_key (str):
                Client network address.

        Returns:
            RateLimitResult:
                admitted=True with the quota left after this request, or
                admitted=False with remaining=0 when the quota is exhausted.
                reset_in is the time left until the window resets.

        Raises:
            DataStoreError:
                If the store is unreachable.
        """
        window_seconds = int(self.window.total_seconds())
        remaining = self.store.consume(Namespace.QUOTA, client_key, initial=self.quota, ttl=window_seconds)

        if remaining < 0:
            self.store.restore(Namespace.QUOTA, client_key)
            reset_in = self._reset_in(client_key)
            logger.debug('Client quota exhausted.', extra={'clientKey': client_key, 'resetIn': reset_in.total_seconds()})
            return RateLimitResult(admitted=False, remaining=0, reset_in=reset_in)

        return RateLimitResult(admitted=True, remaining=remaining, reset_in=self._reset_in(client_key))

    def refund(self, client_key: str) -> int | None:
        """Give back a unit consumed by a request that failed afterwards

        An expired window is left alone: the next request starts with a full quota anyway.

        Returns:
            int | None: quota left after the refund, None if the window already expired.
        """
        return self.store.restore(Namespace.QUOTA, client_key)

    def quota_of(self, client_key: str) -> QuotaModel | None:
        """Return a read-only snapshot of the client's quota record (None outside a window)"""
        remaining = self.store.get(Namespace.QUOTA, client_key)
        if remaining is None:
            return None
        return QuotaModel(
            client_key=client_key,
            remaining=int(remaining),
            window_expires_at=datetime.now(UTC) + self._reset_in(client_key),
        )

"""Unit tests for the RateLimiter

Test coverage includes:

1. Configuration
   - Non-positive quotas and sub-second windows are rejected.
2. Admission
   - Exactly `quota` requests are admitted per window (remaining 9..0 for a quota of 10).
   - Rejected requests report a positive reset_in and leave the counter at 0.
   - Concurrent requests from one client are never admitted more than `quota` times.
   - Clients are tracked independently.
3. Window reset
   - A fresh quota is granted once the window expires.
4. Refunds and snapshots
   - refund() gives back a consumed unit; quota_of() reports the quota record.
"""

from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta, UTC
from unittest.mock import MagicMock

import pytest
from freezegun import freeze_time

from urlshortener.dao.base import KeyValueBaseStore, Namespace
from urlshortener.dao.exceptions import DataStoreError
from urlshortener.dao.memory import KeyValueMemoryStore
from urlshortener.models import QuotaModel, RateLimitResult
from urlshortener.services import RateLimiter


CLIENT = '203.0.113.7'


# -------------------------------
# Fixtures
# -------------------------------


@pytest.fixture
def store():
    return KeyValueMemoryStore()


@pytest.fixture
def limiter(store):
    return RateLimiter(store, quota=10, window=timedelta(minutes=30))


# -------------------------------
# 1. Configuration
# -------------------------------


@pytest.mark.parametrize('quota', [0, -1])
def test_invalid_quota(store, quota):
    with pytest.raises(ValueError):
        RateLimiter(store, quota=quota, window=timedelta(minutes=30))


def test_invalid_window(store):
    with pytest.raises(ValueError):
        RateLimiter(store, quota=10, window=timedelta(milliseconds=500))


# -------------------------------
# 2. Admission
# -------------------------------


@freeze_time('2025-10-15 12:00:00')
def test_quota_is_enforced(limiter):
    """Eleven requests with a quota of 10: remaining 9..0, then rejected."""
    results = [limiter.check_and_consume(CLIENT) for _ in range(11)]

    assert [r.admitted for r in results] == [True] * 10 + [False]
    assert [r.remaining for r in results[:10]] == list(range(9, -1, -1))
    assert results[10] == RateLimitResult(admitted=False, remaining=0, reset_in=timedelta(minutes=30))


def test_rejected_requests_do_not_drain_counter(limiter, store):
    for _ in range(15):
        limiter.check_and_consume(CLIENT)

    assert store.get(Namespace.QUOTA, CLIENT) == '0'


def test_concurrent_requests_admit_at_most_quota(limiter, store):
    """Fifty concurrent requests with a quota of 10: exactly 10 admitted."""
    with ThreadPoolExecutor(max_workers=16) as executor:
        results = list(executor.map(lambda _: limiter.check_and_consume(CLIENT), range(50)))

    admitted = [r for r in results if r.admitted]
    assert len(admitted) == 10
    assert sorted(r.remaining for r in admitted) == list(range(10))
    assert store.get(Namespace.QUOTA, CLIENT) == '0'


def test_reset_in_is_positive_after_exhaustion(limiter):
    with freeze_time('2025-10-15 12:00:00') as frozen:
        for _ in range(10):
            limiter.check_and_consume(CLIENT)

        frozen.tick(timedelta(minutes=10))
        result = limiter.check_and_consume(CLIENT)

    assert not result.admitted
    assert result.reset_in == timedelta(minutes=20)


def test_clients_are_independent(limiter):
    for _ in range(10):
        limiter.check_and_consume(CLIENT)

    assert not limiter.check_and_consume(CLIENT).admitted
    assert limiter.check_and_consume('198.51.100.1').remaining == 9


def test_store_error_propagates():
    store = MagicMock(spec=KeyValueBaseStore)
    store.consume.side_effect = DataStoreError("Can't connect to Redis at localhost:6379/0.")

    with pytest.raises(DataStoreError):
        RateLimiter(store, quota=10, window=timedelta(minutes=30)).check_and_consume(CLIENT)


def test_consume_arguments():
    store = MagicMock(spec=KeyValueBaseStore)
    store.consume.return_value = 4
    store.time_to_live.return_value = 1200

    result = RateLimiter(store, quota=5, window=timedelta(minutes=30)).check_and_consume(CLIENT)

    store.consume.assert_called_once_with(Namespace.QUOTA, CLIENT, initial=5, ttl=1800)
    store.restore.assert_not_called()
    assert result == RateLimitResult(admitted=True, remaining=4, reset_in=timedelta(seconds=1200))


# -------------------------------
# 3. Window reset
# -------------------------------


def test_fresh_quota_after_window(limiter):
    with freeze_time('2025-10-15 12:00:00') as frozen:
        for _ in range(11):
            limiter.check_and_consume(CLIENT)

        frozen.tick(timedelta(minutes=30))
        result = limiter.check_and_consume(CLIENT)

    assert result.admitted
    assert result.remaining == 9


# -------------------------------
# 4. Refunds and snapshots
# -------------------------------


def test_refund(limiter):
    limiter.check_and_consume(CLIENT)
    limiter.check_and_consume(CLIENT)

    assert limiter.refund(CLIENT) == 9


def test_refund_outside_window(limiter):
    assert limiter.refund(CLIENT) is None


@freeze_time('2025-10-15 12:00:00')
def test_quota_of(limiter):
    assert limiter.quota_of(CLIENT) is None

    limiter.check_and_consume(CLIENT)

    assert limiter.quota_of(CLIENT) == QuotaModel(
        client_key=CLIENT,
        remaining=9,
        window_expires_at=datetime(2025, 10, 15, 12, 30, 0, tzinfo=UTC),
    )

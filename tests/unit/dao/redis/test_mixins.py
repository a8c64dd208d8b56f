"""Unit tests for RedisClientMixin.

Test coverage includes:
    1. Client construction
       - Builds a redis.Redis from `redis_*` options (socket timeouts included).
       - Adopts an injected client as-is.
    2. Healthcheck
       - Creation PINGs the server; an unreachable server raises DataStoreError
         naming host, port and db.
    3. close() releases the client.
"""

from unittest.mock import MagicMock, patch

import pytest
import redis

from urlshortener.dao.exceptions import DataStoreError
from urlshortener.dao.redis.mixins import RedisClientMixin


@pytest.fixture
def client():
    pool = MagicMock(spec=redis.ConnectionPool, connection_kwargs={'host': '203.0.113.1', 'port': 18000, 'db': 5})
    return MagicMock(spec=redis.Redis, connection_pool=pool)


# -------------------------------
# 1. Client construction
# -------------------------------


@patch('urlshortener.dao.redis.mixins.redis.Redis', autospec=True)
def test_builds_client_from_options(redis_cls):
    mixin = RedisClientMixin(redis_host='redis.test', redis_port='6380', redis_db='2', redis_password='secret', redis_socket_timeout=0.5)

    redis_cls.assert_called_once_with(
        host='redis.test',
        port=6380,
        db=2,
        decode_responses=True,
        username=None,
        password='secret',
        socket_timeout=0.5,
        socket_connect_timeout=0.5,
    )
    assert mixin.redis is redis_cls.return_value
    redis_cls.return_value.ping.assert_called_once()


@patch('urlshortener.dao.redis.mixins.redis.Redis', autospec=True)
def test_default_socket_timeout(redis_cls):
    RedisClientMixin()
    assert redis_cls.call_args.kwargs['socket_timeout'] == 2


def test_adopts_injected_client(client):
    mixin = RedisClientMixin(redis_client=client, prefix='testapp:test')

    assert mixin.redis is client
    assert mixin.keys.namespaced_key('links', 'abc123') == 'testapp:test:links:abc123'


# -------------------------------
# 2. Healthcheck
# -------------------------------


@pytest.mark.parametrize('error', [redis.exceptions.ConnectionError('refused'), redis.exceptions.TimeoutError('timeout')])
def test_unreachable_server(client, error):
    client.ping.side_effect = error
    message = "Can't connect to Redis at 203.0.113.1:18000/5. Check the provided configuration parameters."

    with pytest.raises(DataStoreError, match=message):
        RedisClientMixin(redis_client=client)


def test_healthcheck_after_creation(client):
    mixin = RedisClientMixin(redis_client=client)

    mixin._healthcheck()
    assert client.ping.call_count == 2


# -------------------------------
# 3. Cleanup
# -------------------------------


def test_close(client):
    RedisClientMixin(redis_client=client).close()
    client.close.assert_called_once()

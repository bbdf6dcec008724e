"""Unit tests for Redis-based mixins.

Test coverage includes:
    1. Initialization and configuration
       - Builds a client from the handler's redis config section.
       - Ensures a pre-initialized Redis client is used as-is.
       - Unknown config keys are ignored, port/db strings are cast.
       - Confirms unreachable Redis raises DataStoreError.
    2. Healthcheck behavior
       - Healthcheck pings Redis.
       - Missed pong from Redis raises error.
"""

from unittest.mock import MagicMock, patch

import pytest
import redis

from localshortener.dao.exceptions import DataStoreError
from localshortener.dao.redis.mixins import RedisClientMixin, client_from_config


# -------------------------------
# 1. Initialization and configuration
# -------------------------------


def test_initialize_without_redis_client():
    """Ensure DAO creates a Redis client from the redis config section."""
    redis_config = {
        'host': 'redis',
        'port': '6379',
        'db': 0,
        'username': 'default',
        'password': 'password',
    }

    with patch('localshortener.dao.redis.mixins.redis.Redis', autospec=True) as redis_mock:
        redis_mock_instance = redis_mock.return_value
        mixin = RedisClientMixin(redis_config=redis_config, prefix='testapp:test')

        redis_mock.assert_called_once_with(
            decode_responses=True, host='redis', port=6379, db=0, username='default', password='password'
        )
        assert mixin.redis is redis_mock_instance
        assert mixin.keys.prefix == 'testapp:test'


def test_client_from_config_defaults_and_unknown_keys():
    """Ensure missing keys fall back to defaults and unknown keys are dropped."""
    with patch('localshortener.dao.redis.mixins.redis.Redis', autospec=True) as redis_mock:
        client_from_config({'db': '2', 'max_connections': 10})

        redis_mock.assert_called_once_with(decode_responses=True, host='localhost', port=6379, db=2)


def test_client_from_config_without_section():
    """Ensure a missing redis section connects to the local default server."""
    with patch('localshortener.dao.redis.mixins.redis.Redis', autospec=True) as redis_mock:
        client_from_config(None)

        redis_mock.assert_called_once_with(decode_responses=True, host='localhost', port=6379, db=0)


def test_initialize_with_redis_client(redis_client):
    """Ensure DAO correctly uses a pre-initialized Redis client."""
    mixin = RedisClientMixin(redis_client=redis_client, prefix='testapp:test')
    assert mixin.redis is redis_client


def test_initialize_with_invalid_redis_config():
    """Ensure unreachable Redis raises DataStoreError."""
    exception_message = "Can't connect to Redis at 203.0.113.1:18000/5. Check the redis section"

    with patch('localshortener.dao.redis.mixins.redis.Redis', autospec=True) as redis_mock:
        redis_mock_instance = redis_mock.return_value
        redis_mock_instance.ping.side_effect = redis.exceptions.ConnectionError('Connection error')
        redis_mock_instance.connection_pool = MagicMock()
        redis_mock_instance.connection_pool.connection_kwargs = {'host': '203.0.113.1', 'port': 18000, 'db': 5}

        with pytest.raises(DataStoreError, match=exception_message):
            RedisClientMixin(redis_config={'host': '203.0.113.1', 'port': 18000, 'db': 5}, prefix='testapp:test')


# -------------------------------
# 2. Healthcheck behavior
# -------------------------------


def test_healthcheck_passes(redis_client):
    """Ensure healthcheck passes when Redis responds."""
    mixin = RedisClientMixin(redis_client=redis_client, prefix='testapp:test')
    redis_client.ping.assert_called_once()  # initialization performs a healthcheck

    mixin._healthcheck()
    assert redis_client.ping.call_count == 2


def test_healthcheck_fails(redis_client):
    """Ensure healthcheck raises DataStoreError when Redis is unreachable."""
    redis_client.ping.side_effect = redis.exceptions.ConnectionError('Connection error')

    with pytest.raises(DataStoreError):
        RedisClientMixin(redis_client=redis_client, prefix='testapp:test')


def test_healthcheck_fails_on_rejected_ping(redis_client):
    """Ensure an AUTH/NOPERM style rejection of PING is also a DataStoreError."""
    redis_client.ping.side_effect = redis.exceptions.AuthenticationError('invalid password')

    with pytest.raises(DataStoreError, match='Check the redis section'):
        RedisClientMixin(redis_client=redis_client, prefix='testapp:test')

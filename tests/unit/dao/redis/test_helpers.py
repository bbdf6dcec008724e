"""Unit tests for handle_redis_connection_error decorator.

Test coverage includes:
    1. Normal function execution
    2. Connection and timeout error handling
    3. Server-side command rejections (ResponseError)
    4. Function metadata preservation
"""

import pytest
import redis
from unittest.mock import MagicMock

from localshortener.dao.redis.helpers import handle_redis_connection_error
from localshortener.dao.exceptions import DataStoreError


class DummyDAO:
    def __init__(self, error: Exception | None = None):
        self.error = error
        self.redis = MagicMock()
        self.redis.connection_pool.connection_kwargs = {
            'host': 'localhost',
            'port': 6379,
            'db': 0,
        }

    @handle_redis_connection_error
    def call(self):
        if self.error is not None:
            raise self.error
        return 'OK'


def test_decorator_allows_normal_execution():
    assert DummyDAO().call() == 'OK'


@pytest.mark.parametrize('error', [redis.exceptions.ConnectionError('Cannot connect'), redis.exceptions.TimeoutError('Timeout')])
def test_decorator_transforms_redis_errors(error):
    with pytest.raises(DataStoreError, match="Can't connect to Redis at localhost:6379/0.") as exc_info:
        DummyDAO(error).call()
    assert exc_info.value.__cause__ is error


@pytest.mark.parametrize(
    'error',
    [
        redis.exceptions.ResponseError("OOM command not allowed when used memory > 'maxmemory'."),
        redis.exceptions.ReadOnlyError("You can't write against a read only replica."),
        redis.exceptions.ResponseError('WRONGTYPE Operation against a key holding the wrong kind of value'),
    ],
)
def test_decorator_transforms_rejected_commands(error):
    with pytest.raises(DataStoreError, match='Redis at localhost:6379/0 rejected the command') as exc_info:
        DummyDAO(error).call()
    assert exc_info.value.__cause__ is error


def test_decorator_leaves_other_errors_alone():
    with pytest.raises(KeyError):
        DummyDAO(KeyError('boom')).call()


def test_decorator_preserves_function_metadata():
    @handle_redis_connection_error
    def sample_function():
        """This is a sample docstring."""
        return 'OK'

    assert sample_function.__name__ == 'sample_function'
    assert 'sample docstring' in sample_function.__doc__

import functools
import redis
from typing import TypeVar, Any
from collections.abc import Callable

from localshortener.dao.exceptions import DataStoreError


__all__ = []

F = TypeVar('F', bound=Callable[..., Any])


def handle_redis_connection_error[F](method: F) -> F:
    """Wrap Redis-interacting DAO methods to turn Redis failures into DataStoreError

    Connectivity issues (ConnectionError, TimeoutError) as well as server-side
    rejections (ResponseError: OOM, READONLY replica, WRONGTYPE, ...) are all
    storage failures from the DAO caller's point of view.

    Args:
        method (Callable[..., Any]):
            DAO method performing Redis operations which may raise
            any redis.exceptions.RedisError.

    Returns:
        Callable[..., Any]:
            Wrapped method which raises DataStoreError on any Redis failure.

    Example:
        >>> @handle_redis_connection_error
        ... def load(self):
        ...     return self.redis.get(self.key)
    """

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except redis.exceptions.RedisError as e:
            info = self.redis.connection_pool.connection_kwargs
            location = f"{info.get('host')}:{info.get('port')}/{info.get('db')}"
            if isinstance(e, (redis.exceptions.ConnectionError, redis.exceptions.TimeoutError)):
                raise DataStoreError(f"Can't connect to Redis at {location}.") from e
            raise DataStoreError(f'Redis at {location} rejected the command: {e}') from e

    return wrapper

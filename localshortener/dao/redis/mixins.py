"""Redis client wiring shared by Redis-backed document DAOs

Handler configuration carries a `redis` section (see utils/config.py):

    redis:
      host: localhost
      port: 6379
      db: 0
      username: default      # optional
      password: secret       # optional

RedisClientMixin turns that section into a client, namespaces keys with the
app prefix, and pings the server once so an unreachable store is detected
when the DAO is built rather than on first use.

Example:
    >>> class DocumentRedisDAO(RedisClientMixin, DocumentBaseDAO):
    ...     pass
    ...
    >>> dao = DocumentRedisDAO(redis_config={'host': 'localhost'}, prefix='localshortener:dev')
    >>> dao.keys.document_key('links')
    'localshortener:dev:links:document'
"""

from typing import Any

import redis

from localshortener.dao.redis.redis_key_schema import RedisKeySchema
from localshortener.dao.exceptions import DataStoreError


REDIS_DEFAULTS = {'host': 'localhost', 'port': 6379, 'db': 0}
REDIS_OPTIONS = ('host', 'port', 'db', 'username', 'password', 'ssl')


def client_from_config(redis_config: dict[str, Any] | None) -> redis.Redis:
    """Build a Redis client from a handler's `redis` config section

    Unknown keys are ignored. Port and db may be given as strings (YAML/AppConfig).
    """
    options = {**REDIS_DEFAULTS, **{k: v for k, v in (redis_config or {}).items() if k in REDIS_OPTIONS}}
    options['port'] = int(options['port'])
    options['db'] = int(options['db'])
    return redis.Redis(decode_responses=True, **options)


class RedisClientMixin:
    """Redis client and key schema for Redis-backed DAOs.

    Attributes:
        redis (redis.Redis):
            Client built from `redis_config`, unless one was injected.
        keys (RedisKeySchema):
            Namespaced key names for the app prefix.

    Raises:
        DataStoreError:
            If Redis doesn't answer the initial PING.
    """

    def __init__(
        self,
        redis_config: dict[str, Any] | None = None,
        redis_client: redis.Redis | None = None,
        prefix: str | None = None,
    ):
        self.redis = redis_client if redis_client is not None else client_from_config(redis_config)
        self.keys = RedisKeySchema(prefix=prefix)
        self._healthcheck()

    def _healthcheck(self) -> None:
        try:
            self.redis.ping()
        except redis.exceptions.RedisError as e:
            info = self.redis.connection_pool.connection_kwargs
            raise DataStoreError(
                f"Can't connect to Redis at {info.get('host')}:{info.get('port')}/{info.get('db')}. "
                'Check the redis section of the handler configuration.'
            ) from e

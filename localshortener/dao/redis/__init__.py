from localshortener.dao.redis.redis_key_schema import RedisKeySchema
from localshortener.dao.redis.mixins import RedisClientMixin
from localshortener.dao.redis.document_redis_dao import DocumentRedisDAO


__all__ = [
    'RedisKeySchema',
    'RedisClientMixin',
    'DocumentRedisDAO',
]

"""Data Access Object (DAO) implementation for whole JSON documents in Redis

This module provides a Redis-based implementation of DocumentBaseDAO. Each
document is a single JSON string stored under one key, e.g.
`<app>:<env>:links:document` for short URL records and
`<app>:<env>:logs:document` for the diagnostic event log.

Classes:
    DocumentRedisDAO:
        DAO for loading and replacing a JSON document in a Redis datastore.

Example:
    >>> from localshortener.dao.redis import DocumentRedisDAO

    >>> dao = DocumentRedisDAO(document='links', redis_config={'host': 'localhost'}, prefix='app:dev')
    >>> dao.load()
    {'items': []}
    >>> dao.save({'items': [{'shortcode': 'abc123', ...}]})
    <DocumentRedisDAO>
"""

import json

from beartype import beartype

from localshortener.constants import Store
from localshortener.dao.base import DocumentBaseDAO, empty_document
from localshortener.dao.helpers import decode_document
from localshortener.dao.redis.mixins import RedisClientMixin
from localshortener.dao.redis.helpers import handle_redis_connection_error


class DocumentRedisDAO(RedisClientMixin, DocumentBaseDAO):
    """Redis-based Data Access Object (DAO) for one JSON document

    Attributes (see RedisClientMixin):
        redis (redis.Redis):
            Redis client used to communicate with the Redis datastore.
        keys (RedisKeySchema):
            Key schema helper for generating namespaced Redis keys.
        key (str):
            Redis key holding the document.

    Methods:
        load(**kwargs) -> dict:
            GET the document. Returns an empty document if the key doesn't exist.
            Raises DocumentCorruptedError when the stored value isn't a valid document.
            Raises DataStoreError on connectivity issues with Redis.

        save(document: dict, **kwargs) -> DocumentRedisDAO:
            SET the document, replacing whatever was stored.
            Raises DataStoreError on connectivity issues with Redis.
    """

    def __init__(self, document: str = Store.LINKS, **kwargs):
        super().__init__(**kwargs)
        self.key = self.keys.document_key(document)

    @handle_redis_connection_error
    @beartype
    def load(self, **kwargs) -> dict:
        raw = self.redis.get(self.key)
        if raw is None:
            return empty_document()
        return decode_document(raw, self.key)

    @handle_redis_connection_error
    @beartype
    def save(self, document: dict, **kwargs) -> 'DocumentRedisDAO':
        self.redis.set(self.key, json.dumps(document))
        return self

from localshortener.dao.base import DocumentBaseDAO
from localshortener.dao.memory import DocumentMemoryDAO
from localshortener.dao.redis import DocumentRedisDAO


__all__ = [
    'DocumentBaseDAO',
    'DocumentMemoryDAO',
    'DocumentRedisDAO',
]

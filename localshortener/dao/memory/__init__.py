from localshortener.dao.memory.document_memory_dao import DocumentMemoryDAO


__all__ = [
    'DocumentMemoryDAO',
]

"""In-memory document DAO

Keeps each document as a serialized JSON string so that every load returns a
fresh copy and every save replaces the whole document, same as a real
key-value store. Useful for tests and for running without Redis.

Example:
    >>> dao = DocumentMemoryDAO(document='links')
    >>> dao.load()
    {'items': []}
    >>> dao.save({'items': [{'shortcode': 'abc123'}]}).load()
    {'items': [{'shortcode': 'abc123'}]}
"""

import json

from beartype import beartype

from localshortener.constants import Store
from localshortener.dao.base import DocumentBaseDAO, empty_document
from localshortener.dao.helpers import decode_document


class DocumentMemoryDAO(DocumentBaseDAO):
    """Document DAO backed by a process-local dictionary.

    Attributes:
        key (str):
            Name of the stored document.
        blobs (dict[str, str]):
            Serialized documents by key. May be shared between DAOs to emulate
            a single store holding several documents.
    """

    def __init__(self, document: str = Store.LINKS, blobs: dict[str, str] | None = None, prefix: str | None = None):
        self.key = f'{prefix}:{document}:document' if prefix is not None else f'{document}:document'
        self.blobs = blobs if blobs is not None else {}

    @beartype
    def load(self, **kwargs) -> dict:
        raw = self.blobs.get(self.key)
        if raw is None:
            return empty_document()
        return decode_document(raw, self.key)

    @beartype
    def save(self, document: dict, **kwargs) -> 'DocumentMemoryDAO':
        self.blobs[self.key] = json.dumps(document)
        return self

"""Abstract base class for document data access objects (DAOs).

All persisted state is kept as whole JSON documents, each stored under a
single key. This class establishes a consistent contract for all document
DAO implementations, regardless of the underlying key-value store
(e.g., Redis, in-memory).

Responsibilities:
    - Load a whole document.
    - Replace a whole document.
    - Standardize error handling across multiple data store implementations.

Example:
    Typical usage with a datastore-specific implementation:

        >>> from localshortener.dao.redis import DocumentRedisDAO

        >>> dao = DocumentRedisDAO(document='links', prefix='localshortener:dev')
        >>> document = dao.load()
        >>> document
        {'items': []}

        >>> document['items'].append({...})
        >>> dao.save(document)
        <DocumentRedisDAO>
"""

from abc import ABC, abstractmethod

from localshortener.types import Document


def empty_document() -> Document:
    return {'items': []}


class DocumentBaseDAO(ABC):
    """Interface for document data access objects (DAOs).

    Methods:
        load(**kwargs) -> Document:
            Read the whole document. Returns an empty document if none is stored.
            Raises DocumentCorruptedError if the stored document can't be decoded.
            Raises DataStoreError on connection or read failure.

        save(document: Document, **kwargs) -> DocumentBaseDAO:
            Replace the whole document.
            Raises DataStoreError on connection or write failure.

    Subclassing:
        Datastore-specific implementations (e.g., DocumentRedisDAO or
        DocumentMemoryDAO) must extend this class and implement all
        abstract methods.

    NOTE:
        - There is no partial update. Callers read the entire document,
          mutate it and write it back. Concurrent writers may overwrite
          each other.
    """

    @abstractmethod
    def load(self, **kwargs) -> Document:
        """Read the whole document from the data store.

        Returns:
            Document: the stored document, or `{'items': []}` if nothing is stored yet.

        Raises:
            DocumentCorruptedError:
                If the stored document isn't a JSON object with an 'items' list.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def save(self, document: Document, **kwargs) -> 'DocumentBaseDAO':
        """Replace the whole document in the data store.

        Args:
            document (Document):
                JSON-serializable document to store.

        Returns:
            DocumentBaseDAO: self (for method chaining)

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

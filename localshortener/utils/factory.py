"""Wiring of registries from handler configuration

Functions:
    build_registry(app_config, prefix=None) -> ShortURLRegistry
        Build the document DAOs, event log and registry for the active backend.

Example:
    >>> app_config = {'redis': {'host': 'localhost', 'port': 6379, 'db': 0}, 'settings': {}}
    >>> registry = build_registry(app_config, prefix='localshortener:local')
    >>> registry.list()
    []
"""

import logging
from typing import Any

from localshortener.constants import TTL, Limits, Store, Backend
from localshortener.dao.base import DocumentBaseDAO, UnavailableDocumentDAO
from localshortener.dao.memory import DocumentMemoryDAO
from localshortener.dao.redis import DocumentRedisDAO
from localshortener.dao.exceptions import DataStoreError
from localshortener.registry import ShortURLRegistry, EventLog


logger = logging.getLogger(__name__)

# Process-wide blobs for the memory backend, shared by every handler in the process
MEMORY_STORE: dict[str, str] = {}


def active_backend(app_config: dict[str, Any]) -> Backend:
    return Backend.REDIS if Backend.REDIS in app_config else Backend.MEMORY


def _document_dao(backend: Backend, backend_config: dict[str, Any], document: str, prefix: str | None) -> DocumentBaseDAO:
    if backend == Backend.MEMORY:
        return DocumentMemoryDAO(document=document, blobs=MEMORY_STORE, prefix=prefix)

    try:
        return DocumentRedisDAO(document=document, redis_config=backend_config, prefix=prefix)
    except DataStoreError as error:
        logger.warning(
            'Document store unreachable. Continuing with in-memory state.',
            extra={'document': document, 'reason': str(error), 'error': error.__class__.__name__},
        )
        return UnavailableDocumentDAO(error)


def build_registry(app_config: dict[str, Any], prefix: str | None = None) -> ShortURLRegistry:
    """Build a ShortURLRegistry (with its EventLog) for the configured backend

    Args:
        app_config (dict):
            Output of `load_config()`: `{<backend>: {...}, 'settings': {...}}`.
        prefix (str | None):
            Namespace prefix for document keys, e.g. 'localshortener:dev'.

    Returns:
        ShortURLRegistry: ready to use. If the store is unreachable, the registry
        works on in-memory state and reports it through `storage_error`.
    """
    backend = active_backend(app_config)
    backend_config = app_config.get(backend) or {}
    settings = app_config.get('settings') or {}
    logger.debug('Building registry.', extra={'backend': str(backend), 'prefix': prefix})

    event_log = EventLog(_document_dao(backend, backend_config, Store.EVENT_LOG, prefix))
    return ShortURLRegistry(
        _document_dao(backend, backend_config, Store.LINKS, prefix),
        event_log=event_log,
        default_validity_minutes=settings.get('default_validity_minutes', TTL.DEFAULT_VALIDITY_MINUTES),
        max_batch_size=int(settings.get('max_batch_size', Limits.MAX_BATCH_SIZE)),
    )

import random

import pytest

from localshortener.dao.exceptions import DataStoreError
from localshortener.dao.memory import DocumentMemoryDAO
from localshortener.registry import EventLog, ShortURLRegistry


class FailingDAO(DocumentMemoryDAO):
    """Memory DAO whose load/save can be switched to fail."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fail_load = False
        self.fail_save = False

    def load(self, **kwargs) -> dict:
        if self.fail_load:
            raise DataStoreError('store is down')
        return super().load(**kwargs)

    def save(self, document: dict, **kwargs) -> 'FailingDAO':
        if self.fail_save:
            raise DataStoreError('store is down')
        return super().save(document, **kwargs)


@pytest.fixture
def blobs() -> dict[str, str]:
    return {}


@pytest.fixture
def links_dao(blobs) -> DocumentMemoryDAO:
    return DocumentMemoryDAO(document='links', blobs=blobs)


@pytest.fixture
def event_log(blobs) -> EventLog:
    return EventLog(DocumentMemoryDAO(document='logs', blobs=blobs))


@pytest.fixture
def registry(links_dao, event_log) -> ShortURLRegistry:
    return ShortURLRegistry(links_dao, event_log=event_log, rng=random.Random(1234))


@pytest.fixture
def failing_dao() -> FailingDAO:
    return FailingDAO(document='links')

from localshortener.dao.base.document_base_dao import DocumentBaseDAO
from localshortener.dao.exceptions import DataStoreError


class UnavailableDocumentDAO(DocumentBaseDAO):
    """Stand-in for a document store that couldn't be reached

    Every operation raises the original connectivity error again, so callers
    degrade the same way they would on a store that fails mid-operation.
    """

    def __init__(self, error: DataStoreError):
        self.error = error

    def load(self, **kwargs) -> dict:
        raise DataStoreError(str(self.error)) from self.error

    def save(self, document: dict, **kwargs) -> 'UnavailableDocumentDAO':
        raise DataStoreError(str(self.error)) from self.error

from localshortener.dao.base.document_base_dao import DocumentBaseDAO, empty_document
from localshortener.dao.base.unavailable_document_dao import UnavailableDocumentDAO


__all__ = [
    'DocumentBaseDAO',
    'UnavailableDocumentDAO',
    'empty_document',
]

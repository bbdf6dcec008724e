import json

from localshortener.types import Document
from localshortener.dao.exceptions import DocumentCorruptedError


def decode_document(raw: str | bytes, key: str) -> Document:
    """Decode a stored JSON document and check it has an 'items' list

    Raises:
        DocumentCorruptedError:
            If the payload isn't valid JSON or isn't shaped like a document.
    """
    try:
        document = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise DocumentCorruptedError(f"Document '{key}' is not valid JSON.") from e

    if not isinstance(document, dict) or not isinstance(document.get('items'), list):
        raise DocumentCorruptedError(f"Document '{key}' must be an object with an 'items' list.")
    return document

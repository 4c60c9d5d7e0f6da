"""In-process document store used for development and tests."""

from __future__ import annotations

import copy
import threading
from typing import Any, Optional, Sequence

from ..exceptions import NotFoundException, StaleStateException
from .query import Filter, OrderBy, matches_all
from .store import DocumentStore


class MemoryDocumentStore(DocumentStore):
    """Keeps collections in dictionaries; documents are copied on every read and write."""

    def __init__(self) -> None:
        self._collections: dict[str, dict[str, dict[str, Any]]] = {}
        self._lock = threading.Lock()

    def get(self, collection: str, document_id: str) -> Optional[dict[str, Any]]:
        with self._lock:
            document = self._collections.get(collection, {}).get(document_id)
            return copy.deepcopy(document) if document is not None else None

    def set(self, collection: str, document_id: str, document: dict[str, Any]) -> None:
        stored = copy.deepcopy(document)
        stored["id"] = document_id
        with self._lock:
            self._collections.setdefault(collection, {})[document_id] = stored

    def update(
        self,
        collection: str,
        document_id: str,
        fields: dict[str, Any],
        *,
        expected_version: Optional[int] = None,
    ) -> dict[str, Any]:
        with self._lock:
            document = self._collections.get(collection, {}).get(document_id)
            if document is None:
                raise NotFoundException(collection, document_id)
            if expected_version is not None and document.get("version", 0) != expected_version:
                raise StaleStateException(collection, document_id, expected_version)
            document.update(copy.deepcopy(fields))
            return copy.deepcopy(document)

    def query(
        self,
        collection: str,
        filters: Sequence[Filter] = (),
        order_by: Optional[OrderBy] = None,
        limit: Optional[int] = None,
    ) -> list[dict[str, Any]]:
        with self._lock:
            documents = [
                copy.deepcopy(document)
                for document in self._collections.get(collection, {}).values()
                if matches_all(document, filters)
            ]

        if order_by is not None:
            # Documents missing the ordering field sort last in either direction.
            present = [doc for doc in documents if doc.get(order_by.field) is not None]
            missing = [doc for doc in documents if doc.get(order_by.field) is None]
            present.sort(key=lambda doc: doc[order_by.field], reverse=order_by.descending)
            documents = present + missing

        if limit is not None:
            documents = documents[:limit]
        return documents

    def clear(self) -> None:
        with self._lock:
            self._collections.clear()

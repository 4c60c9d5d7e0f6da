"""Abstract document store consumed by the routing engine."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional, Sequence

from .query import Filter, OrderBy

ORDERS = "orders"
BRANCHES = "branches"
WORKSTATION_ASSIGNMENTS = "workstation_assignments"


class DocumentStore(ABC):
    """Contract for document store backends.

    Every call may block on I/O. Implementations raise
    ``NotFoundException`` when updating a missing document,
    ``StaleStateException`` when ``expected_version`` does not match the
    stored ``version`` field, and ``StoreUnavailableException`` for
    transient backend failures.
    """

    @abstractmethod
    def get(self, collection: str, document_id: str) -> Optional[dict[str, Any]]:
        raise NotImplementedError

    @abstractmethod
    def set(self, collection: str, document_id: str, document: dict[str, Any]) -> None:
        raise NotImplementedError

    @abstractmethod
    def update(
        self,
        collection: str,
        document_id: str,
        fields: dict[str, Any],
        *,
        expected_version: Optional[int] = None,
    ) -> dict[str, Any]:
        """Apply a partial write and return the stored document."""
        raise NotImplementedError

    @abstractmethod
    def query(
        self,
        collection: str,
        filters: Sequence[Filter] = (),
        order_by: Optional[OrderBy] = None,
        limit: Optional[int] = None,
    ) -> list[dict[str, Any]]:
        raise NotImplementedError

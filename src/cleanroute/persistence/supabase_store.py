"""Supabase-backed document store.

Each collection maps to a table with snake_case columns and an ``id``
primary key. Embedded structures (garments, override history) live in
JSONB columns.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from ..db.supabase import get_supabase_client
from ..exceptions import NotFoundException, StaleStateException, StoreUnavailableException
from .query import Eq, Filter, Gte, In, Lte, OrderBy
from .store import DocumentStore

logger = logging.getLogger(__name__)


class SupabaseDocumentStore(DocumentStore):
    def __init__(self, client=None) -> None:
        self._client = client or get_supabase_client()
        if self._client is None:
            raise StoreUnavailableException(
                "Supabase not configured. Set CLEANROUTE_SUPABASE_URL and CLEANROUTE_SUPABASE_KEY."
            )

    def _execute(self, builder, *, action: str, collection: str):
        try:
            return builder.execute()
        except Exception as exc:
            logger.error(f"Supabase {action} on '{collection}' failed: {exc}")
            raise StoreUnavailableException(
                f"Failed to {action} '{collection}': {exc}",
                {"collection": collection, "action": action},
            ) from exc

    def get(self, collection: str, document_id: str) -> Optional[dict[str, Any]]:
        builder = self._client.table(collection).select("*").eq("id", document_id).limit(1)
        response = self._execute(builder, action="get", collection=collection)
        rows = response.data or []
        return rows[0] if rows else None

    def set(self, collection: str, document_id: str, document: dict[str, Any]) -> None:
        payload = {**document, "id": document_id}
        builder = self._client.table(collection).upsert(payload)
        self._execute(builder, action="set", collection=collection)

    def update(
        self,
        collection: str,
        document_id: str,
        fields: dict[str, Any],
        *,
        expected_version: Optional[int] = None,
    ) -> dict[str, Any]:
        builder = self._client.table(collection).update(fields).eq("id", document_id)
        if expected_version is not None:
            builder = builder.eq("version", expected_version)
        response = self._execute(builder, action="update", collection=collection)
        rows = response.data or []
        if rows:
            return rows[0]

        # Nothing matched: either the document is gone or the version moved on.
        if self.get(collection, document_id) is None:
            raise NotFoundException(collection, document_id)
        if expected_version is not None:
            raise StaleStateException(collection, document_id, expected_version)
        raise StoreUnavailableException(
            f"Update on '{collection}' returned no rows for '{document_id}'",
            {"collection": collection, "id": document_id},
        )

    def query(
        self,
        collection: str,
        filters: Sequence[Filter] = (),
        order_by: Optional[OrderBy] = None,
        limit: Optional[int] = None,
    ) -> list[dict[str, Any]]:
        builder = self._client.table(collection).select("*")
        for query_filter in filters:
            builder = _apply_filter(builder, query_filter)
        if order_by is not None:
            builder = builder.order(order_by.field, desc=order_by.descending)
        if limit is not None:
            builder = builder.limit(limit)
        response = self._execute(builder, action="query", collection=collection)
        return list(response.data or [])


def _apply_filter(builder, query_filter: Filter):
    if isinstance(query_filter, Eq):
        return builder.eq(query_filter.field, query_filter.value)
    if isinstance(query_filter, In):
        return builder.in_(query_filter.field, list(query_filter.values))
    if isinstance(query_filter, Gte):
        return builder.gte(query_filter.field, query_filter.value)
    if isinstance(query_filter, Lte):
        return builder.lte(query_filter.field, query_filter.value)
    raise TypeError(f"Unsupported filter type: {type(query_filter).__name__}")

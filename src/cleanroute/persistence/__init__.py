"""Document store backends and the configured store accessor."""

from functools import lru_cache

from ..config import settings
from .memory import MemoryDocumentStore
from .query import Eq, Filter, Gte, In, Lte, OrderBy
from .store import BRANCHES, ORDERS, WORKSTATION_ASSIGNMENTS, DocumentStore


@lru_cache()
def get_document_store() -> DocumentStore:
    """Return the configured store backend (cached for the process)."""
    if settings.store_backend == "supabase":
        from .supabase_store import SupabaseDocumentStore

        return SupabaseDocumentStore()
    return MemoryDocumentStore()


__all__ = [
    "BRANCHES",
    "ORDERS",
    "WORKSTATION_ASSIGNMENTS",
    "DocumentStore",
    "MemoryDocumentStore",
    "Eq",
    "Filter",
    "Gte",
    "In",
    "Lte",
    "OrderBy",
    "get_document_store",
]

"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

from ...config import settings
from ...db.supabase import get_supabase_client

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


@router.get("/health/store", status_code=status.HTTP_200_OK)
def health_store() -> dict:
    """Report which document store backend is configured."""
    if settings.store_backend == "memory":
        return {"backend": "memory", "configured": True}

    configured = get_supabase_client() is not None
    return {
        "backend": "supabase",
        "configured": configured,
        "message": None if configured else "Set CLEANROUTE_SUPABASE_URL and CLEANROUTE_SUPABASE_KEY.",
    }

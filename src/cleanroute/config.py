"""Application configuration and settings management."""

from typing import Any, Literal, Optional

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="CLEANROUTE_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "CleanRoute Order Routing API"
    api_prefix: str = "/api"
    store_backend: Literal["memory", "supabase"] = Field(
        default="memory",
        description="Document store backing the routing engine.",
    )

    # Sorting window
    default_sorting_window_hours: float = Field(
        default=6.0,
        gt=0,
        description="Sorting window applied when a branch does not configure one.",
    )
    expiring_window_hours: float = Field(
        default=2.0,
        ge=0,
        description="Horizon used to flag orders whose sorting window is about to elapse.",
    )

    # Queries
    default_query_limit: int = Field(default=50, ge=1)

    # Delivery classification thresholds (upper bounds for Small)
    classification_max_value: float = Field(default=5000.0, ge=0, description="Order value ceiling in KES.")
    classification_max_weight_kg: float = Field(default=10.0, ge=0)
    classification_max_garments: int = Field(default=5, ge=0)
    override_min_reason_length: int = Field(default=10, ge=1)
    override_roles: tuple[str, ...] = Field(
        default=(
            "admin",
            "director",
            "general_manager",
            "store_manager",
            "logistics_manager",
        ),
        description="Roles that the HTTP layer treats as allowed to override a classification.",
    )

    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    # Supabase configuration
    supabase_url: Optional[str] = Field(
        default=None,
        description="Supabase project URL (e.g., https://xxx.supabase.co).",
    )
    supabase_key: Optional[str] = Field(
        default=None,
        description="Supabase service role key for backend operations.",
    )

    @field_validator("frontend_allowed_origins", "override_roles", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(str(item) for item in parsed)
            except (json.JSONDecodeError, TypeError):
                pass
            if "," in value:
                return tuple(item.strip() for item in value.split(",") if item.strip())
            if value.strip():
                return (value.strip(),)
        return tuple()


settings = Settings()

"""Sorting timeline schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class ScheduleValidationRequest(BaseModel):
    scheduled_time: datetime


class ScheduleValidationModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    valid: bool
    earliest_time: datetime
    sorting_window_hours: float
    error: Optional[str] = None


class SortingWindowModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    remaining_minutes: int
    earliest_delivery_time: datetime
    is_complete: bool

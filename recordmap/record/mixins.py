"""Mixins injected by RecordMeta: primary key, soft delete, timestamps."""

import datetime
from typing import Optional

from pydantic import BaseModel


class _WithPrimaryKey(BaseModel):
    """Mixin that adds an auto-increment integer primary key `id`."""

    id: Optional[int] = None


class _WithSoftDelete(BaseModel):
    """Mixin that adds soft delete via `deleted_at` timestamp."""

    deleted_at: Optional[datetime.datetime] = None


class _WithTimestamps(BaseModel):
    """Mixin that adds `created_at` (set on insert) and `updated_at` (set on every write)."""

    created_at: Optional[datetime.datetime] = None
    updated_at: Optional[datetime.datetime] = None


MANAGED_COLUMNS = ("created_at", "updated_at", "deleted_at")
"""Columns written by the lifecycle itself, never mass-assignable."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from typing import Any

import sqlalchemy as sa
from sqlmodel import Field, SQLModel


def now_utc() -> datetime:
    """Return the current UTC time."""
    return datetime.now(UTC)


def timestamp_field(*, nullable: bool = False, onupdate: bool = False) -> Any:
    """Timezone-aware timestamp column.

    Required timestamps default to now on both the Python and the database
    side; nullable ones start empty and are set by the service layer.
    """
    if nullable:
        return Field(default=None, sa_type=sa.DateTime(timezone=True))  # ty: ignore[invalid-argument-type]

    column_kwargs: dict[str, Any] = {"server_default": sa.func.now()}
    if onupdate:
        column_kwargs["onupdate"] = sa.func.now()
    return Field(
        default_factory=now_utc,
        sa_type=sa.DateTime(timezone=True),  # ty: ignore[invalid-argument-type]
        sa_column_kwargs=column_kwargs,
    )


class UUIDBase(SQLModel):
    """Base model with a random UUID primary key."""

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True, sa_type=sa.Uuid)


class CreatedAtMixin(SQLModel):
    """Mixin that stamps rows with their insertion time."""

    created_at: datetime = timestamp_field()

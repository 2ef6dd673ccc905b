"""``?order_by=field:direction`` support for list endpoints."""

from __future__ import annotations

from collections.abc import Collection

from sqlalchemy import asc, desc
from sqlalchemy.orm import Query

from app.core.database import Base

SUBSCRIPTION_SORT_FIELDS = frozenset(
    {"name", "category", "amount", "next_renewal_date", "status", "created_at"}
)


def parse_order_by(
    order_by: str | None,
    allowed: Collection[str],
    default: tuple[str, str],
) -> tuple[str, str]:
    """Split a ``field:direction`` string into a sortable field and direction.

    Unknown fields fall back to ``default``; a missing or unknown direction
    means ascending.
    """
    if not order_by:
        return default
    field, _, direction = order_by.partition(":")
    if field not in allowed:
        return default
    return field, direction if direction in ("asc", "desc") else "asc"


def apply_order_by(
    query: Query,  # type: ignore[type-arg]
    model: type[Base],
    order_by: str | None,
    allowed: Collection[str],
    default: tuple[str, str] = ("created_at", "desc"),
) -> Query:  # type: ignore[type-arg]
    field, direction = parse_order_by(order_by, allowed, default)
    order_func = asc if direction == "asc" else desc
    return query.order_by(order_func(getattr(model, field)))

"""Sorting for discount listings."""

from __future__ import annotations

from enum import Enum

from sqlalchemy import asc, desc
from sqlalchemy.orm import Query

from promotions.core.database import Base


class DiscountSort(str, Enum):
    CREATED_AT_DESC = "createdAt.desc"
    CREATED_AT_ASC = "createdAt.asc"
    STARTS_AT_DESC = "startsAt.desc"
    STARTS_AT_ASC = "startsAt.asc"


_SORT_COLUMNS = {
    "createdAt": "created_at",
    "startsAt": "starts_at",
}


def apply_sort(
    query: Query,  # type: ignore[type-arg]
    model: type[Base],
    sort: DiscountSort | None,
    default: DiscountSort = DiscountSort.CREATED_AT_DESC,
) -> Query:  # type: ignore[type-arg]
    """Apply one of the fixed sort orders to a SQLAlchemy query.

    Args:
        query: The SQLAlchemy query to sort.
        model: The SQLAlchemy model class.
        sort: Sort key in "field.direction" form (e.g. "startsAt.asc").
            If None, ``default`` is used.
        default: Sort applied when ``sort`` is None.

    Returns:
        The query with ordering applied. ``id`` is appended as a tiebreaker
        so pages stay stable when timestamps collide.
    """
    field, direction = (sort or default).value.split(".", 1)
    column = getattr(model, _SORT_COLUMNS[field])
    order_func = asc if direction == "asc" else desc
    return query.order_by(order_func(column), order_func(model.id))

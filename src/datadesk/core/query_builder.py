"""Builds SQL for simple data requests against the fixed table."""

from collections.abc import Sequence


def build_simple_query(
    table: str,
    select: Sequence[str],
    where: Sequence[str] | None = None,
    order_by: Sequence[str] | None = None,
    limit: int | None = None,
) -> str:
    """Assemble ``SELECT ... FROM table [WHERE ...] [ORDER BY ...] [LIMIT n]``.

    Fragments are joined as given; WHERE conditions are combined with AND.
    The result is stored for an admin to review, never executed here.

    Raises:
        ValueError: If no columns are selected.
    """
    if not select:
        raise ValueError("At least one column must be selected")

    query = f"SELECT {', '.join(select)} FROM {table}"
    if where:
        query += " WHERE " + " AND ".join(where)
    if order_by:
        query += " ORDER BY " + ", ".join(order_by)
    if limit and limit > 0:
        query += f" LIMIT {limit}"
    return query

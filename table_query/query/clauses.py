"""
Clause builders for field lists, ordering, limits and assignments.
"""

from typing import Any, Mapping, Optional, Sequence, Union


Projection = Union[Sequence[str], Mapping[Any, str]]


def to_int(value: Any) -> int:
    """Coerce a value to int, falling back to 0 for non-numeric input."""
    if value is None:
        return 0
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        pass
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return 0


def build_fields(fields: Optional[Projection]) -> str:
    """
    Build the select list of a query.

    Args:
        fields: Column names, or a mapping where string keys alias a
            column ({"user_name": "name"}) and integer keys are positional

    Returns:
        "*" for an empty projection, otherwise the comma-joined columns
    """
    if not fields:
        return "*"

    items = fields.items() if isinstance(fields, Mapping) else enumerate(fields)
    result = []
    for key, val in items:
        if isinstance(key, str):
            result.append(f"`{key}` AS {val}")
        else:
            result.append(f"`{val}`")
    return ", ".join(result)


def build_order(order: Optional[Mapping[str, str]]) -> str:
    """Build the ORDER BY list; anything but "asc" sorts descending."""
    if not order:
        return ""
    return ", ".join(
        f"{column} " + ("ASC" if str(direction).lower() == "asc" else "DESC")
        for column, direction in order.items()
    )


def build_limit(limit: Any = 0, offset: Any = 0) -> str:
    """Build the LIMIT clause. An offset without a limit is ignored."""
    limit, offset = to_int(limit), to_int(offset)
    if limit <= 0:
        return ""
    if offset > 0:
        return f"LIMIT {offset}, {limit}"
    return f"LIMIT {limit}"


def build_assignments(data: Mapping[str, Any]) -> str:
    """Build `col` = :col assignments for a parameterized UPDATE."""
    return ", ".join(f"`{key}` = :{key}" for key in data)


def build_increments(
    data: Mapping[str, Any],
    auto_updated: str = "",
    now_literal: Optional[str] = None,
) -> str:
    """
    Build `col` = `col` + delta assignments.

    Deltas are coerced to int. When `auto_updated` is set and not among the
    incremented columns, it is assigned `now_literal` (already quoted).
    """
    parts = [f"`{key}` = `{key}` + {to_int(val)}" for key, val in data.items()]
    if auto_updated and data.get(auto_updated) is None and now_literal is not None:
        parts.append(f"`{auto_updated}` = {now_literal}")
    return ", ".join(parts)

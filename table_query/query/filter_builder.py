"""
Build SQL boolean expressions from filter mappings.

A filter maps field keys to values. A key is either a bare column name or
`column__operator`, e.g. {"age__gte": 18, "status": ["a", "b"]}.
"""

from typing import Any, Callable, Dict, List, Mapping, Optional

import structlog

from table_query.core.interfaces import IDatabaseGateway

logger = structlog.get_logger()

OPERATOR_SEPARATOR = "__"

COMPARISON_OPERATORS = {
    "gt": ">",
    "gte": ">=",
    "lt": "<",
    "lte": "<=",
    "ne": "!=",
}

OPERATORS = frozenset(
    list(COMPARISON_OPERATORS)
    + [
        "like",
        "notlike",
        "startswith",
        "endswith",
        "between",
        "in",
        "notin",
        "isnull",
    ]
)

SEQUENCE_TYPES = (list, tuple, set, frozenset)


def is_sequence(value: Any) -> bool:
    """Whether a filter value is a list of values rather than a scalar."""
    return isinstance(value, SEQUENCE_TYPES)


def split_key(key: str) -> tuple:
    """
    Split a filter key into (column, operator).

    The rightmost separator wins, so "meta__data__gt" is ("meta__data", "gt").
    A key without a separator has operator None.
    """
    pos = key.rfind(OPERATOR_SEPARATOR)
    if pos > 0:
        return key[:pos], key[pos + len(OPERATOR_SEPARATOR):]
    return key, None


class FilterBuilder:
    """
    Translates filter mappings into SQL conditions.

    Values are quoted through the gateway so the driver's own escaping
    rules apply. Conditions are always joined with AND.
    """

    def __init__(self, gateway: IDatabaseGateway):
        """
        Initialize filter builder.

        Args:
            gateway: Database gateway providing `quote`
        """
        self.gateway = gateway
        self._handlers: Dict[str, Callable[[str, Any], List[str]]] = {
            "like": self._like,
            "notlike": self._not_like,
            "startswith": self._starts_with,
            "endswith": self._ends_with,
            "between": self._between,
            "in": self._in,
            "notin": self._not_in,
            "isnull": self._is_null,
        }

    def build(self, filters: Optional[Mapping[str, Any]]) -> str:
        """
        Build the WHERE expression for a filter.

        Args:
            filters: Mapping of field keys to values

        Returns:
            Conditions joined with " AND ", or "" for an empty filter
        """
        if not filters:
            return ""

        where: List[str] = []
        for key, value in filters.items():
            where.extend(self.build_condition(key, value))
        return " AND ".join(where)

    def build_condition(self, key: str, value: Any) -> List[str]:
        """Build the clauses contributed by a single filter entry."""
        column, operator = split_key(key)

        if operator is None:
            if is_sequence(value):
                return [f"`{column}` IN ({self._quote_list(value)})"]
            return [f"`{column}` = {self.gateway.quote(value)}"]

        if operator in COMPARISON_OPERATORS:
            sign = COMPARISON_OPERATORS[operator]
            return [f"`{column}` {sign} {self.gateway.quote(value)}"]

        handler = self._handlers.get(operator)
        if handler is None:
            logger.warning("filter_operator_unknown", key=key, operator=operator)
            return []
        return handler(column, value)

    def escape_like(self, value: Any) -> str:
        """
        Escape a value for use inside a LIKE pattern.

        Backslashes are doubled, the gateway quoting is applied and its
        enclosing quotes stripped, then % and _ are escaped.
        """
        if not value:
            return "" if value is None else str(value)
        text = str(value).replace("\\", "\\\\")
        text = self.gateway.quote(text)[1:-1]
        return text.replace("%", "\\%").replace("_", "\\_")

    def _quote_list(self, values: Any) -> str:
        return ",".join(self.gateway.quote(v) for v in values)

    def _like(self, column: str, value: Any) -> List[str]:
        values = value if is_sequence(value) else [value]
        return [f"`{column}` LIKE '%{self.escape_like(v)}%'" for v in values]

    def _not_like(self, column: str, value: Any) -> List[str]:
        values = value if is_sequence(value) else [value]
        return [f"`{column}` NOT LIKE '%{self.escape_like(v)}%'" for v in values]

    def _starts_with(self, column: str, value: Any) -> List[str]:
        return [f"`{column}` LIKE '{self.escape_like(value)}%'"]

    def _ends_with(self, column: str, value: Any) -> List[str]:
        return [f"`{column}` LIKE '%{self.escape_like(value)}'"]

    def _between(self, column: str, value: Any) -> List[str]:
        # needs an ordered (low, high) pair; extra items are ignored
        if not isinstance(value, (list, tuple)) or len(value) < 2:
            logger.warning("filter_value_invalid", column=column, operator="between")
            return []
        return [
            f"(`{column}` BETWEEN {self.gateway.quote(value[0])} "
            f"AND {self.gateway.quote(value[1])})"
        ]

    def _in(self, column: str, value: Any) -> List[str]:
        values = value if is_sequence(value) else [value]
        return [f"`{column}` IN ({self._quote_list(values)})"]

    def _not_in(self, column: str, value: Any) -> List[str]:
        values = value if is_sequence(value) else [value]
        return [f"`{column}` NOT IN ({self._quote_list(values)})"]

    def _is_null(self, column: str, value: Any) -> List[str]:
        if value:
            return [f"`{column}` IS NULL"]
        return [f"`{column}` IS NOT NULL"]

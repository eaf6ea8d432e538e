"""Filter grammar, clause builders and statement translation."""

from table_query.query.filter_builder import FilterBuilder, OPERATORS, split_key
from table_query.query.translator import QueryTranslator

__all__ = ["FilterBuilder", "OPERATORS", "split_key", "QueryTranslator"]

"""
Example usage of the table model with SQLite.

Creates an articles table, then walks through filtering, paging,
upserts and counters. Set TABLE_QUERY_SQLITE_PATH to use a file.
"""

import json

from dotenv import load_dotenv

from table_query import TableConfig, TableModel, datetime_clock
from table_query.adapters.sqlite import SQLiteGateway
from table_query.logging_config import configure_logging

load_dotenv()


def setup_model():
    """Setup an articles table over SQLite."""
    gateway = SQLiteGateway.from_env()
    gateway.connection.execute(
        f"""
        CREATE TABLE IF NOT EXISTS {gateway.table("articles")} (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            slug TEXT NOT NULL UNIQUE,
            title TEXT,
            views INTEGER NOT NULL DEFAULT 0,
            created_at TEXT,
            updated_at TEXT
        )
        """
    )
    config = TableConfig(
        table="articles",
        auto_created="created_at",
        auto_updated="updated_at",
        clock=datetime_clock,
    )
    return TableModel(gateway, config)


def example_1_filtering(articles):
    """
    Example 1: Filtering, Sorting, and Paging

    Tests:
    - Batch insert in one transaction
    - LIKE with a literal % in the value
    - IN / BETWEEN filters
    - Page 2 of size 2
    """
    print("\n=== Example 1: Filtering ===")
    ids = articles.insert(
        [
            {"slug": "sale", "title": "50% off everything"},
            {"slug": "release", "title": "Version 5000 released"},
            {"slug": "intro", "title": "Hello"},
            {"slug": "outro", "title": "Goodbye"},
        ],
        multi=True,
    )
    print(f"Inserted ids: {ids}")

    print(json.dumps(articles.select(["slug"], {"title__like": "50% off"}), indent=2))
    print(json.dumps(articles.select({"slug": "s"}, {"id__in": ids[:2]}), indent=2))
    print(json.dumps(articles.page(["id", "slug"], {}, {"id": "asc"}, 2, 2), indent=2))


def example_2_updates(articles):
    """
    Example 2: Updates, Upserts and Counters
    """
    print("\n=== Example 2: Updates ===")
    articles.update({"title": "Hi"}, {"slug": "intro"})
    articles.increment({"views": 10}, {"slug__startswith": "intro"})
    articles.insert_or_update({"slug": "intro", "title": "Hello again"})
    print(json.dumps(articles.get_row({"slug": "intro"}), indent=2))
    print(f"Articles without views: {articles.count({'views': 0})}")


def main():
    configure_logging("INFO")
    articles = setup_model()
    example_1_filtering(articles)
    example_2_updates(articles)
    print(f"Deleted {articles.delete({})} rows")


if __name__ == "__main__":
    main()

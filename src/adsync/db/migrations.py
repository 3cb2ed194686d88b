"""
Schema migrations for the sync job's columns.

The project table belongs to the dashboard application and may predate
the sync job, so the columns this job writes are added in place when
absent. Each migration is idempotent.

Called automatically from get_engine() after create_all().
"""
from sqlalchemy import inspect, text


def run_migrations(engine) -> None:
    """Apply all pending schema migrations.

    Safe to call multiple times: checks column existence before altering.

    Args:
        engine: SQLAlchemy engine (SQLModel create_engine result).
    """
    with engine.connect() as conn:
        # Project: eligibility flag and the two sync-status fields
        _add_column_if_missing(conn, "project", "archived", "BOOLEAN NOT NULL DEFAULT FALSE")
        _add_column_if_missing(conn, "project", "last_sync_at", "TIMESTAMP")
        _add_column_if_missing(conn, "project", "last_sync_status", "VARCHAR")

        conn.commit()


def _add_column_if_missing(conn, table: str, column: str, col_type: str) -> None:
    """Add a column to a table if it doesn't already exist.

    Args:
        conn: SQLAlchemy connection.
        table: Table name, as created by SQLModel (lowercase class name).
        column: Column name to add.
        col_type: SQL type clause, e.g. "TIMESTAMP", "VARCHAR".
    """
    existing_columns = {col["name"] for col in inspect(conn).get_columns(table)}
    if column not in existing_columns:
        conn.execute(text(f"ALTER TABLE {table} ADD COLUMN {column} {col_type}"))

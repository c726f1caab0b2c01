"""
DDL and bookkeeping queries for the processed_content destination table.
"""

from psycopg import sql

from content_verify.observability.logger import get_logger

from .connection import DatabaseConnectionPool

logger = get_logger(__name__)

PROCESSED_CONTENT_COLUMNS = ("id", "original_text", "modified_text", "pid", "error_reason")


class ProcessedContentTable:
    """
    Manages the destination table.

    Columns: id (primary key), original_text, modified_text, pid (task id),
    error_reason (null when the record processed cleanly).
    """

    def __init__(self, pool: DatabaseConnectionPool, table: str = "processed_content"):
        """
        Initialize table manager.

        Args:
            pool: Database connection pool for the destination database
            table: Destination table name
        """
        self.pool = pool
        self.table = table
        self._identifier = sql.Identifier(table)

    def create(self, recreate: bool = False) -> None:
        """
        Create the table.

        Args:
            recreate: Drop an existing table first (the table is then empty)
        """
        if recreate:
            self.pool.execute_command(
                sql.SQL("DROP TABLE IF EXISTS {}").format(self._identifier)
            )
            logger.info(f"Dropped table {self.table}")

        self.pool.execute_command(
            sql.SQL(
                """
                CREATE TABLE IF NOT EXISTS {} (
                    id TEXT PRIMARY KEY,
                    original_text TEXT,
                    modified_text TEXT,
                    pid TEXT,
                    error_reason TEXT
                )
                """
            ).format(self._identifier)
        )
        logger.debug(f"Table {self.table} ready")

    def count(self) -> int:
        """Number of rows in the table."""
        result = self.pool.execute_query(
            sql.SQL("SELECT COUNT(*) AS total FROM {}").format(self._identifier)
        )
        return result[0]["total"] if result else 0

    def count_by_reason(self) -> dict[str | None, int]:
        """Row counts keyed by error_reason (None for clean rows)."""
        rows = self.pool.execute_query(
            sql.SQL(
                "SELECT error_reason, COUNT(*) AS total FROM {} GROUP BY error_reason ORDER BY total DESC"
            ).format(self._identifier)
        )
        return {row["error_reason"]: row["total"] for row in rows}

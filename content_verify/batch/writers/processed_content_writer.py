"""
Writer for the processed_content destination table.

Writes a page in one executemany transaction. When the page insert fails,
rows are retried one at a time so a single bad row only loses itself.
"""

from typing import Iterable, Sequence

import psycopg
from psycopg import sql
from pyspark.sql import DataFrame

from content_verify.core.models import ProcessedContent
from content_verify.observability.logger import get_logger
from content_verify.warehouse.connection import DatabaseConnectionPool
from content_verify.warehouse.schema_mgmt import PROCESSED_CONTENT_COLUMNS

logger = get_logger(__name__)

Row = tuple[str, str, str, str, str | None]


class ProcessedContentWriter:
    """
    Inserts (id, original_text, modified_text, pid, error_reason) rows.
    """

    def __init__(self, pool: DatabaseConnectionPool, table: str = "processed_content"):
        """
        Initialize writer.

        Args:
            pool: Connection pool for the destination database
            table: Destination table name
        """
        self.pool = pool
        self.table = table
        self._insert = sql.SQL("INSERT INTO {table} ({columns}) VALUES ({values})").format(
            table=sql.Identifier(table),
            columns=sql.SQL(", ").join(map(sql.Identifier, PROCESSED_CONTENT_COLUMNS)),
            values=sql.SQL(", ").join(sql.Placeholder() * len(PROCESSED_CONTENT_COLUMNS)),
        )

    def write_batch(self, results: Sequence[ProcessedContent]) -> int:
        """
        Write processed records.

        Args:
            results: Processor outputs (every record is written, reason or not)

        Returns:
            Number of rows written
        """
        return self.write_rows([result.to_row() for result in results])

    def write_rows(self, rows: Sequence[Row]) -> int:
        """
        Write raw destination rows.

        Returns:
            Number of rows written; the difference to ``len(rows)`` failed
        """
        if not rows:
            return 0

        try:
            self.pool.execute_batch(self._insert, list(rows))
            return len(rows)
        except psycopg.Error as e:
            logger.warning(
                f"Batch insert of {len(rows)} rows into {self.table} failed, retrying row by row: {e}"
            )

        return sum(1 for row in rows if self._write_one(row))

    def _write_one(self, row: Row) -> bool:
        try:
            self.pool.execute_command(self._insert, row)
            return True
        except psycopg.Error as e:
            logger.warning(f"Insert of record {row[0]} into {self.table} failed: {e}")
            return False

    def write_dataframe(self, df: DataFrame) -> int:
        """
        Write a Spark DataFrame with the destination columns.

        Args:
            df: DataFrame with id, original_text, modified_text, pid and error_reason

        Returns:
            Number of rows written
        """
        missing = [column for column in PROCESSED_CONTENT_COLUMNS if column not in df.columns]
        if missing:
            raise ValueError(f"DataFrame is missing destination columns: {', '.join(missing)}")

        rows = df.select(*PROCESSED_CONTENT_COLUMNS).collect()
        return self.write_rows(list(rows_to_tuples(rows)))


def rows_to_tuples(rows: Iterable) -> Iterable[Row]:
    for row in rows:
        yield (
            row["id"],
            row["original_text"] or "",
            row["modified_text"] or "",
            row["pid"] or "",
            row["error_reason"],
        )

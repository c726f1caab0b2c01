"""
Paginated reader for the tbl_verify_content source table.
"""

import json
from typing import Any, Iterator

from psycopg import sql

from content_verify.core.models import RawRecord
from content_verify.core.schema import SchemaClassifier
from content_verify.core.settings import SourceSettings
from content_verify.observability.logger import get_logger
from content_verify.warehouse.connection import DatabaseConnectionPool

logger = get_logger(__name__)


class VerifyContentReader:
    """
    Reads source rows page by page (ORDER BY id, LIMIT/OFFSET) as RawRecords.

    With ``settings.prefilter`` enabled, rows that cannot be reconstructed
    (null content, invalid JSON, no ``data`` object, or neither schema with a
    non-empty correction list) are dropped before processing and counted in
    ``skipped``.
    """

    def __init__(
        self,
        pool: DatabaseConnectionPool,
        settings: SourceSettings | None = None,
        classifier: SchemaClassifier | None = None,
    ):
        """
        Initialize reader.

        Args:
            pool: Connection pool for the source database
            settings: Source table layout and filters
            classifier: Classifier used by the prefilter
        """
        self.pool = pool
        self.settings = settings or SourceSettings()
        self.classifier = classifier or SchemaClassifier()
        self.skipped = 0

    def _where(self) -> tuple[sql.Composable, tuple]:
        if self.settings.task_id:
            clause = sql.SQL("WHERE {} = %s").format(sql.Identifier(self.settings.task_id_column))
            return clause, (self.settings.task_id,)
        return sql.SQL(""), ()

    def count(self) -> int:
        """Number of source rows matching the task filter."""
        where, params = self._where()
        query = sql.SQL("SELECT COUNT(*) AS total FROM {} {}").format(
            sql.Identifier(self.settings.table), where
        )
        result = self.pool.execute_query(query, params)
        return result[0]["total"] if result else 0

    def fetch_page(self, limit: int, offset: int) -> list[dict[str, Any]]:
        """Fetch one page of raw rows (record_id, task_id, content)."""
        where, params = self._where()
        query = sql.SQL(
            "SELECT {id} AS record_id, {task} AS task_id, {content} AS content "
            "FROM {table} {where} ORDER BY {id} LIMIT %s OFFSET %s"
        ).format(
            id=sql.Identifier(self.settings.id_column),
            task=sql.Identifier(self.settings.task_id_column),
            content=sql.Identifier(self.settings.content_column),
            table=sql.Identifier(self.settings.table),
            where=where,
        )
        return self.pool.execute_query(query, params + (limit, offset))

    def iter_pages(self, batch_size: int) -> Iterator[list[RawRecord]]:
        """
        Yield pages of RawRecords until the table is exhausted.

        Args:
            batch_size: Rows fetched per query

        Yields:
            Non-empty lists of RawRecords
        """
        if batch_size < 1:
            raise ValueError(f"batch_size must be >= 1, got {batch_size}")

        offset = 0
        while True:
            rows = self.fetch_page(batch_size, offset)
            if not rows:
                return
            offset += len(rows)

            records = [to_raw_record(row) for row in rows]
            if self.settings.prefilter:
                records = [record for record in records if self._accept(record)]

            if records:
                yield records

            if len(rows) < batch_size:
                return

    def _accept(self, record: RawRecord) -> bool:
        if record.content is None:
            return self._skip(record, "content is NULL")

        try:
            document = json.loads(record.content)
        except json.JSONDecodeError as e:
            return self._skip(record, f"content is not valid JSON: {e}")

        data = document.get("data") if isinstance(document, dict) else None
        if not isinstance(data, dict):
            return self._skip(record, "no data object in content")

        if not self.classifier.classify(data).eligible:
            return self._skip(record, "matches no known schema")

        return True

    def _skip(self, record: RawRecord, why: str) -> bool:
        self.skipped += 1
        logger.debug(f"Record {record.record_id}: {why}, skipping")
        return False


def to_raw_record(row: dict[str, Any]) -> RawRecord:
    """
    Build a RawRecord from a source row.

    json/jsonb columns arrive already decoded and are re-encoded to text.
    """
    content = row.get("content")
    if isinstance(content, (bytes, bytearray, memoryview)):
        content = bytes(content).decode("utf-8", errors="replace")
    elif content is not None and not isinstance(content, str):
        content = json.dumps(content, ensure_ascii=False)

    record_id = row.get("record_id")
    task_id = row.get("task_id")
    return RawRecord(
        record_id=None if record_id is None else str(record_id),
        task_id="" if task_id is None else str(task_id),
        content=content,
    )

"""
Migration pipeline orchestration.

Coordinates the flow: read page → process → write page

Two drivers share the same ContentProcessor:
- MigrationPipeline pages through the source table in-process
- SparkContentBatch processes an exported table with mapPartitions
"""

import time
from collections import Counter
from functools import partial
from typing import Any, Dict, Iterable, Iterator, Optional

from pyspark.sql import DataFrame, SparkSession
from pyspark.sql.types import StringType, StructField, StructType

from content_verify.batch.readers import FileReader, VerifyContentReader
from content_verify.batch.writers import ProcessedContentWriter
from content_verify.core.models import ProcessedContent, RawRecord
from content_verify.core.processor import ContentProcessor
from content_verify.core.settings import ProcessorSettings
from content_verify.observability import metrics
from content_verify.observability.logger import get_logger, log_operation
from content_verify.warehouse.schema_mgmt import ProcessedContentTable

logger = get_logger(__name__)

CLEAN = "none"  # by_reason key for records without a reason

RESULT_SCHEMA = StructType([
    StructField("id", StringType(), False),
    StructField("original_text", StringType(), True),
    StructField("modified_text", StringType(), True),
    StructField("pid", StringType(), True),
    StructField("error_reason", StringType(), True),
    StructField("variant", StringType(), True),
    StructField("reason_kind", StringType(), True),
])


def _reason_key(result: ProcessedContent) -> str:
    return result.reason_kind.value if result.reason_kind else CLEAN


class MigrationPipeline:
    """
    Migrates the verification source table into processed_content.

    Flow per page:
    1. Read a page of RawRecords (optionally prefiltered)
    2. Process every record (one result per record, reasons included)
    3. Write the page; write failures are logged and counted, never fatal
    """

    def __init__(
        self,
        reader: VerifyContentReader,
        writer: Optional[ProcessedContentWriter],
        processor: ContentProcessor,
        table: Optional[ProcessedContentTable] = None,
    ):
        """
        Initialize migration pipeline.

        Args:
            reader: Source reader
            writer: Destination writer (None for a dry run)
            processor: Content processor
            table: Destination table manager, created before the first page
        """
        self.reader = reader
        self.writer = writer
        self.processor = processor
        self.table = table
        self._stop_requested = False

    def request_stop(self) -> None:
        """Stop after the page currently in flight."""
        self._stop_requested = True

    @property
    def stop_requested(self) -> bool:
        return self._stop_requested

    def run(self, batch_size: int = 100, recreate: bool = False) -> Dict[str, Any]:
        """
        Run the migration.

        Args:
            batch_size: Source rows per page
            recreate: Drop and recreate the destination table first

        Returns:
            Dictionary with run statistics:
            - total_records: Records processed
            - written: Rows written to the destination table
            - failed: Rows whose insert failed
            - skipped: Rows dropped by the reader's prefilter
            - by_reason: Record counts per reason kind ("none" for clean records)
            - duration_seconds: Wall time of the run
            - stopped: Whether the run ended on a stop request
        """
        started = time.time()
        stats: Dict[str, Any] = {
            "total_records": 0,
            "written": 0,
            "failed": 0,
            "skipped": 0,
            "by_reason": {},
            "duration_seconds": 0.0,
            "stopped": False,
        }
        by_reason: Counter = Counter()

        if self.table is not None and self.writer is not None:
            self.table.create(recreate=recreate)

        total = self.reader.count()
        logger.info(f"Migrating {total} source records in pages of {batch_size}")

        for page_number, page in enumerate(self.reader.iter_pages(batch_size), start=1):
            with log_operation("Migrating page", logger=logger, page=page_number, size=len(page)) as op:
                results = self.process_page(page)
                written, failed = self._write(results)

            for result in results:
                by_reason[_reason_key(result)] += 1
            stats["total_records"] += len(results)
            stats["written"] += written
            stats["failed"] += failed

            metrics.record_batch(
                "migrate",
                op.duration,
                write_failed=failed,
                table=self.writer.table if self.writer else "processed_content",
            )
            logger.info(
                f"Progress: {stats['total_records']}/{total} processed, "
                f"{stats['written']} written, {stats['failed']} failed"
            )

            if self._stop_requested:
                logger.warning("Stop requested, ending migration after current page")
                stats["stopped"] = True
                break

        stats["skipped"] = self.reader.skipped
        stats["by_reason"] = dict(by_reason)
        stats["duration_seconds"] = round(time.time() - started, 3)

        logger.info(
            "Migration complete",
            extra={key: value for key, value in stats.items() if key != "by_reason"},
        )
        return stats

    def process_page(self, page: Iterable[RawRecord]) -> list[ProcessedContent]:
        results = []
        for result in self.processor.process_many(page):
            metrics.record_processed_content(result)
            results.append(result)
        return results

    def _write(self, results: list[ProcessedContent]) -> tuple[int, int]:
        if self.writer is None or not results:
            return 0, 0
        written = self.writer.write_batch(results)
        return written, len(results) - written


def process_partition(
    rows: Iterable[Any],
    settings: Dict[str, Any],
    id_column: str = "id",
    task_id_column: str = "taskId",
    content_column: str = "content",
) -> Iterator[tuple]:
    """
    Process one Spark partition.

    Runs on executors, so the processor is rebuilt from plain settings.

    Args:
        rows: Partition rows with id, task id and content columns
        settings: ProcessorSettings as a dict

    Yields:
        Tuples matching RESULT_SCHEMA
    """
    processor = ContentProcessor(ProcessorSettings.model_validate(settings))
    for row in rows:
        record = RawRecord(
            record_id=row[id_column],
            task_id=row[task_id_column] or "",
            content=row[content_column],
        )
        result = processor.process(record)
        yield result.to_row() + (result.variant.value, _reason_key(result))


class SparkContentBatch:
    """
    Processes an exported verification table with Spark.

    Flow:
    1. Read the export (JSON lines, Parquet, CSV)
    2. Process records per partition with mapPartitions
    3. Optionally write results to processed_content
    """

    def __init__(
        self,
        spark: SparkSession,
        settings: Optional[ProcessorSettings] = None,
        writer: Optional[ProcessedContentWriter] = None,
        table: Optional[ProcessedContentTable] = None,
    ):
        """
        Initialize Spark batch.

        Args:
            spark: Active Spark session
            settings: Processor settings shipped to executors
            writer: Destination writer (results are only returned when None)
            table: Destination table manager, created before writing
        """
        self.spark = spark
        self.settings = settings or ProcessorSettings()
        self.writer = writer
        self.table = table
        self.file_reader = FileReader(spark)

    def process_dataframe(
        self,
        df: DataFrame,
        id_column: str = "id",
        task_id_column: str = "taskId",
        content_column: str = "content",
    ) -> DataFrame:
        """
        Process a DataFrame of source rows.

        Args:
            df: DataFrame with id, task id and content columns

        Returns:
            DataFrame with RESULT_SCHEMA columns
        """
        missing = [c for c in (id_column, task_id_column, content_column) if c not in df.columns]
        if missing:
            raise ValueError(f"Input is missing columns: {', '.join(missing)}")

        mapper = partial(
            process_partition,
            settings=self.settings.model_dump(),
            id_column=id_column,
            task_id_column=task_id_column,
            content_column=content_column,
        )
        rdd = df.select(id_column, task_id_column, content_column).rdd.mapPartitions(mapper)
        return self.spark.createDataFrame(rdd, RESULT_SCHEMA)

    def process_file(
        self,
        file_path: str,
        file_format: str = "json",
        dry_run: bool = False,
        recreate: bool = False,
        **read_options
    ) -> Dict[str, Any]:
        """
        Process an exported file through the pipeline.

        Args:
            file_path: Path to input file
            file_format: File format (json, parquet, csv)
            dry_run: Process without writing
            recreate: Drop and recreate the destination table first
            **read_options: Additional read options

        Returns:
            Dictionary with processing results:
            - total_records: Records processed
            - written: Rows written (0 on a dry run)
            - failed: Rows whose insert failed
            - by_reason: Record counts per reason kind
            - duration_seconds: Wall time
        """
        logger.info(f"Starting batch processing for file: {file_path}")

        with log_operation("Processing export", logger=logger, file=file_path) as op:
            df = self.file_reader.read(file_path, file_format=file_format, **read_options)
            results = self.process_dataframe(df).cache()
            total = results.count()
            by_reason = {
                row["reason_kind"]: row["count"]
                for row in results.groupBy("reason_kind").count().collect()
            }

            written = 0
            if not dry_run and self.writer is not None:
                if self.table is not None:
                    self.table.create(recreate=recreate)
                if total:
                    written = self.writer.write_dataframe(results)

            results.unpersist()

        failed = 0 if dry_run or self.writer is None else total - written
        metrics.record_batch(
            "spark",
            op.duration,
            write_failed=failed,
            table=self.writer.table if self.writer else "processed_content",
        )

        return {
            "total_records": total,
            "written": written,
            "failed": failed,
            "by_reason": by_reason,
            "duration_seconds": round(op.duration, 3),
        }

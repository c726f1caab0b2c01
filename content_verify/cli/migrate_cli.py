"""
Command-line interface for the verification log migration.

Usage:
    content-verify-log migrate -c config/migration.yaml [-b 200] [--dry-run]
    content-verify-log process-file --input export.json [--format json] [--dry-run]
    content-verify-log count -c config/migration.yaml
"""

import argparse
import json
import signal
import sys
from pathlib import Path
from typing import Optional

from dotenv import find_dotenv, load_dotenv
from pyspark.sql import SparkSession

from content_verify.batch.pipeline import MigrationPipeline, SparkContentBatch
from content_verify.batch.readers import VerifyContentReader
from content_verify.batch.writers import ProcessedContentWriter
from content_verify.core.processor import ContentProcessor
from content_verify.core.settings import MigrationSettings, SettingsLoader
from content_verify.observability import metrics
from content_verify.observability.logger import configure_logging, get_logger
from content_verify.warehouse.connection import DatabaseConnectionPool
from content_verify.warehouse.schema_mgmt import ProcessedContentTable

logger = get_logger(__name__)

DEFAULT_CONFIG = "config/migration.yaml"

# Pipeline to stop on SIGINT/SIGTERM
_active_pipeline: Optional[MigrationPipeline] = None


def signal_handler(signum, frame):  # type: ignore[no-untyped-def]
    """
    Handle shutdown signals (SIGINT, SIGTERM) by stopping after the current page.

    Args:
        signum: Signal number
        frame: Current stack frame
    """
    signal_name = signal.Signals(signum).name
    logger.info(f"Received {signal_name} signal, finishing current page before exit...")
    if _active_pipeline is not None:
        _active_pipeline.request_stop()


def load_settings(config_path: Optional[str]) -> MigrationSettings:
    """
    Load settings from YAML, or defaults plus environment overrides without a file.

    Raises:
        FileNotFoundError: If the given file does not exist
        ValueError: If the file is invalid
    """
    if config_path is None:
        return MigrationSettings()
    return SettingsLoader(config_path).load()


def create_spark_session(app_name: str = "ContentVerifyLog") -> SparkSession:
    """
    Create Spark session for processing exported tables.

    Args:
        app_name: Application name

    Returns:
        SparkSession
    """
    spark = SparkSession.builder \
        .appName(app_name) \
        .master("local[*]") \
        .config("spark.sql.adaptive.enabled", "true") \
        .config("spark.sql.adaptive.coalescePartitions.enabled", "true") \
        .getOrCreate()

    return spark


def migrate_command(args: argparse.Namespace) -> int:
    """
    Migrate the source table into processed_content.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    global _active_pipeline

    try:
        settings = load_settings(args.config)
    except (FileNotFoundError, ValueError) as e:
        logger.error(str(e))
        return 1

    configure_logging(settings.log_level, settings.log_format)
    batch_size = args.batch_size or settings.batch_size

    if args.metrics_port:
        metrics.start_metrics_server(args.metrics_port)
        logger.info(f"Metrics served on port {args.metrics_port}")

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    source_pool = None
    sink_pool = None
    try:
        source_pool = DatabaseConnectionPool.from_settings(settings.source_db)
        source_pool.open()

        writer = None
        table = None
        if args.dry_run:
            logger.info("DRY RUN MODE: No data will be written to database")
        else:
            if settings.sink_db is None:
                sink_pool = source_pool
            else:
                sink_pool = DatabaseConnectionPool.from_settings(settings.sink_db)
                sink_pool.open()
            writer = ProcessedContentWriter(sink_pool, settings.sink.table)
            table = ProcessedContentTable(sink_pool, settings.sink.table)

        processor = ContentProcessor(settings.processor)
        reader = VerifyContentReader(source_pool, settings.source, processor.classifier)
        pipeline = MigrationPipeline(reader, writer, processor, table)
        _active_pipeline = pipeline

        stats = pipeline.run(batch_size=batch_size, recreate=settings.sink.recreate)

        logger.info("=" * 60)
        logger.info("MIGRATION COMPLETE" if not stats["stopped"] else "MIGRATION STOPPED")
        logger.info("=" * 60)
        logger.info(f"Total records processed: {stats['total_records']}")
        logger.info(f"Rows written: {stats['written']}")
        logger.info(f"Rows failed: {stats['failed']}")
        logger.info(f"Rows skipped by prefilter: {stats['skipped']}")
        for reason_kind, count in sorted(stats["by_reason"].items()):
            logger.info(f"  {reason_kind}: {count}")
        logger.info(f"Duration: {stats['duration_seconds']}s")
        logger.info("=" * 60)

        print(json.dumps(stats, indent=2))
        return 0

    except Exception as e:
        logger.error(f"Error during migration: {e}", exc_info=True)
        return 1
    finally:
        _active_pipeline = None
        if sink_pool is not None and sink_pool is not source_pool:
            sink_pool.close()
        if source_pool is not None:
            source_pool.close()


def process_file_command(args: argparse.Namespace) -> int:
    """
    Process an exported source table with Spark.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    input_path = Path(args.input)
    if not input_path.exists():
        logger.error(f"Input file not found: {args.input}")
        return 1

    try:
        settings = load_settings(args.config)
    except (FileNotFoundError, ValueError) as e:
        logger.error(str(e))
        return 1

    configure_logging(settings.log_level, settings.log_format)

    spark = create_spark_session()
    pool = None
    try:
        writer = None
        table = None
        if args.dry_run:
            logger.info("DRY RUN MODE: No data will be written to database")
        else:
            pool = DatabaseConnectionPool.from_settings(settings.sink_database)
            pool.open()
            writer = ProcessedContentWriter(pool, settings.sink.table)
            table = ProcessedContentTable(pool, settings.sink.table)

        batch = SparkContentBatch(spark, settings.processor, writer=writer, table=table)
        result = batch.process_file(
            str(input_path),
            file_format=args.format,
            dry_run=args.dry_run,
            recreate=settings.sink.recreate,
        )

        logger.info("=" * 60)
        logger.info("PROCESSING COMPLETE")
        logger.info("=" * 60)
        logger.info(f"Total records processed: {result['total_records']}")
        logger.info(f"Rows written: {result['written']}")
        for reason_kind, count in sorted(result["by_reason"].items()):
            logger.info(f"  {reason_kind}: {count}")
        logger.info("=" * 60)

        print(json.dumps(result, indent=2))
        return 0

    except Exception as e:
        logger.error(f"Error during file processing: {e}", exc_info=True)
        return 1
    finally:
        if pool is not None:
            pool.close()
        spark.stop()


def count_command(args: argparse.Namespace) -> int:
    """
    Show source and destination row counts.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    try:
        settings = load_settings(args.config)
    except (FileNotFoundError, ValueError) as e:
        logger.error(str(e))
        return 1

    configure_logging(settings.log_level, settings.log_format)

    try:
        with DatabaseConnectionPool.from_settings(settings.source_db) as source_pool:
            source_total = VerifyContentReader(source_pool, settings.source).count()

        with DatabaseConnectionPool.from_settings(settings.sink_database) as sink_pool:
            table = ProcessedContentTable(sink_pool, settings.sink.table)
            table.create()
            output = {
                "source_table": settings.source.table,
                "source_records": source_total,
                "destination_table": settings.sink.table,
                "destination_records": table.count(),
                "by_reason": {
                    (reason or "none"): total for reason, total in table.count_by_reason().items()
                },
            }

        print(json.dumps(output, indent=2, ensure_ascii=False))
        return 0

    except Exception as e:
        logger.error(f"Failed to count records: {e}", exc_info=True)
        return 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="content-verify-log",
        description="Reconstruct original and corrected text from verification logs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Migrate the whole source table
  %(prog)s migrate -c config/migration.yaml

  # Larger pages, no writes
  %(prog)s migrate -c config/migration.yaml -b 500 --dry-run

  # Process an exported table with Spark
  %(prog)s process-file --input exports/verify_content.json --format json

  # Compare source and destination counts
  %(prog)s count -c config/migration.yaml
        """
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    # Migrate command
    migrate_parser = subparsers.add_parser("migrate", help="Migrate the source table")
    migrate_parser.add_argument(
        "-c", "--config",
        default=DEFAULT_CONFIG,
        help=f"Path to configuration YAML (default: {DEFAULT_CONFIG})"
    )
    migrate_parser.add_argument(
        "-b", "--batch-size",
        type=int,
        help="Source rows per page (default: from config)"
    )
    migrate_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Process records without writing to database"
    )
    migrate_parser.add_argument(
        "--metrics-port",
        type=int,
        help="Serve Prometheus metrics on this port"
    )

    # Process-file command
    file_parser = subparsers.add_parser("process-file", help="Process an exported source table")
    file_parser.add_argument(
        "--input",
        required=True,
        help="Path to input file or directory"
    )
    file_parser.add_argument(
        "--format",
        default="json",
        choices=["json", "parquet", "csv"],
        help="Input file format (default: json)"
    )
    file_parser.add_argument(
        "-c", "--config",
        help="Path to configuration YAML (optional)"
    )
    file_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Process records without writing to database"
    )

    # Count command
    count_parser = subparsers.add_parser("count", help="Show source and destination counts")
    count_parser.add_argument(
        "-c", "--config",
        default=DEFAULT_CONFIG,
        help=f"Path to configuration YAML (default: {DEFAULT_CONFIG})"
    )

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for the migration CLI."""
    load_dotenv(find_dotenv(".env", usecwd=True))

    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "migrate":
        return migrate_command(args)
    elif args.command == "process-file":
        return process_file_command(args)
    elif args.command == "count":
        return count_command(args)
    else:
        parser.print_help()
        return 1


def run() -> None:
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()

"""
Generic reader for exported verification tables (JSON lines, Parquet, CSV).
"""

from pyspark.sql import DataFrame, SparkSession
from pyspark.sql.types import StringType, StructField, StructType

from .csv_reader import CSVReader

# Column layout of a tbl_verify_content export
VERIFY_CONTENT_SCHEMA = StructType([
    StructField("id", StringType(), True),
    StructField("taskId", StringType(), True),
    StructField("content", StringType(), True),
])


class FileReader:
    """
    Reads exported source tables into a DataFrame with id, taskId and
    content columns.
    """

    def __init__(self, spark: SparkSession):
        """
        Initialize file reader.

        Args:
            spark: Active Spark session
        """
        self.spark = spark
        self.csv_reader = CSVReader(spark)

    def read(
        self,
        file_path: str,
        file_format: str = "json",
        schema: StructType | None = VERIFY_CONTENT_SCHEMA,
        **options
    ) -> DataFrame:
        """
        Read file into Spark DataFrame.

        Args:
            file_path: Path to file or directory
            file_format: Format (json, parquet, csv)
            schema: Explicit schema for json/csv (Parquet carries its own)
            **options: Format-specific options

        Returns:
            Spark DataFrame

        Raises:
            ValueError: If file format is unsupported
        """
        fmt = file_format.lower()
        if fmt == "csv":
            return self.csv_reader.read(file_path, schema=schema, **options)
        elif fmt == "json":
            reader = self.spark.read
            if schema:
                reader = reader.schema(schema)
            return reader.options(**options).json(file_path)
        elif fmt == "parquet":
            return self.spark.read.options(**options).parquet(file_path)
        else:
            raise ValueError(f"Unsupported file format: {file_format}")

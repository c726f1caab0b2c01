"""
CSV reader for exported verification tables using Spark.
"""

from typing import Optional

from pyspark.sql import DataFrame, SparkSession
from pyspark.sql.types import StructType


class CSVReader:
    """
    Reads CSV exports whose JSON payload column spans several lines and
    contains doubled quotes.
    """

    def __init__(self, spark: SparkSession):
        """
        Initialize CSV reader.

        Args:
            spark: Active Spark session
        """
        self.spark = spark

    def read(
        self,
        file_path: str,
        schema: Optional[StructType] = None,
        header: bool = True,
        delimiter: str = ",",
    ) -> DataFrame:
        """
        Read CSV file into Spark DataFrame.

        Args:
            file_path: Path to CSV file
            schema: Optional explicit schema (all columns read as strings otherwise)
            header: Whether CSV has header row
            delimiter: Field delimiter

        Returns:
            Spark DataFrame
        """
        reader = self.spark.read
        if schema:
            reader = reader.schema(schema)

        df = reader \
            .option("header", str(header).lower()) \
            .option("delimiter", delimiter) \
            .option("multiLine", "true") \
            .option("quote", '"') \
            .option("escape", '"') \
            .option("mode", "PERMISSIVE") \
            .csv(file_path)

        return df

"""
Source readers: the paginated source table and exported files.
"""

from .csv_reader import CSVReader
from .file_reader import VERIFY_CONTENT_SCHEMA, FileReader
from .verify_content_reader import VerifyContentReader, to_raw_record

__all__ = [
    "CSVReader",
    "FileReader",
    "VERIFY_CONTENT_SCHEMA",
    "VerifyContentReader",
    "to_raw_record",
]

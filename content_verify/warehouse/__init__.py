"""
PostgreSQL access for source and destination tables.
"""

from .connection import DatabaseConnectionPool
from .schema_mgmt import PROCESSED_CONTENT_COLUMNS, ProcessedContentTable

__all__ = [
    "DatabaseConnectionPool",
    "ProcessedContentTable",
    "PROCESSED_CONTENT_COLUMNS",
]

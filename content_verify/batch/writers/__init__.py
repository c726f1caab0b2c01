"""
Destination writers.
"""

from .processed_content_writer import ProcessedContentWriter

__all__ = [
    "ProcessedContentWriter",
]

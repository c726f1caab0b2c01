"""
Reconstructs original and corrected text from content verification logs.
"""

from content_verify.core.models import ProcessedContent, RawRecord
from content_verify.core.processor import ContentProcessor

__version__ = "0.1.0"

__all__ = [
    "ContentProcessor",
    "ProcessedContent",
    "RawRecord",
]

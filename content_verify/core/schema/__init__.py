"""
Schema classification and payload field helpers.
"""

from .classifier import Classification, SchemaClassifier
from .fields import (
    ItemListDecodeError,
    decode_item_list,
    load_item_list,
    lookup_field,
    lookup_text,
    unwrap_payload,
)

__all__ = [
    "Classification",
    "SchemaClassifier",
    "ItemListDecodeError",
    "decode_item_list",
    "load_item_list",
    "lookup_field",
    "lookup_text",
    "unwrap_payload",
]

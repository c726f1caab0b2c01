"""
Payload field access helpers shared by the classifier, the processor and the
patch engines.
"""

import json
from typing import Any, Iterable


class ItemListDecodeError(Exception):
    """Raised when a correction list cannot be decoded into items."""

    def __init__(self, message: str, field_name: str | None = None):
        self.field_name = field_name
        self.message = message
        super().__init__(message)


def unwrap_payload(document: dict[str, Any]) -> dict[str, Any]:
    """Return ``document["data"]`` when it is an object, else the document itself."""
    data = document.get("data")
    if isinstance(data, dict):
        return data
    return document


def lookup_field(data: dict[str, Any], aliases: Iterable[str]) -> tuple[str | None, Any]:
    """
    Find the first alias with a non-null value, else the first alias present.

    A key sent as JSON ``null`` is present; its value is None.

    Returns:
        (key, value), or (None, None) when every alias is absent
    """
    present = None
    for alias in aliases:
        if alias not in data:
            continue
        value = data[alias]
        if value is not None:
            return alias, value
        if present is None:
            present = alias
    return present, None


def lookup_text(data: dict[str, Any], aliases: Iterable[str]) -> tuple[str | None, str | None]:
    """Like lookup_field, but only accepts string values."""
    for alias in aliases:
        value = data.get(alias)
        if isinstance(value, str):
            return alias, value
    return None, None


def load_item_list(value: Any, field_name: str | None = None) -> list[Any]:
    """
    Decode a correction list given as a JSON string or an already-decoded list.

    JSON ``null`` decodes to an empty list.

    Raises:
        ItemListDecodeError: If the value is not a list or a string encoding one
    """
    if value is None:
        return []
    if isinstance(value, list):
        return value
    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8", errors="replace")
    if not isinstance(value, str):
        raise ItemListDecodeError(
            f"expected a list or a JSON string, got {type(value).__name__}", field_name
        )

    try:
        decoded = json.loads(value)
    except json.JSONDecodeError as e:
        raise ItemListDecodeError(str(e), field_name) from e

    if decoded is None:
        return []
    if not isinstance(decoded, list):
        raise ItemListDecodeError(
            f"expected a JSON array, got {type(decoded).__name__}", field_name
        )
    return decoded


def decode_item_list(value: Any) -> list[Any] | None:
    """Lenient load_item_list: None when the value cannot be decoded."""
    try:
        return load_item_list(value)
    except ItemListDecodeError:
        return None

"""Conversion between inventory items and remote document fields."""

from datetime import datetime
from typing import Any

from pydantic import ValidationError

from .errors import DecodeError
from .models import InventoryItem, StorageLocation

# model attribute -> document field
FIELD_NAMES = {
    "name": "name",
    "brand": "brand",
    "category": "category",
    "quantity": "quantity",
    "unit": "unit",
    "expiration_date": "expirationDate",
    "storage_location": "storageLocation",
    "purchase_date": "purchaseDate",
    "notes": "notes",
    "usage_frequency": "usageFrequency",
    "image_url": "imageUrl",
    "price": "price",
    "barcode": "barcode",
    "added_to_shopping_list": "addedToShoppingList",
}

TIMESTAMP_FIELDS = ("expirationDate", "purchaseDate")


def encode_item(item: InventoryItem) -> dict[str, Any]:
    """Build the document fields for ``item``.

    The identifier is never part of the fields; it is the document key.
    Optional values that are unset are left out rather than written as null.
    """
    fields: dict[str, Any] = {}
    for attr, field_name in FIELD_NAMES.items():
        value = getattr(item, attr)
        if value is None:
            continue
        if isinstance(value, StorageLocation):
            value = value.value
        fields[field_name] = value
    return fields


def decode_item(document_id: str, fields: dict[str, Any]) -> InventoryItem:
    """Rebuild an item from its document.

    Raises:
        DecodeError: If required fields are missing or have the wrong type
    """
    if not isinstance(fields, dict):
        raise DecodeError(document_id, TypeError(f"expected a mapping, got {type(fields).__name__}"))

    data: dict[str, Any] = {"id": document_id}
    for attr, field_name in FIELD_NAMES.items():
        if field_name not in fields or fields[field_name] is None:
            continue
        value = fields[field_name]
        if field_name in TIMESTAMP_FIELDS and not isinstance(value, datetime):
            raise DecodeError(
                document_id, TypeError(f"{field_name} is not a timestamp: {value!r}")
            )
        data[attr] = value

    try:
        return InventoryItem(**data)
    except ValidationError as e:
        raise DecodeError(document_id, e) from e

"""Tests for document field encoding."""

from datetime import timedelta

import pytest

from pantry_sync.codec import decode_item, encode_item
from pantry_sync.errors import DecodeError, ErrorKind
from pantry_sync.models import StorageLocation
from tests.fakes import NOW, make_item


class TestEncode:
    """Tests for encode_item."""

    def test_optional_fields_omitted(self):
        fields = encode_item(make_item("Rice"))
        for absent in ("brand", "expirationDate", "notes", "imageUrl", "price", "barcode"):
            assert absent not in fields
        assert "id" not in fields

    def test_field_names_and_types(self):
        expiration = NOW + timedelta(days=5)
        item = make_item(
            "Milk",
            id="abc",
            brand="Horizon",
            expiration_date=expiration,
            storage_location=StorageLocation.REFRIGERATOR,
            usage_frequency=7,
            image_url="https://blobs.test/x.jpg",
            added_to_shopping_list=True,
        )
        fields = encode_item(item)

        assert fields["name"] == "Milk"
        assert fields["brand"] == "Horizon"
        assert fields["storageLocation"] == "refrigerator"
        assert fields["expirationDate"] == expiration
        assert fields["purchaseDate"] == item.purchase_date
        assert fields["usageFrequency"] == 7
        assert fields["imageUrl"] == "https://blobs.test/x.jpg"
        assert fields["addedToShoppingList"] is True
        assert "id" not in fields


class TestDecode:
    """Tests for decode_item."""

    def test_decode_document(self, sample_documents):
        item = decode_item("a", sample_documents["a"])
        assert item.id == "a"
        assert item.name == "Milk"
        assert item.storage_location == StorageLocation.REFRIGERATOR
        assert item.expiration_date == NOW + timedelta(days=2)

    def test_encoded_fields_decode_to_same_item(self):
        item = make_item("Milk", id="a", brand="Horizon", expiration_date=NOW, price=3.5)
        assert decode_item("a", encode_item(item)) == item

    def test_missing_name(self):
        with pytest.raises(DecodeError) as exc_info:
            decode_item("bad", {"quantity": 1.0, "purchaseDate": NOW})
        assert exc_info.value.document_id == "bad"
        assert exc_info.value.kind == ErrorKind.DECODE_FAILED

    def test_timestamp_as_string(self):
        with pytest.raises(DecodeError):
            decode_item("bad", {"name": "Milk", "expirationDate": "next tuesday"})

    def test_negative_quantity(self):
        with pytest.raises(DecodeError):
            decode_item("bad", {"name": "Milk", "quantity": -3})

    def test_unknown_location(self):
        with pytest.raises(DecodeError):
            decode_item("bad", {"name": "Milk", "storageLocation": "garage"})

    def test_not_a_mapping(self):
        with pytest.raises(DecodeError):
            decode_item("bad", ["Milk"])  # type: ignore[arg-type]

"""Shared test fixtures for Pantry Sync."""

from datetime import timedelta

import pytest

from pantry_sync.cache import ItemCache
from pantry_sync.coordinator import SyncCoordinator
from pantry_sync.local_store import LocalIdentityProvider
from pantry_sync.models import StorageLocation
from pantry_sync.session import SessionBinding

from tests.fakes import NOW, FakeBlobStore, FakeDocumentStore


@pytest.fixture
def now():
    """Fixed reference time for status checks."""
    return NOW


@pytest.fixture
def temp_data_dir(tmp_path):
    """Create a temporary data directory."""
    data_dir = tmp_path / "test_data"
    data_dir.mkdir()
    return data_dir


@pytest.fixture
def documents():
    return FakeDocumentStore()


@pytest.fixture
def blobs():
    return FakeBlobStore()


@pytest.fixture
def cache():
    return ItemCache()


@pytest.fixture
def coordinator(documents, blobs, cache):
    """Create a SyncCoordinator backed by in-memory fakes."""
    return SyncCoordinator(documents, blobs, cache)


@pytest.fixture
def identity():
    return LocalIdentityProvider()


@pytest.fixture
def session(identity, coordinator):
    return SessionBinding(identity, coordinator)


@pytest.fixture
def sample_documents():
    """Three documents as a remote store would hold them."""
    return {
        "a": {
            "name": "Milk",
            "category": "Dairy",
            "quantity": 1.0,
            "unit": "gallon",
            "storageLocation": StorageLocation.REFRIGERATOR.value,
            "purchaseDate": NOW - timedelta(days=3),
            "expirationDate": NOW + timedelta(days=2),
            "usageFrequency": 0,
        },
        "b": {
            "name": "Eggs",
            "category": "Dairy",
            "quantity": 0.0,
            "unit": "dozen",
            "storageLocation": StorageLocation.REFRIGERATOR.value,
            "purchaseDate": NOW - timedelta(days=5),
            "expirationDate": NOW + timedelta(days=10),
        },
        "c": {
            "name": "Bread",
            "category": "Bakery",
            "quantity": 5.0,
            "unit": "loaf",
            "storageLocation": StorageLocation.PANTRY.value,
            "purchaseDate": NOW - timedelta(days=1),
        },
    }

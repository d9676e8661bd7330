"""Pantry Sync - Grocery inventory with remote sync and derived stock status."""

from .cache import ItemCache
from .codec import decode_item, encode_item
from .config import ConfigManager
from .coordinator import SyncCoordinator
from .errors import (
    DecodeError,
    ErrorKind,
    ImageDeleteError,
    ImageUploadError,
    ItemNotFoundError,
    MissingIdentifierError,
    NotAuthenticatedError,
    RemoteReadError,
    RemoteWriteError,
    SyncError,
)
from .inventory_manager import InventoryManager
from .local_store import JSONDocumentStore, LocalBlobStore, LocalIdentityProvider
from .models import (
    IdentityChange,
    InventoryFilter,
    InventoryItem,
    SortOrder,
    StockStatus,
    StorageLocation,
    SubscriptionStatus,
    UserProfile,
)
from .query import view
from .results import SyncResult
from .session import SessionBinding
from .status import (
    days_until_expiration,
    expired_items,
    expiring_items,
    is_expired,
    is_expiring_soon,
    running_low_items,
    stock_status,
)
from .stores import BlobStore, DocumentStore, IdentityProvider

__version__ = "0.1.0"

__all__ = [
    "BlobStore",
    "ConfigManager",
    "days_until_expiration",
    "decode_item",
    "DecodeError",
    "DocumentStore",
    "encode_item",
    "ErrorKind",
    "expired_items",
    "expiring_items",
    "IdentityChange",
    "IdentityProvider",
    "ImageDeleteError",
    "ImageUploadError",
    "InventoryFilter",
    "InventoryItem",
    "InventoryManager",
    "is_expired",
    "is_expiring_soon",
    "ItemCache",
    "ItemNotFoundError",
    "JSONDocumentStore",
    "LocalBlobStore",
    "LocalIdentityProvider",
    "MissingIdentifierError",
    "NotAuthenticatedError",
    "RemoteReadError",
    "RemoteWriteError",
    "running_low_items",
    "SessionBinding",
    "SortOrder",
    "stock_status",
    "StockStatus",
    "StorageLocation",
    "SubscriptionStatus",
    "SyncCoordinator",
    "SyncError",
    "SyncResult",
    "UserProfile",
    "view",
]

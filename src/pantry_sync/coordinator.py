"""Remote synchronization of inventory items.

The coordinator runs each mutation as a short sequence of awaited steps against
the document and blob stores, and touches the cache only once the remote side
has accepted the change:

- add/update: upload image (if any) -> write document -> update cache
- delete: delete document -> delete image (if any) -> remove from cache

The cache step only runs while the cache is still bound to the operation's
user. A write that finishes after a sign-out or a switch to another user still
returns its remote result but leaves the cache alone.

Failures from the stores are returned as ``SyncResult`` values carrying a typed
``SyncError``; nothing is retried here. Two writes to the same item must not be
issued concurrently; callers serialize per-item operations.
"""

import logging

from .cache import ItemCache
from .codec import decode_item, encode_item
from .errors import (
    ImageDeleteError,
    ImageUploadError,
    MissingIdentifierError,
    NotAuthenticatedError,
    RemoteReadError,
    RemoteWriteError,
    SyncError,
)
from .models import InventoryItem
from .results import SyncResult
from .stores import BlobStore, DocumentStore

logger = logging.getLogger(__name__)

DEFAULT_IMAGE_FOLDER = "inventory"
DEFAULT_IMAGE_CONTENT_TYPE = "image/jpeg"


class SyncCoordinator:
    """Sequences document and image operations and reconciles the cache."""

    def __init__(
        self,
        documents: DocumentStore,
        blobs: BlobStore,
        cache: ItemCache | None = None,
        image_folder: str = DEFAULT_IMAGE_FOLDER,
        image_content_type: str = DEFAULT_IMAGE_CONTENT_TYPE,
    ):
        """Initialize the coordinator.

        Args:
            documents: Document store holding one collection per user
            blobs: Blob store for item images
            cache: Cache to reconcile into. Creates a new one if not provided.
            image_folder: Prefix used for uploaded image names
            image_content_type: Content type sent with uploads
        """
        self.documents = documents
        self.blobs = blobs
        self.cache = cache if cache is not None else ItemCache()
        self.image_folder = image_folder
        self.image_content_type = image_content_type

    # --- Loading ---

    async def fetch(self, user_id: str | None) -> SyncResult[list[InventoryItem]]:
        """Read and decode the user's whole collection without touching the cache."""
        if not user_id:
            return SyncResult.failure(NotAuthenticatedError())

        try:
            documents = await self.documents.get_all(user_id)
        except Exception as e:
            logger.error("Failed to get inventory items for %s: %s", user_id, e)
            return SyncResult.failure(RemoteReadError("Failed to load inventory", e))

        try:
            items = [decode_item(doc_id, fields) for doc_id, fields in documents]
        except SyncError as e:
            logger.error("Failed to decode inventory items for %s: %s", user_id, e)
            return SyncResult.failure(e)

        logger.info("Retrieved %d inventory items for %s", len(items), user_id)
        return SyncResult.success(items)

    async def load(self, user_id: str | None) -> SyncResult[list[InventoryItem]]:
        """Replace the cache with the user's remote collection.

        The cache is bound to ``user_id`` before the remote read starts, which
        empties it if it belonged to another user. On failure it is otherwise
        left as it was.
        """
        if user_id:
            self.cache.bind(user_id)

        result = await self.fetch(user_id)
        if result.ok:
            self.cache.replace_all(result.value or [], user_id=user_id)
        return result

    # --- Mutations ---

    async def _upload_image(self, user_id: str, image: bytes) -> str:
        try:
            url = await self.blobs.upload(
                user_id, image, self.image_content_type, folder=self.image_folder
            )
        except Exception as e:
            logger.error("Failed to upload image: %s", e)
            raise ImageUploadError("Failed to upload image", e) from e
        logger.info("Uploaded image %s", url)
        return url

    def _owns_cache(self, user_id: str, action: str, item: InventoryItem) -> bool:
        if self.cache.belongs_to(user_id):
            return True
        logger.info(
            "Not applying %s of '%s' to the cache: it now belongs to %s, not %s",
            action,
            item.name,
            self.cache.user_id,
            user_id,
        )
        return False

    def _orphaned(self, url: str | None, item: InventoryItem) -> str | None:
        if url is not None:
            logger.warning("Image %s left without a document after write of '%s' failed", url, item.name)
        return url

    async def add(
        self,
        user_id: str | None,
        item: InventoryItem,
        image: bytes | None = None,
    ) -> SyncResult[InventoryItem]:
        """Create a new item remotely, then cache it with its assigned id.

        Args:
            user_id: Owner of the collection
            item: Item to create; any id it carries is ignored
            image: Optional image bytes uploaded before the document is written

        Returns:
            Result holding the stored item. If the image upload succeeds but the
            document write fails, ``orphaned_image_url`` names the uploaded image.
        """
        if not user_id:
            return SyncResult.failure(NotAuthenticatedError())

        uploaded_url = None
        new_item = item.model_copy(update={"id": None})
        if image is not None:
            try:
                uploaded_url = await self._upload_image(user_id, image)
            except ImageUploadError as e:
                return SyncResult.failure(e)
            new_item = new_item.model_copy(update={"image_url": uploaded_url})

        try:
            document_id = await self.documents.insert(user_id, encode_item(new_item))
        except Exception as e:
            logger.error("Failed to add inventory item '%s': %s", item.name, e)
            return SyncResult.failure(
                RemoteWriteError(f"Failed to add '{item.name}'", e),
                orphaned_image_url=self._orphaned(uploaded_url, item),
            )

        stored = new_item.model_copy(update={"id": document_id})
        if self._owns_cache(user_id, "add", stored):
            self.cache.upsert(stored)
        logger.info("Inventory item added with ID: %s", document_id)
        return SyncResult.success(stored)

    async def update(
        self,
        user_id: str | None,
        item: InventoryItem,
        image: bytes | None = None,
    ) -> SyncResult[InventoryItem]:
        """Write changes to an existing item.

        Without a new image the item's current ``image_url`` is kept. The
        replaced image, if any, is not deleted.
        """
        if not user_id:
            return SyncResult.failure(NotAuthenticatedError())
        if item.id is None:
            return SyncResult.failure(MissingIdentifierError(item.name))

        uploaded_url = None
        updated = item
        if image is not None:
            try:
                uploaded_url = await self._upload_image(user_id, image)
            except ImageUploadError as e:
                return SyncResult.failure(e)
            updated = item.model_copy(update={"image_url": uploaded_url})

        try:
            await self.documents.update(user_id, item.id, encode_item(updated))
        except Exception as e:
            logger.error("Failed to update inventory item %s: %s", item.id, e)
            return SyncResult.failure(
                RemoteWriteError(f"Failed to update '{item.name}'", e),
                orphaned_image_url=self._orphaned(uploaded_url, item),
            )

        if self._owns_cache(user_id, "update", updated):
            self.cache.upsert(updated)
        logger.info("Inventory item updated: %s", item.id)
        return SyncResult.success(updated)

    async def delete(self, user_id: str | None, item: InventoryItem) -> SyncResult[InventoryItem]:
        """Delete an item's document, then its image, then the cache entry.

        If the document delete fails nothing local changes. Once the document
        is gone the item leaves the cache even when the image delete fails;
        that failure is reported in ``warnings``.
        """
        if not user_id:
            return SyncResult.failure(NotAuthenticatedError())
        if item.id is None:
            return SyncResult.failure(MissingIdentifierError(item.name))

        try:
            await self.documents.delete(user_id, item.id)
        except Exception as e:
            logger.error("Failed to delete inventory item %s: %s", item.id, e)
            return SyncResult.failure(RemoteWriteError(f"Failed to delete '{item.name}'", e))

        warnings: list[SyncError] = []
        if item.image_url:
            try:
                await self.blobs.delete(item.image_url)
            except Exception as e:
                logger.warning("Failed to delete image %s for %s: %s", item.image_url, item.id, e)
                warnings.append(ImageDeleteError(item.image_url, e))

        if self._owns_cache(user_id, "delete", item):
            self.cache.remove(item.id)
        logger.info("Inventory item deleted: %s", item.id)
        return SyncResult.success(item, warnings=warnings)

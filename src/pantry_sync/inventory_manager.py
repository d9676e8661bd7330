"""Inventory management for Pantry Sync."""

from datetime import datetime

from .coordinator import SyncCoordinator
from .errors import ItemNotFoundError, NotAuthenticatedError
from .models import InventoryFilter, InventoryItem, SortOrder, StockStatus, StorageLocation
from .query import view
from .results import SyncResult
from .session import SessionBinding
from .status import (
    DEFAULT_EXPIRING_THRESHOLD_DAYS,
    expired_items,
    expiring_items,
    running_low_items,
    stock_status,
)


class InventoryManager:
    """Presentation-facing inventory operations for the signed-in user."""

    def __init__(
        self,
        coordinator: SyncCoordinator,
        session: SessionBinding,
        threshold_days: int = DEFAULT_EXPIRING_THRESHOLD_DAYS,
    ):
        self.coordinator = coordinator
        self.session = session
        self.cache = coordinator.cache
        self.threshold_days = threshold_days

    def _user_id(self) -> str:
        if self.session.user_id is None:
            raise NotAuthenticatedError()
        return self.session.user_id

    def get_item(self, item_id: str) -> InventoryItem:
        """Look up a cached item.

        Raises:
            ItemNotFoundError: If the id is not in the cache
        """
        item = self.cache.by_id(item_id)
        if item is None:
            raise ItemNotFoundError(item_id)
        return item

    def resolve_id(self, id_or_prefix: str) -> str:
        """Accept a full item id or a unique prefix of one.

        Raises:
            ItemNotFoundError: If nothing matches
            ValueError: If the prefix matches more than one item
        """
        if id_or_prefix in self.cache:
            return id_or_prefix
        matches = [i.id for i in self.cache.all() if i.id and i.id.startswith(id_or_prefix)]
        if len(matches) > 1:
            raise ValueError(f"Ambiguous item id prefix: {id_or_prefix}")
        if not matches:
            raise ItemNotFoundError(id_or_prefix)
        return matches[0]  # type: ignore[return-value]

    async def add_item(
        self,
        name: str,
        quantity: float = 1.0,
        unit: str = "item",
        category: str = "Uncategorized",
        location: StorageLocation = StorageLocation.PANTRY,
        expiration_date: datetime | None = None,
        brand: str | None = None,
        purchase_date: datetime | None = None,
        notes: str | None = None,
        usage_frequency: int = 0,
        price: float | None = None,
        barcode: str | None = None,
        image: bytes | None = None,
        use_default_expiration: bool = False,
    ) -> InventoryItem:
        """Add an item to inventory.

        Args:
            name: Name of the item
            quantity: Quantity in stock
            unit: Unit label
            category: Product category
            location: Storage location
            expiration_date: Optional expiration
            brand: Optional brand
            purchase_date: When it was bought. Defaults to now.
            notes: Free-form notes
            usage_frequency: Uses per week
            price: Optional price paid
            barcode: Optional barcode
            image: Optional image bytes to upload with the item
            use_default_expiration: Fill a missing expiration from the location's
                recommended shelf life

        Returns:
            The stored item, carrying its remote id

        Raises:
            SyncError: If the user is signed out or a remote step fails. When the
                image was uploaded but the write failed, the error's
                ``orphaned_image_url`` names the uploaded image.
        """
        purchased = purchase_date or datetime.now()
        if expiration_date is None and use_default_expiration:
            expiration_date = location.default_expiration(purchased)

        item = InventoryItem(
            name=name,
            brand=brand,
            category=category,
            quantity=quantity,
            unit=unit,
            expiration_date=expiration_date,
            storage_location=location,
            purchase_date=purchased,
            notes=notes,
            usage_frequency=usage_frequency,
            price=price,
            barcode=barcode,
        )
        result = await self.coordinator.add(self._user_id(), item, image=image)
        return result.unwrap()

    async def update_item(
        self,
        item_id: str,
        image: bytes | None = None,
        **changes,
    ) -> InventoryItem:
        """Update editable fields of an item.

        Args:
            item_id: Id of the item
            image: Optional replacement image
            **changes: Field values to set; passing None clears an optional field

        Returns:
            Updated item
        """
        current = self.get_item(item_id)
        unknown = (set(changes) - set(InventoryItem.model_fields)) | ({"id"} & set(changes))
        if unknown:
            raise ValueError(f"Cannot update fields: {', '.join(sorted(unknown))}")

        updated = InventoryItem(**{**current.model_dump(), **changes})
        result = await self.coordinator.update(self._user_id(), updated, image=image)
        return result.unwrap()

    async def update_quantity(
        self,
        item_id: str,
        quantity: float | None = None,
        delta: float | None = None,
    ) -> InventoryItem:
        """Update item quantity.

        Args:
            item_id: Id of the item
            quantity: Set absolute quantity
            delta: Add/subtract from current quantity

        Returns:
            Updated item

        Raises:
            ValueError: If neither quantity nor delta is given
        """
        if quantity is None and delta is None:
            raise ValueError("Must provide quantity or delta")

        current = self.get_item(item_id)
        if quantity is None:
            quantity = max(0.0, current.quantity + delta)  # type: ignore[operator]
        return await self.update_item(item_id, quantity=quantity)

    async def set_on_shopping_list(self, item_id: str, on_list: bool = True) -> InventoryItem:
        return await self.update_item(item_id, added_to_shopping_list=on_list)

    async def remove_item(self, item_id: str) -> SyncResult[InventoryItem]:
        """Remove an item, its document and its image.

        Returns:
            Result holding the removed item. A failed image delete does not
            stop the removal and is listed in ``warnings``.

        Raises:
            SyncError: If the user is signed out or the document delete fails
        """
        item = self.get_item(item_id)
        result = await self.coordinator.delete(self._user_id(), item)
        result.unwrap()
        return result

    def get_inventory(
        self,
        location: StorageLocation | None = None,
        search_text: str = "",
        sort_order: SortOrder = SortOrder.EXPIRATION_ASC,
        quick_filter: InventoryFilter = InventoryFilter.ALL,
    ) -> list[InventoryItem]:
        """Get the filtered, sorted view of the cached inventory."""
        return view(
            self.cache.snapshot(),
            location=location,
            search_text=search_text,
            sort_order=sort_order,
            quick_filter=quick_filter,
            threshold_days=self.threshold_days,
        )

    def get_expiring_soon(self, days: int | None = None) -> list[InventoryItem]:
        """Unexpired items expiring within ``days`` (the configured window by default)."""
        threshold = self.threshold_days if days is None else days
        return expiring_items(self.cache.snapshot(), threshold_days=threshold)

    def get_expired(self) -> list[InventoryItem]:
        return expired_items(self.cache.snapshot())

    def get_running_low(self) -> list[InventoryItem]:
        return running_low_items(self.cache.snapshot(), threshold_days=self.threshold_days)

    def status_of(self, item_id: str) -> StockStatus:
        return stock_status(self.get_item(item_id), threshold_days=self.threshold_days)

"""In-memory item collection for the active user."""

import logging

from .errors import MissingIdentifierError
from .models import InventoryItem

logger = logging.getLogger(__name__)


class ItemCache:
    """Ordered collection of one user's items, keyed by remote identifier.

    The cache is the single source of truth for read views. It is owned by one
    event loop: the coordinator and session binding mutate it only from
    coroutines running on that loop, never from worker threads.
    """

    def __init__(self) -> None:
        self._items: dict[str, InventoryItem] = {}
        self.user_id: str | None = None

    def bind(self, user_id: str) -> None:
        """Make ``user_id`` the owner, dropping items that belonged to anyone else."""
        if self.user_id != user_id:
            self._items = {}
            self.user_id = user_id

    def belongs_to(self, user_id: str) -> bool:
        return self.user_id is not None and self.user_id == user_id

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._items

    def all(self) -> list[InventoryItem]:
        """Items in insertion order."""
        return list(self._items.values())

    def snapshot(self) -> tuple[InventoryItem, ...]:
        return tuple(self._items.values())

    def by_id(self, item_id: str) -> InventoryItem | None:
        return self._items.get(item_id)

    def upsert(self, item: InventoryItem) -> None:
        """Insert a new item or replace the one with the same id in place."""
        if item.id is None:
            raise MissingIdentifierError(item.name)
        self._items[item.id] = item

    def remove(self, item_id: str) -> InventoryItem | None:
        return self._items.pop(item_id, None)

    def replace_all(self, items: list[InventoryItem], user_id: str | None = None) -> None:
        """Swap in a freshly loaded collection, dropping everything else."""
        replacement: dict[str, InventoryItem] = {}
        for item in items:
            if item.id is None:
                raise MissingIdentifierError(item.name)
            replacement[item.id] = item
        self._items = replacement
        if user_id is not None:
            self.user_id = user_id
        logger.debug("Cache now holds %d items for %s", len(self._items), self.user_id)

    def clear(self) -> None:
        self._items = {}
        self.user_id = None

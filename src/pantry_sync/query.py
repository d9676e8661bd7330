"""Filtered and sorted views over the item cache.

Location filter, free-text search and the quick filter combine with AND; the
sort runs last and is stable. Items without an expiration are treated as
expiring at the end of time, so they come last in ascending order and first
in descending order.
"""

from collections.abc import Iterable
from datetime import datetime

from .models import InventoryFilter, InventoryItem, SortOrder, StockStatus, StorageLocation
from .status import DEFAULT_EXPIRING_THRESHOLD_DAYS, is_expired, is_expiring_soon, stock_status


def matches_search(item: InventoryItem, search_text: str) -> bool:
    """Case-insensitive substring match on name, brand or category."""
    if not search_text:
        return True
    needle = search_text.lower()
    return (
        needle in item.name.lower()
        or (item.brand is not None and needle in item.brand.lower())
        or needle in item.category.lower()
    )


def _expiration_key(item: InventoryItem) -> tuple[int, datetime]:
    if item.expiration_date is None:
        return (1, datetime.min)
    return (0, item.expiration_date.replace(tzinfo=None))


def sort_items(items: Iterable[InventoryItem], sort_order: SortOrder) -> list[InventoryItem]:
    """Stable sort of ``items`` in the given order."""
    if sort_order == SortOrder.NAME_ASC:
        return sorted(items, key=lambda i: i.name.lower())
    if sort_order == SortOrder.NAME_DESC:
        return sorted(items, key=lambda i: i.name.lower(), reverse=True)
    if sort_order == SortOrder.EXPIRATION_ASC:
        return sorted(items, key=_expiration_key)
    if sort_order == SortOrder.EXPIRATION_DESC:
        return sorted(items, key=_expiration_key, reverse=True)
    if sort_order == SortOrder.RECENTLY_ADDED:
        return sorted(items, key=lambda i: i.purchase_date.replace(tzinfo=None), reverse=True)
    raise ValueError(f"Unknown sort order: {sort_order}")


def _matches_quick_filter(
    item: InventoryItem,
    quick_filter: InventoryFilter,
    now: datetime,
    threshold_days: int,
) -> bool:
    if quick_filter == InventoryFilter.EXPIRING_SOON:
        return is_expiring_soon(item, now, threshold_days) and not is_expired(item, now)
    if quick_filter == InventoryFilter.LOW_STOCK:
        return stock_status(item, now, threshold_days) in (
            StockStatus.RUNNING_LOW,
            StockStatus.OUT_OF_STOCK,
        )
    return True


def view(
    items: Iterable[InventoryItem],
    location: StorageLocation | None = None,
    search_text: str = "",
    sort_order: SortOrder = SortOrder.EXPIRATION_ASC,
    quick_filter: InventoryFilter = InventoryFilter.ALL,
    now: datetime | None = None,
    threshold_days: int = DEFAULT_EXPIRING_THRESHOLD_DAYS,
) -> list[InventoryItem]:
    """Build the ordered view the presentation layer displays.

    Args:
        items: Snapshot of the cache
        location: Only keep items stored here; all locations when None
        search_text: Substring to look for in name, brand or category
        sort_order: Ordering applied after filtering
        quick_filter: Optional expiring-soon / low-stock restriction
        now: Reference time for status-based filters
        threshold_days: Expiring-soon window for status-based filters

    Returns:
        New list; the input is never modified
    """
    now = now or datetime.now()
    filtered = [
        item
        for item in items
        if (location is None or item.storage_location == location)
        and matches_search(item, search_text)
        and _matches_quick_filter(item, quick_filter, now, threshold_days)
    ]
    return sort_items(filtered, sort_order)

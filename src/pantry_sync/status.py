"""Derived expiration and stock status for inventory items.

Everything here is a pure function of an item and the current time, so status
is recomputed on every read instead of being stored on the item. Expiration is
compared at calendar-day granularity: an item expiring today is not expired.
"""

from collections.abc import Iterable
from datetime import date, datetime

from .models import InventoryItem, StockStatus

DEFAULT_EXPIRING_THRESHOLD_DAYS = 3


def _calendar_day(value: datetime | date) -> date:
    if isinstance(value, datetime):
        return value.replace(tzinfo=None).date()
    return value


def days_between(start: datetime | date, end: datetime | date) -> int:
    """Whole calendar days from ``start`` to ``end`` (negative if ``end`` is earlier)."""
    return (_calendar_day(end) - _calendar_day(start)).days


def days_until_expiration(item: InventoryItem, now: datetime | None = None) -> int | None:
    """Days left before the item expires, None when it has no expiration."""
    if item.expiration_date is None:
        return None
    return days_between(now or datetime.now(), item.expiration_date)


def is_expired(item: InventoryItem, now: datetime | None = None) -> bool:
    """Check if the expiration day has passed."""
    days = days_until_expiration(item, now)
    return days is not None and days < 0


def is_expiring_soon(
    item: InventoryItem,
    now: datetime | None = None,
    threshold_days: int = DEFAULT_EXPIRING_THRESHOLD_DAYS,
) -> bool:
    """Check if the item expires today or within ``threshold_days``."""
    days = days_until_expiration(item, now)
    return days is not None and 0 <= days <= threshold_days


def _expiration_instant(item: InventoryItem) -> datetime:
    return item.expiration_date.replace(tzinfo=None)  # type: ignore[union-attr]


def is_running_low(item: InventoryItem) -> bool:
    """Quantity is below one week of usage at the recorded frequency."""
    return item.usage_frequency > 0 and item.quantity < item.usage_frequency / 7.0


def stock_status(
    item: InventoryItem,
    now: datetime | None = None,
    threshold_days: int = DEFAULT_EXPIRING_THRESHOLD_DAYS,
) -> StockStatus:
    """Classify an item.

    Checks run in a fixed order and the first match wins, so an expired item
    with nothing left reports out-of-stock.
    """
    now = now or datetime.now()
    if item.quantity <= 0:
        return StockStatus.OUT_OF_STOCK
    if is_expired(item, now):
        return StockStatus.EXPIRED
    if is_expiring_soon(item, now, threshold_days):
        return StockStatus.EXPIRING_SOON
    if is_running_low(item):
        return StockStatus.RUNNING_LOW
    return StockStatus.IN_STOCK


def expiring_items(
    items: Iterable[InventoryItem],
    now: datetime | None = None,
    threshold_days: int = DEFAULT_EXPIRING_THRESHOLD_DAYS,
) -> list[InventoryItem]:
    """Unexpired items inside the expiring window, soonest first."""
    now = now or datetime.now()
    expiring = [
        i for i in items if is_expiring_soon(i, now, threshold_days) and not is_expired(i, now)
    ]
    return sorted(expiring, key=_expiration_instant)


def expired_items(items: Iterable[InventoryItem], now: datetime | None = None) -> list[InventoryItem]:
    """Expired items, longest-expired first."""
    now = now or datetime.now()
    expired = [i for i in items if is_expired(i, now)]
    return sorted(expired, key=_expiration_instant)


def running_low_items(
    items: Iterable[InventoryItem],
    now: datetime | None = None,
    threshold_days: int = DEFAULT_EXPIRING_THRESHOLD_DAYS,
) -> list[InventoryItem]:
    """Items whose status is running-low."""
    now = now or datetime.now()
    return [i for i in items if stock_status(i, now, threshold_days) == StockStatus.RUNNING_LOW]

"""Core data models for Pantry Sync."""

from datetime import datetime, timedelta
from enum import Enum

from pydantic import BaseModel, Field

TRIAL_LENGTH_DAYS = 30


class StorageLocation(str, Enum):
    """Storage locations for inventory items."""

    PANTRY = "pantry"
    REFRIGERATOR = "refrigerator"
    FREEZER = "freezer"
    CUSTOM = "custom"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()

    @property
    def recommended_expiration_days(self) -> int:
        """Default shelf life for items kept in this location."""
        return _RECOMMENDED_EXPIRATION_DAYS[self]

    def default_expiration(self, purchased: datetime) -> datetime:
        """Expiration suggested for an item purchased at ``purchased``."""
        return purchased + timedelta(days=self.recommended_expiration_days)


_RECOMMENDED_EXPIRATION_DAYS = {
    StorageLocation.PANTRY: 365,
    StorageLocation.REFRIGERATOR: 7,
    StorageLocation.FREEZER: 90,
    StorageLocation.CUSTOM: 30,
}


class StockStatus(str, Enum):
    """Derived availability of an inventory item."""

    OUT_OF_STOCK = "out_of_stock"
    EXPIRED = "expired"
    EXPIRING_SOON = "expiring_soon"
    RUNNING_LOW = "running_low"
    IN_STOCK = "in_stock"

    @property
    def label(self) -> str:
        return _STATUS_LABELS[self]

    @property
    def color(self) -> str:
        return _STATUS_COLORS[self]


_STATUS_LABELS = {
    StockStatus.IN_STOCK: "In Stock",
    StockStatus.RUNNING_LOW: "Running Low",
    StockStatus.EXPIRING_SOON: "Expiring Soon",
    StockStatus.EXPIRED: "Expired",
    StockStatus.OUT_OF_STOCK: "Out of Stock",
}

_STATUS_COLORS = {
    StockStatus.IN_STOCK: "green",
    StockStatus.RUNNING_LOW: "yellow",
    StockStatus.EXPIRING_SOON: "orange",
    StockStatus.EXPIRED: "red",
    StockStatus.OUT_OF_STOCK: "red",
}


class SortOrder(str, Enum):
    """Orderings available for inventory views."""

    NAME_ASC = "name_asc"
    NAME_DESC = "name_desc"
    EXPIRATION_ASC = "expiration_asc"
    EXPIRATION_DESC = "expiration_desc"
    RECENTLY_ADDED = "recently_added"


class InventoryFilter(str, Enum):
    """Quick filters layered on top of location and search filtering."""

    ALL = "all"
    EXPIRING_SOON = "expiring_soon"
    LOW_STOCK = "low_stock"


class InventoryItem(BaseModel):
    """A tracked household good.

    ``id`` is assigned by the remote document store on the first successful
    write and is ``None`` before that.
    """

    id: str | None = None
    name: str
    brand: str | None = None
    category: str = "Uncategorized"
    quantity: float = Field(default=1.0, ge=0)
    unit: str = "item"
    expiration_date: datetime | None = None
    storage_location: StorageLocation = StorageLocation.PANTRY
    purchase_date: datetime = Field(default_factory=datetime.now)
    notes: str | None = None
    usage_frequency: int = Field(default=0, ge=0)  # uses per week
    image_url: str | None = None
    price: float | None = None
    barcode: str | None = None
    added_to_shopping_list: bool = False


class SubscriptionStatus(str, Enum):
    """Subscription states tracked on a user profile."""

    TRIAL = "trial"
    MONTHLY = "monthly"
    YEARLY = "yearly"
    EXPIRED = "expired"


class UserProfile(BaseModel):
    """Profile data for an authenticated user."""

    id: str
    name: str = ""
    email: str = ""
    household_size: int = 1
    dietary_restrictions: list[str] = Field(default_factory=list)
    subscription_status: SubscriptionStatus = SubscriptionStatus.TRIAL
    trial_start_date: datetime | None = None
    custom_storage_location: str = "Custom"
    expiration_alert_days: int = Field(default=3, ge=0)

    def _trial_end(self) -> datetime | None:
        if self.subscription_status != SubscriptionStatus.TRIAL or self.trial_start_date is None:
            return None
        return self.trial_start_date + timedelta(days=TRIAL_LENGTH_DAYS)

    @property
    def is_trial_active(self) -> bool:
        """Whether the trial period is still running."""
        end = self._trial_end()
        return end is not None and datetime.now() < end

    @property
    def trial_days_remaining(self) -> int | None:
        """Days left in the trial, None when not on a trial."""
        end = self._trial_end()
        if end is None:
            return None
        return max(0, (end - datetime.now()).days)

    @property
    def has_active_subscription(self) -> bool:
        return self.is_trial_active or self.subscription_status in (
            SubscriptionStatus.MONTHLY,
            SubscriptionStatus.YEARLY,
        )


class IdentityChange(BaseModel):
    """A (previous, next) user-id pair emitted by the identity provider."""

    previous: str | None = None
    next: str | None = None

    @property
    def signed_in(self) -> bool:
        return self.next is not None

"""CLI entry point for Pantry Sync."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from datetime import datetime
from pathlib import Path
from typing import Annotated, Any

import typer
from rich.console import Console
from rich.logging import RichHandler

from .config import ConfigManager
from .coordinator import SyncCoordinator
from .errors import NotAuthenticatedError, SyncError
from .inventory_manager import InventoryManager
from .local_store import JSONDocumentStore, LocalBlobStore, LocalIdentityProvider
from .models import InventoryFilter, SortOrder, StorageLocation
from .output_formatter import OutputFormatter, item_payload
from .session import SessionBinding

app = typer.Typer(
    name="pantry",
    help="Track pantry, fridge and freezer inventory",
    no_args_is_help=True,
)

# Global state set by the callback
formatter: OutputFormatter = OutputFormatter()
config: ConfigManager | None = None
data_dir_override: Path | None = None
user_override: str | None = None


def get_config() -> ConfigManager:
    """Get or create ConfigManager instance."""
    global config
    if config is None:
        config = ConfigManager()
    return config


def configure_logging(level: str) -> None:
    """Send library logs to stderr through Rich."""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@app.callback()
def main(
    json_output: Annotated[
        bool, typer.Option("--json", help="Output as JSON for programmatic use")
    ] = False,
    data_dir: Annotated[Path | None, typer.Option("--data-dir", help="Data directory path")] = None,
    user: Annotated[str | None, typer.Option("--user", help="User to sign in as")] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logs")] = False,
) -> None:
    """Pantry Sync CLI - keep your kitchen inventory in sync."""
    global formatter, config, data_dir_override, user_override

    formatter = OutputFormatter(json_mode=json_output)
    config = ConfigManager()
    data_dir_override = data_dir
    user_override = user
    configure_logging("DEBUG" if verbose else config.logging.level)


async def open_session() -> InventoryManager:
    """Sign in the configured user and wait for their inventory to load."""
    cfg = get_config()
    user_id = user_override or cfg.defaults.user
    if not user_id:
        raise NotAuthenticatedError("No user given; pass --user or set defaults.user")

    storage_dir = data_dir_override or cfg.data.storage_dir
    coordinator = SyncCoordinator(
        JSONDocumentStore(storage_dir),
        LocalBlobStore(storage_dir),
        image_folder=cfg.sync.image_folder,
        image_content_type=cfg.sync.image_content_type,
    )
    identity = LocalIdentityProvider()
    session = SessionBinding(identity, coordinator)
    session.start()
    identity.sign_in(user_id)
    await session.wait_idle()

    if session.last_result is not None and session.last_result.error is not None:
        raise session.last_result.error
    return InventoryManager(coordinator, session, threshold_days=cfg.sync.expiring_threshold_days)


def run(operation: Callable[[], Awaitable[dict[str, Any]]]) -> None:
    """Run an async command body and print its result or error."""
    try:
        output_data = asyncio.run(operation())
    except SyncError as e:
        formatter.error(str(e), error_code=e.kind.value)
        raise typer.Exit(code=1)
    except ValueError as e:
        formatter.error(str(e))
        raise typer.Exit(code=1)
    formatter.output(output_data, output_data.get("message", ""))


def _parse_date(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


@app.command()
def add(
    item: Annotated[str, typer.Argument(help="Item name")],
    quantity: Annotated[float, typer.Option("--quantity", "-q", help="Quantity")] = 1.0,
    unit: Annotated[str | None, typer.Option("--unit", "-u", help="Unit label")] = None,
    category: Annotated[str | None, typer.Option("--category", "-c", help="Category")] = None,
    brand: Annotated[str | None, typer.Option("--brand", "-b", help="Brand")] = None,
    location: Annotated[
        StorageLocation | None, typer.Option("--location", "-l", help="Storage location")
    ] = None,
    expiration: Annotated[
        str | None, typer.Option("--expires", help="Expiration date (YYYY-MM-DD)")
    ] = None,
    default_expiration: Annotated[
        bool,
        typer.Option("--default-expiration", help="Use the location's recommended shelf life"),
    ] = False,
    usage: Annotated[int, typer.Option("--usage", help="Uses per week")] = 0,
    price: Annotated[float | None, typer.Option("--price", "-p", help="Price paid")] = None,
    barcode: Annotated[str | None, typer.Option("--barcode", help="Barcode")] = None,
    notes: Annotated[str | None, typer.Option("--notes", "-n", help="Notes")] = None,
    image: Annotated[
        Path | None, typer.Option("--image", help="Image file", exists=True, dir_okay=False)
    ] = None,
) -> None:
    """Add an item to inventory."""

    async def operation() -> dict[str, Any]:
        cfg = get_config()
        mgr = await open_session()
        stored = await mgr.add_item(
            name=item,
            quantity=quantity,
            unit=unit or cfg.defaults.unit,
            category=category or cfg.defaults.category,
            brand=brand,
            location=location or cfg.defaults.location,
            expiration_date=_parse_date(expiration),
            usage_frequency=usage,
            price=price,
            barcode=barcode,
            notes=notes,
            image=image.read_bytes() if image else None,
            use_default_expiration=default_expiration,
        )
        return {
            "success": True,
            "message": f"Added {stored.name} to inventory ({stored.storage_location.value})",
            "data": {"inventory_item": item_payload(stored, threshold_days=mgr.threshold_days)},
        }

    run(operation)


@app.command()
def update(
    item_id: Annotated[str, typer.Argument(help="Item ID (or unique prefix)")],
    name: Annotated[str | None, typer.Option("--name", help="New name")] = None,
    quantity: Annotated[float | None, typer.Option("--quantity", "-q", help="Quantity")] = None,
    unit: Annotated[str | None, typer.Option("--unit", "-u", help="Unit label")] = None,
    category: Annotated[str | None, typer.Option("--category", "-c", help="Category")] = None,
    brand: Annotated[str | None, typer.Option("--brand", "-b", help="Brand")] = None,
    location: Annotated[
        StorageLocation | None, typer.Option("--location", "-l", help="Storage location")
    ] = None,
    expiration: Annotated[
        str | None, typer.Option("--expires", help="Expiration date (YYYY-MM-DD)")
    ] = None,
    usage: Annotated[int | None, typer.Option("--usage", help="Uses per week")] = None,
    notes: Annotated[str | None, typer.Option("--notes", "-n", help="Notes")] = None,
    image: Annotated[
        Path | None, typer.Option("--image", help="Replacement image", exists=True, dir_okay=False)
    ] = None,
) -> None:
    """Update fields of an inventory item."""

    async def operation() -> dict[str, Any]:
        changes: dict[str, Any] = {
            "name": name,
            "quantity": quantity,
            "unit": unit,
            "category": category,
            "brand": brand,
            "storage_location": location,
            "expiration_date": _parse_date(expiration),
            "usage_frequency": usage,
            "notes": notes,
        }
        changes = {k: v for k, v in changes.items() if v is not None}
        mgr = await open_session()
        updated = await mgr.update_item(
            mgr.resolve_id(item_id),
            image=image.read_bytes() if image else None,
            **changes,
        )
        return {
            "success": True,
            "message": f"Updated {updated.name}",
            "data": {"inventory_item": item_payload(updated, threshold_days=mgr.threshold_days)},
        }

    run(operation)


@app.command()
def use(
    item_id: Annotated[str, typer.Argument(help="Item ID (or unique prefix)")],
    quantity: Annotated[float, typer.Option("--quantity", "-q", help="Amount to use")] = 1.0,
) -> None:
    """Use/consume inventory (reduce quantity)."""

    async def operation() -> dict[str, Any]:
        mgr = await open_session()
        updated = await mgr.update_quantity(mgr.resolve_id(item_id), delta=-quantity)
        return {
            "success": True,
            "message": f"Used {quantity} of {updated.name} (remaining: {updated.quantity})",
            "data": {"inventory_item": item_payload(updated, threshold_days=mgr.threshold_days)},
        }

    run(operation)


@app.command()
def shop(
    item_id: Annotated[str, typer.Argument(help="Item ID (or unique prefix)")],
    remove: Annotated[
        bool, typer.Option("--remove", help="Take the item off the shopping list")
    ] = False,
) -> None:
    """Mark an item as added to (or removed from) the shopping list."""

    async def operation() -> dict[str, Any]:
        mgr = await open_session()
        updated = await mgr.set_on_shopping_list(mgr.resolve_id(item_id), not remove)
        verb = "Removed" if remove else "Added"
        return {
            "success": True,
            "message": f"{verb} {updated.name} {'from' if remove else 'to'} the shopping list",
            "data": {"inventory_item": item_payload(updated, threshold_days=mgr.threshold_days)},
        }

    run(operation)


@app.command()
def remove(
    item_id: Annotated[str, typer.Argument(help="Item ID (or unique prefix)")],
) -> None:
    """Remove an item (and its image) from inventory."""

    async def operation() -> dict[str, Any]:
        mgr = await open_session()
        result = await mgr.remove_item(mgr.resolve_id(item_id))
        removed = result.unwrap()
        return {
            "success": True,
            "message": f"Removed {removed.name} from inventory",
            "warnings": [str(w) for w in result.warnings],
            "data": {"inventory_item": item_payload(removed, threshold_days=mgr.threshold_days)},
        }

    run(operation)


@app.command("list")
def list_items(
    location: Annotated[
        StorageLocation | None, typer.Option("--location", "-l", help="Filter by location")
    ] = None,
    search: Annotated[
        str, typer.Option("--search", "-s", help="Match name, brand or category")
    ] = "",
    sort: Annotated[SortOrder, typer.Option("--sort", help="Sort order")] = SortOrder.EXPIRATION_ASC,
    quick_filter: Annotated[
        InventoryFilter, typer.Option("--filter", "-f", help="Quick filter")
    ] = InventoryFilter.ALL,
) -> None:
    """View inventory."""

    async def operation() -> dict[str, Any]:
        mgr = await open_session()
        items = mgr.get_inventory(
            location=location, search_text=search, sort_order=sort, quick_filter=quick_filter
        )
        return {
            "success": True,
            "message": f"{len(items)} items in inventory",
            "data": {
                "inventory": [item_payload(i, threshold_days=mgr.threshold_days) for i in items],
                "count": len(items),
            },
        }

    run(operation)


@app.command()
def expiring(
    days: Annotated[
        int | None, typer.Option("--days", "-d", help="Days to look ahead")
    ] = None,
) -> None:
    """View items expiring soon."""

    async def operation() -> dict[str, Any]:
        mgr = await open_session()
        window = mgr.threshold_days if days is None else days
        items = mgr.get_expiring_soon(days=window)
        return {
            "success": True,
            "message": f"{len(items)} items expiring within {window} days",
            "data": {
                "expiring": [item_payload(i, threshold_days=window) for i in items],
                "count": len(items),
                "days": window,
            },
        }

    run(operation)


@app.command()
def expired() -> None:
    """View expired items."""

    async def operation() -> dict[str, Any]:
        mgr = await open_session()
        items = mgr.get_expired()
        return {
            "success": True,
            "message": f"{len(items)} items have expired",
            "data": {
                "expired": [item_payload(i, threshold_days=mgr.threshold_days) for i in items],
                "count": len(items),
            },
        }

    run(operation)


@app.command("low-stock")
def low_stock() -> None:
    """View items running low for their usage rate."""

    async def operation() -> dict[str, Any]:
        mgr = await open_session()
        items = mgr.get_running_low()
        return {
            "success": True,
            "message": f"{len(items)} items are running low",
            "data": {
                "running_low": [item_payload(i, threshold_days=mgr.threshold_days) for i in items],
                "count": len(items),
            },
        }

    run(operation)


@app.command()
def status(
    item_id: Annotated[str, typer.Argument(help="Item ID (or unique prefix)")],
) -> None:
    """Show the stock status of one item."""

    async def operation() -> dict[str, Any]:
        mgr = await open_session()
        target = mgr.get_item(mgr.resolve_id(item_id))
        payload = item_payload(target, threshold_days=mgr.threshold_days)
        return {
            "success": True,
            "message": f"{target.name}: {mgr.status_of(target.id).label}",  # type: ignore[arg-type]
            "data": {"inventory_item": payload},
        }

    run(operation)


if __name__ == "__main__":
    app()

"""Output formatting for CLI and programmatic use."""

import json
from datetime import date, datetime
from enum import Enum
from typing import Any

from rich.console import Console
from rich.table import Table

from .models import InventoryItem, StockStatus
from .status import days_until_expiration, stock_status

# rich has no "orange" named color
_RICH_COLORS = {"orange": "dark_orange"}


class JSONEncoder(json.JSONEncoder):
    """Custom JSON encoder for output."""

    def default(self, obj: Any) -> Any:
        if isinstance(obj, datetime):
            return obj.isoformat()
        if isinstance(obj, date):
            return obj.isoformat()
        if isinstance(obj, Enum):
            return obj.value
        return super().default(obj)


def item_payload(
    item: InventoryItem,
    now: datetime | None = None,
    threshold_days: int = 3,
) -> dict[str, Any]:
    """Serialize an item together with its derived status."""
    now = now or datetime.now()
    status = stock_status(item, now, threshold_days)
    payload = item.model_dump(mode="json")
    payload["stock_status"] = status.value
    payload["days_until_expiration"] = days_until_expiration(item, now)
    return payload


class OutputFormatter:
    """Formats output for both Rich terminal and JSON modes."""

    def __init__(self, json_mode: bool = False):
        """Initialize formatter.

        Args:
            json_mode: If True, output JSON instead of Rich formatting
        """
        self.json_mode = json_mode
        self.console = Console()

    def output(self, data: dict[str, Any], message: str = "") -> None:
        """Output data in appropriate format.

        Args:
            data: Data to output
            message: Optional message for Rich mode
        """
        if self.json_mode:
            self._output_json(data)
        else:
            self._output_rich(data, message)

    def _output_json(self, data: dict[str, Any]) -> None:
        """Output as JSON to stdout."""
        print(json.dumps(data, cls=JSONEncoder, indent=2))

    def _output_rich(self, data: dict[str, Any], message: str) -> None:
        """Output with Rich formatting."""
        if message:
            self.console.print(f"[green]✓[/green] {message}")

        for warning in data.get("warnings", []):
            self.console.print(f"[yellow]! Warning:[/yellow] {warning}")

        payload = data.get("data", {})
        if "inventory_item" in payload:
            self._render_inventory_item(payload["inventory_item"])
        elif "inventory" in payload:
            self._render_inventory(payload["inventory"], title="Inventory")
        elif "expiring" in payload:
            self._render_expiring(payload)
        elif "expired" in payload:
            self._render_inventory(payload["expired"], title="Expired Items")
        elif "running_low" in payload:
            self._render_inventory(payload["running_low"], title="Running Low")

    @staticmethod
    def _status_markup(status_value: str) -> str:
        status = StockStatus(status_value)
        color = _RICH_COLORS.get(status.color, status.color)
        return f"[{color}]{status.label}[/{color}]"

    @staticmethod
    def _format_expiration(item: dict) -> str:
        expiration = item.get("expiration_date")
        if not expiration:
            return "-"
        days = item.get("days_until_expiration")
        day_part = str(expiration)[:10]
        if days is None:
            return day_part
        if days < 0:
            return f"{day_part} ({-days}d ago)"
        return f"{day_part} ({days}d)"

    def _render_inventory_item(self, item: dict) -> None:
        """Render a single inventory item."""
        self.console.print(
            f"  {item['name']} — qty: {item.get('quantity', 1)} {item.get('unit', 'item')}, "
            f"location: {item.get('storage_location', 'pantry')}, "
            f"status: {self._status_markup(item.get('stock_status', 'in_stock'))}"
        )
        if item.get("id"):
            self.console.print(f"  [dim]id: {item['id']}[/dim]")

    def _render_inventory(self, items: list[dict], title: str) -> None:
        """Render a list of inventory items."""
        if not items:
            self.console.print("[dim]No items in inventory[/dim]")
            return

        table = Table(title=title, show_header=True, header_style="bold cyan")
        table.add_column("Item", style="cyan")
        table.add_column("Brand")
        table.add_column("Qty", justify="right")
        table.add_column("Location", style="green")
        table.add_column("Category", style="yellow")
        table.add_column("Expires")
        table.add_column("Status")
        table.add_column("ID", style="dim")

        for item in items:
            table.add_row(
                item["name"],
                item.get("brand") or "-",
                f"{item.get('quantity', 1)} {item.get('unit', 'item')}",
                item.get("storage_location", "pantry"),
                item.get("category", "Uncategorized"),
                self._format_expiration(item),
                self._status_markup(item.get("stock_status", "in_stock")),
                (item.get("id") or "")[:8],
            )

        self.console.print(table)
        self.console.print(f"\nTotal items: {len(items)}")

    def _render_expiring(self, payload: dict) -> None:
        """Render expiring items."""
        items = payload["expiring"]
        days = payload.get("days", 3)

        if not items:
            self.console.print(f"[dim]No items expiring within {days} days[/dim]")
            return

        self._render_inventory(items, title=f"Expiring Within {days} Days")

    def error(self, message: str, error_code: str | None = None) -> None:
        """Output error message.

        Args:
            message: Error message
            error_code: Optional error code
        """
        if self.json_mode:
            output = {"success": False, "error": message}
            if error_code:
                output["error_code"] = error_code
            print(json.dumps(output))
        else:
            self.console.print(f"[red]✗ Error:[/red] {message}")

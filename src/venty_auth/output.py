"""Output formatting helpers for the venty-auth CLI."""

import json
import sys
from datetime import datetime, timezone
from typing import Any

from rich.console import Console
from rich.table import Table
from rich.text import Text

# Status indicators with colors
STATUS_INDICATORS = {
    "ok": ("green", "✓"),
    "degraded": ("yellow", "◐"),
    "disabled": ("dim", "○"),
    "no_audience_check": ("yellow", "◐"),
    "error": ("red", "✗"),
}


def get_status_display(status: str) -> str:
    """Get colored status display with indicator."""
    status_lower = status.lower()
    if status_lower in STATUS_INDICATORS:
        color, indicator = STATUS_INDICATORS[status_lower]
        return f"[{color}]{indicator} {status}[/{color}]"
    return status


class OutputFormatter:
    """Handles output formatting for both JSON and pretty (human) modes."""

    def __init__(self, json_mode: bool = False) -> None:
        self.json_mode = json_mode
        self.console = Console()

    def success(self, data: Any, message: str = "Operation completed") -> None:
        """Output a success response."""
        if self.json_mode:
            self._json_output(True, data=data, message=message)
        else:
            self._pretty_success(data, message)

    def error(
        self,
        code: str,
        message: str,
        suggestion: str | None = None,
        exit_code: int = 1,
    ) -> None:
        """Output an error response and exit."""
        if self.json_mode:
            self._json_output(
                False,
                error={"code": code, "message": message, "suggestion": suggestion},
            )
        else:
            self._pretty_error(code, message, suggestion)
        sys.exit(exit_code)

    def table(
        self,
        data: list[dict[str, Any]],
        columns: list[tuple[str, str]],
        title: str | None = None,
        message: str = "Data retrieved",
    ) -> None:
        """Output data as a table (pretty mode) or list (JSON mode)."""
        if self.json_mode:
            self._json_output(True, data=data, message=message)
        else:
            self._pretty_table(data, columns, title)

    def _json_output(
        self,
        success: bool,
        data: Any = None,
        message: str | None = None,
        error: dict[str, Any] | None = None,
    ) -> None:
        """Output in JSON format."""
        output: dict[str, Any] = {
            "success": success,
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        }

        if success:
            output["data"] = data
            output["message"] = message
        else:
            output["error"] = error

        print(json.dumps(output, indent=2, default=str))

    def _pretty_success(self, data: Any, message: str) -> None:
        self.console.print(f"[green]{message}[/green]")

        if isinstance(data, dict):
            for key, value in data.items():
                if isinstance(value, str):
                    value = get_status_display(value)
                self.console.print(f"  [cyan]{key}:[/cyan] {value}")
        elif isinstance(data, list):
            for item in data:
                self.console.print(f"  - {item}")
        elif data is not None:
            self.console.print(f"  {data}")

    def _pretty_error(self, code: str, message: str, suggestion: str | None) -> None:
        error_text = Text()
        error_text.append("Error: ", style="bold red")
        error_text.append(f"[{code}] ", style="red")
        error_text.append(message)

        self.console.print(error_text)

        if suggestion:
            self.console.print(f"[yellow]Suggestion:[/yellow] {suggestion}")

    def _pretty_table(
        self,
        data: list[dict[str, Any]],
        columns: list[tuple[str, str]],
        title: str | None,
    ) -> None:
        if not data:
            self.console.print("[dim]No data to display[/dim]")
            return

        table = Table(title=title, show_header=True, header_style="bold cyan")

        for _, col_header in columns:
            table.add_column(col_header)

        for row in data:
            table.add_row(*[str(row.get(col_key) or "") for col_key, _ in columns])

        self.console.print(table)

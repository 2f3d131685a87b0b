# pierctl/cli/utils/output.py
"""Output formatting utilities"""

import json
from typing import Any, Optional

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from ...constants import EMOJI_ERROR, EMOJI_SUCCESS, EMOJI_WARNING
from ...models import LifecycleResult

console = Console()
err_console = Console(stderr=True)


def print_error(message: str) -> None:
    """Print an error message on stderr"""
    err_console.print(f"[red]{EMOJI_ERROR} Error:[/red] {escape(message)}", soft_wrap=True)


def print_line(line: str) -> None:
    """Forward one line of pier output verbatim"""
    console.print(line, markup=False, highlight=False, soft_wrap=True)


def format_lifecycle_result(result: LifecycleResult) -> None:
    """Format and display the outcome of a lifecycle command"""
    lines = [
        f"[green]{EMOJI_SUCCESS}[/green] {escape(result.message)}",
        "",
        f"[bold]Appchain:[/bold] {result.instance.chain_type.value}",
        f"[bold]Mode:[/bold] {result.instance.mode.value}",
    ]

    if result.instance.version:
        lines.append(f"[bold]Version:[/bold] {escape(result.instance.version)}")
    if result.schema_version:
        lines.append(f"[bold]Config schema:[/bold] {escape(result.schema_version)}")
    lines.append(f"[bold]Pier repo:[/bold] {escape(str(result.instance.instance_repo))}")

    if result.instance.container_id:
        lines.append(f"[bold]Container:[/bold] {escape(result.instance.container_id)}")
    if result.binary_path:
        lines.append(f"[bold]Binary:[/bold] {escape(str(result.binary_path))}")
    if result.plugin_path:
        lines.append(f"[bold]Plugin:[/bold] {escape(str(result.plugin_path))}")
    if result.rule_path:
        lines.append(f"[bold]Rule:[/bold] {escape(str(result.rule_path))}")
    if result.endpoint:
        endpoint = result.endpoint
        lines.append(
            f"[bold]Appchain endpoint:[/bold] {escape(endpoint.address)} "
            f"(ports {escape(','.join(endpoint.ports))})"
        )
    if result.state:
        lines.append(f"[bold]State:[/bold] {result.state.value}")

    panel = Panel(
        "\n".join(lines),
        title=f"{result.command.capitalize()} Result",
        border_style="green"
    )
    console.print(panel)

    for warning in result.warnings:
        console.print(f"[yellow]{EMOJI_WARNING} {escape(warning)}[/yellow]")


def format_status(result: LifecycleResult) -> None:
    """Display the recorded state of an instance"""
    table = Table(title=f"{result.instance.chain_type.value} pier", box=box.SIMPLE)
    table.add_column("Field", style="cyan")
    table.add_column("Value")

    table.add_row("State", result.state.value if result.state else "unknown")
    table.add_row("Mode", result.instance.mode.value)
    table.add_row("Version", result.instance.version or "-")
    table.add_row("Pier repo", str(result.instance.instance_repo))
    if result.instance.container_id:
        table.add_row("Container", result.instance.container_id)
    table.add_row("Details", result.message)

    console.print(table)
    for warning in result.warnings:
        console.print(f"[yellow]{EMOJI_WARNING} {escape(warning)}[/yellow]")


def format_json(data: Any, title: Optional[str] = None) -> None:
    """Format and display JSON data with syntax highlighting"""
    json_str = json.dumps(data, indent=2, default=str)
    syntax = Syntax(json_str, "json", theme="monokai", line_numbers=False)

    if title:
        panel = Panel(syntax, title=title, border_style="blue")
        console.print(panel)
    else:
        console.print(syntax)

"""Rich console output utilities for the itsm-setup CLI."""

from typing import Any

from rich.console import Console
from rich.table import Table


console = Console()
error_console = Console(stderr=True)


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]✓[/green] {message}")


def print_error(message: str) -> None:
    """Print an error message to stderr."""
    error_console.print(f"[red]✗[/red] {message}")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]![/yellow] {message}")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]→[/blue] {message}")


def print_config(config: dict[str, Any], title: str | None = None) -> None:
    """Print configuration as a table."""
    table = Table(title=title, show_header=True, header_style="bold")
    table.add_column("Setting")
    table.add_column("Value")

    for key, value in config.items():
        if isinstance(value, list):
            value = ", ".join(str(v) for v in value)
        table.add_row(key, str(value))

    console.print(table)


def print_packages(packages: list[Any], bundle_names: set[str] | None = None) -> None:
    """Print installed packages as a table."""
    if not packages:
        print_info("No packages installed.")
        return

    bundle_names = bundle_names or set()

    table = Table(title="Installed Packages", show_header=True, header_style="bold")
    table.add_column("Name", style="cyan")
    table.add_column("Version")
    table.add_column("Bundle", justify="center")

    for package in sorted(packages, key=lambda p: p.name):
        in_bundle = "[green]●[/green]" if package.name in bundle_names else ""
        table.add_row(package.name, package.version, in_bundle)

    console.print(table)
    console.print(f"\n[dim]Total: {len(packages)} packages[/dim]")


def print_repositories(entries: list[Any], is_valid: bool) -> None:
    """Print the package repository list setting."""
    table = Table(title="Package Repositories", show_header=True, header_style="bold")
    table.add_column("Name", style="cyan")
    table.add_column("URL")
    table.add_column("Auth", justify="center")

    for entry in entries:
        auth = "[yellow]yes[/yellow]" if entry.auth_header_key else "[dim]-[/dim]"
        table.add_row(entry.name, entry.url, auth)

    console.print(table)
    state = "[green]valid[/green]" if is_valid else "[yellow]invalid[/yellow]"
    console.print(f"\n[dim]Setting is[/dim] {state}")

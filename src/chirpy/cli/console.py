"""Shared console utilities for CLI commands."""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from chirpy.store import Post

# Shared console instance for all CLI commands
console = Console()


def error(msg: str) -> None:
    """Print an error message in red."""
    console.print(f"[red]{escape(msg)}[/red]")


def warning(msg: str) -> None:
    """Print a warning message in yellow."""
    console.print(f"[yellow]{escape(msg)}[/yellow]")


def success(msg: str) -> None:
    """Print a success message in green."""
    console.print(f"[green]{escape(msg)}[/green]")


def dim(msg: str) -> None:
    """Print a dimmed message."""
    console.print(f"[dim]{escape(msg)}[/dim]")


def create_table(
    title: str,
    columns: list[tuple[str, str | dict]],
) -> Table:
    """Create a styled table with consistent formatting.

    Args:
        title: Table title.
        columns: List of (name, style) or (name, kwargs_dict) tuples.
    """
    table = Table(title=title)
    for name, style_or_kwargs in columns:
        if isinstance(style_or_kwargs, dict):
            table.add_column(name, **style_or_kwargs)
        else:
            table.add_column(name, style=style_or_kwargs)
    return table


def print_posts(title: str, posts: list[Post]) -> None:
    if not posts:
        dim("No posts")
        return
    table = create_table(
        title,
        [
            ("When", "dim"),
            ("Author", "cyan"),
            ("Post", {"overflow": "fold"}),
        ],
    )
    for post in posts:
        table.add_row(post.formatted_time, escape(post.owner), escape(post.content))
    console.print(table)

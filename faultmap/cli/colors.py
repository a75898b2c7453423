"""
faultmap CLI - styled output primitives built on Click.

All output degrades gracefully on non-colour terminals (click.style
handles NO_COLOR / TERM=dumb).
"""

from __future__ import annotations

import click


_L_H = "\u2500"   # ─
_L_V = "\u2502"   # │
_L_BL = "\u2514"  # └
_L_LT = "\u251c"  # ├


def success(message: str) -> None:
    """Print success message in green."""
    click.echo(click.style(message, fg="green"))


def error(message: str) -> None:
    """Print error message in red."""
    click.echo(click.style(message, fg="red"), err=True)


def dim(message: str) -> None:
    """Print dimmed message."""
    click.echo(click.style(message, dim=True))


def kv(
    key: str,
    value: str,
    *,
    key_width: int = 12,
    indent: int = 2,
    val_fg: str = "cyan",
) -> None:
    """
    Print an aligned key-value pair.

        Type:       CORE:CONNECTIVITY
        Rule:       locator
    """
    prefix = " " * indent
    k = click.style(f"{key}:", fg="white")
    v = click.style(str(value), fg=val_fg)
    padding = " " * max(1, key_width - len(key) - 1)
    click.echo(f"{prefix}{k}{padding}{v}")


def tree_item(text: str, *, last: bool = False, prefix: str = "", fg: str = "white") -> None:
    """
    Print a tree node under ``prefix``.

        ├── CONNECTIVITY
        │   └── RETRY_EXHAUSTED
    """
    connector = f"{_L_BL}{_L_H}{_L_H} " if last else f"{_L_LT}{_L_H}{_L_H} "
    click.echo(click.style(prefix + connector, dim=True) + click.style(text, fg=fg))


def tree_indent(prefix: str, *, last: bool) -> str:
    """Prefix for the children of a node."""
    return prefix + ("    " if last else f"{_L_V}   ")

from __future__ import annotations

from typing import Iterable

from rich.console import Console
from rich.table import Table

console = Console()


def prompt_input(prompt: str = "") -> str:
    """Global helper to read one line from the terminal.

    Raises ``EOFError`` when the input stream is exhausted.
    """
    from builtins import input as builtin_input

    return builtin_input(prompt)


def say(out: Console, text: object = "") -> None:
    """Print user text verbatim, never wrapped or styled."""

    out.print(str(text), markup=False, highlight=False, emoji=False, soft_wrap=True)


def render_help(rows: Iterable[tuple[str, str]]) -> Table:
    table = Table(title="Climber roster – commands")
    table.add_column("Command")
    table.add_column("Description")
    for usage, description in rows:
        table.add_row(usage, description)
    return table

"""Rich output formatting helpers for the keyreach CLI.

Outcome Color Mapping:
    ok = green, denied = yellow, not_found = cyan, other errors = bold red
"""

from __future__ import annotations

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from keyreach.core.permissions import PERM_LETTERS, PermissionMask
from keyreach.core.permissions.models import MASK_CLASSES
from keyreach.demo import DemoStep

_OUTCOME_STYLES: dict[str, str] = {
    "ok": "green",
    "denied": "yellow",
    "not_found": "cyan",
}

console = Console()


def outcome_style(outcome: str) -> str:
    """Return the Rich style string for a step outcome."""
    return _OUTCOME_STYLES.get(outcome, "bold red")


def print_demo_steps(steps: list[DemoStep], uid: int) -> None:
    """Print the possession walkthrough as a table followed by a verdict."""
    table = Table(title=f"Possession Walkthrough (uid {uid})", show_header=True, header_style="bold")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Step", style="bold")
    table.add_column("Expected", justify="center")
    table.add_column("Outcome", justify="center")
    table.add_column("Detail", style="dim")

    for index, step in enumerate(steps, start=1):
        table.add_row(
            str(index),
            step.title,
            Text(step.expected, style=outcome_style(step.expected)),
            Text(step.outcome, style=outcome_style(step.outcome)),
            step.detail,
        )

    console.print(table)

    if all(step.passed for step in steps):
        verdict = Text(
            "Linking @u into @s granted possession of every key in @u, "
            "including keys added before the link.",
            style="bold green",
        )
    else:
        failed = sum(1 for step in steps if not step.passed)
        verdict = Text(f"{failed} step(s) diverged from the expected outcome.", style="bold red")
    console.print(Panel(verdict, title="Result"))


def print_mask(mask: PermissionMask) -> None:
    """Print one row per permission class with a column per capability."""
    table = Table(title=mask.describe(), show_header=True, header_style="bold")
    table.add_column("Class", style="bold")
    for letter, flag in PERM_LETTERS.items():
        table.add_column(f"{flag.name.lower()} ({letter})", justify="center")

    for name in MASK_CLASSES:
        perms = getattr(mask, name)
        cells = [
            Text("yes", style="green") if flag in perms else Text("-", style="dim")
            for flag in PERM_LETTERS.values()
        ]
        table.add_row(name, *cells)

    console.print(table)

"""
Terminal output for install — problem list, transaction table, prompt.
"""

from __future__ import annotations

import click

from minidnf.adapters.base import TransactionUI
from minidnf.core.models.transaction import ItemAction, TransactionItem

_ACTION_HEADINGS = {
    ItemAction.INSTALL: "Installing:",
    ItemAction.UPGRADE: "Upgrading:",
    ItemAction.REMOVE: "Removing:",
}

_SUMMARY_LABELS = {
    ItemAction.INSTALL: "Install",
    ItemAction.UPGRADE: "Upgrade",
    ItemAction.REMOVE: "Remove",
}


def format_size(num_bytes: int) -> str:
    """Human-readable size: ``512 B``, ``1.5 KiB``, ``20.0 MiB``."""
    if num_bytes < 1024:
        return f"{num_bytes} B"
    size = float(num_bytes)
    for unit in ("KiB", "MiB"):
        size /= 1024
        if size < 1024:
            return f"{size:.1f} {unit}"
    return f"{size / 1024:.1f} GiB"


def transaction_table(items: list[TransactionItem]) -> list[str]:
    """Render the transaction table as lines. Empty list for no items."""
    if not items:
        return []

    rows = [
        (
            item.package.name,
            item.package.arch,
            item.package.evr,
            item.package.repoid,
            format_size(item.package.size),
        )
        for item in items
    ]
    header = ("Package", "Arch", "Version", "Repository", "Size")
    widths = [max(len(r[i]) for r in [header, *rows]) for i in range(len(header))]

    def fmt(row: tuple[str, ...]) -> str:
        return " " + "  ".join(cell.ljust(w) for cell, w in zip(row, widths)).rstrip()

    lines = [fmt(header)]
    for action, heading in _ACTION_HEADINGS.items():
        group = [row for row, item in zip(rows, items) if item.action == action]
        if not group:
            continue
        lines.append(heading)
        lines.extend(fmt(row) for row in group)

    lines.append("")
    lines.append("Transaction Summary:")
    for action, label in _SUMMARY_LABELS.items():
        count = sum(1 for item in items if item.action == action)
        if count:
            noun = "package" if count == 1 else "packages"
            lines.append(f" {label:<10} {count} {noun}")
    return lines


class ClickUI(TransactionUI):
    """Interactive UI on the terminal.

    Args:
        assumeyes: Answer yes without asking.
        assumeno: Answer no without asking (wins over ``assumeyes``).
        echo: Print problems, the table and notices. Off for ``--json``.
    """

    def __init__(self, assumeyes: bool = False, assumeno: bool = False, echo: bool = True):
        self._assumeyes = assumeyes
        self._assumeno = assumeno
        self._echo = echo

    def render_problems(self, text: str) -> None:
        if self._echo:
            click.secho(text, fg="red")

    def render_preview(self, items: list[TransactionItem]) -> bool:
        lines = transaction_table(items)
        if not lines:
            if self._echo:
                click.echo("Nothing to do.")
            return False
        if self._echo:
            for line in lines:
                click.echo(line)
            click.echo()
        return True

    def confirm(self) -> bool:
        if self._assumeno:
            return False
        if self._assumeyes:
            return True
        try:
            return click.confirm("Is this ok", default=False, err=not self._echo)
        except click.Abort:
            return False

    def notify(self, message: str) -> None:
        if self._echo:
            click.echo(message)

"""
CLI command for the transaction history.
"""

from __future__ import annotations

import json
import sys
from datetime import UTC, datetime

import click


def _fmt_time(timestamp: int | None) -> str:
    if timestamp is None:
        return "-"
    return datetime.fromtimestamp(timestamp, UTC).strftime("%Y-%m-%d %H:%M")


@click.command()
@click.option("--limit", "-n", default=20, show_default=True, help="Number of transactions.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def history(ctx: click.Context, limit: int, as_json: bool) -> None:
    """Show past install transactions."""
    from minidnf.core.use_cases.history import list_history

    result = list_history(config_path=ctx.obj.get("config_path"), limit=limit)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    if not result.records:
        click.echo("No transactions.")
        return

    click.echo(f" {'ID':>4}  {'Command line':<30}  {'Date and time':<16}  {'State':<8}  Altered")
    for record in result.records:
        click.echo(
            f" {record.id:>4}  {record.cmdline[:30]:<30}  {_fmt_time(record.dt_begin):<16}"
            f"  {record.state.value:<8}  {len(record.items)}"
        )

"""
CLI command for installing packages.

Thin wrapper over ``minidnf.core.use_cases.install``.
"""

from __future__ import annotations

import json
import shlex
import sys

import click

from minidnf.core.config.loader import ConfigError, load_config
from minidnf.core.context import set_logger
from minidnf.core.engine.pipeline import PipelineState
from minidnf.core.observability.logging_config import build_process_logger
from minidnf.ui.cli.output import ClickUI


@click.command()
@click.argument("patterns", nargs=-1, required=True, metavar="PACKAGE...")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def install(ctx: click.Context, patterns: tuple[str, ...], as_json: bool) -> None:
    """Install a package or packages on your system.

    Each PACKAGE is a name or glob, optionally with version, release
    and arch: foo, foo-1.2, foo-1.2-3.x86_64, 'lib*'.
    """
    from minidnf.core.use_cases.install import run_install

    try:
        config = load_config(ctx.obj.get("config_path"))
    except ConfigError as e:
        _fail(str(e), as_json)
        return

    set_logger(build_process_logger(ctx.obj.get("log_level", "WARNING"), config.logfile))

    ui = ClickUI(
        assumeyes=ctx.obj.get("assumeyes", False) or config.assumeyes,
        assumeno=ctx.obj.get("assumeno", False) or config.assumeno,
        echo=not as_json,
    )
    result = run_install(
        list(patterns),
        ui=ui,
        config=config,
        cmdline=shlex.join(["install", *patterns]),
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        if not result.ok:
            sys.exit(1)
        return

    if result.state == PipelineState.FAILED:
        _fail(result.error or "Install failed", as_json)
        return

    if result.changed:
        assert result.record is not None
        click.secho(
            f"✅ Complete! Transaction {result.record.id}: {len(result.items)} package(s)",
            fg="green",
        )


def _fail(message: str, as_json: bool) -> None:
    if as_json:
        click.echo(json.dumps({"state": PipelineState.FAILED.value, "error": message}, indent=2))
    else:
        click.secho(f"❌ {message}", fg="red")
    sys.exit(1)

"""
minidnf — CLI entrypoint.

Usage:
    python -m minidnf.main --help
    python -m minidnf.main install foo 'lib*'
    python -m minidnf.main history
"""

from __future__ import annotations

import os
from pathlib import Path

import click

from minidnf import __version__
from minidnf.core.context import set_logger
from minidnf.core.observability.logging_config import build_process_logger, setup_logging


@click.group()
@click.version_option(version=__version__, prog_name="minidnf")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to minidnf.yml (default: auto-detect).",
)
@click.option("--assumeyes", "-y", is_flag=True, help="Answer yes for all questions.")
@click.option("--assumeno", is_flag=True, help="Answer no for all questions.")
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
    assumeyes: bool,
    assumeno: bool,
) -> None:
    """minidnf — install packages from configured repositories."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = Path(config_path) if config_path else None
    ctx.obj["assumeyes"] = assumeyes
    ctx.obj["assumeno"] = assumeno

    # ── Logging setup (once, at process start) ──────────────────
    if debug:
        level = "DEBUG"
    elif verbose:
        level = "INFO"
    elif quiet:
        level = "ERROR"
    else:
        level = os.environ.get("MINIDNF_LOG_LEVEL", "WARNING")
    ctx.obj["log_level"] = level

    setup_logging(
        level=level,
        log_file=os.environ.get("MINIDNF_LOG_FILE"),
        log_file_level=os.environ.get("MINIDNF_LOG_FILE_LEVEL"),
        quiet_third_party=not debug,
    )
    set_logger(build_process_logger(level))


# ── Register sub-commands from minidnf/ui/cli/ ────────────────────

from minidnf.ui.cli.history import history
from minidnf.ui.cli.install import install

cli.add_command(install)
cli.add_command(history)


if __name__ == "__main__":
    cli()

"""
devsetup — CLI entrypoint.

Usage:
    devsetup
    python -m devsetup.main --help

Runs the interactive installer: power check, Xcode command line tools,
Homebrew, then the stack picked from the menu.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

import click

from devsetup import __version__
from devsetup.adapters.base import Adapter
from devsetup.adapters.shell.command import ShellCommandAdapter
from devsetup.core.observability.logging_config import setup_logging
from devsetup.core.models.settings import Settings
from devsetup.core.probes import EnvironmentProbe
from devsetup.core.prompt import Prompt
from devsetup.core.runner import CommandRunner
from devsetup.core.stages.base import StageContext


def build_context(
    settings: Settings,
    adapter: Adapter,
    prompt: Prompt,
) -> StageContext:
    """Wire runner, probe and prompt around one adapter."""
    runner = CommandRunner(adapter)
    return StageContext(
        runner=runner,
        probe=EnvironmentProbe(runner),
        prompt=prompt,
        settings=settings,
    )


@click.command()
@click.version_option(version=__version__, prog_name="devsetup")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False, dir_okay=False),
    default=None,
    help="Settings file (default: $DEVSETUP_CONFIG or ~/.config/devsetup/config.yml).",
)
def cli(verbose: bool, debug: bool, config_path: str | None) -> None:
    """devsetup — one-stop interactive dev-environment installer for macOS."""
    from devsetup.core.config.loader import find_config_file, load_settings
    from devsetup.core.engine.orchestrator import Orchestrator
    from devsetup.core.errors import SetupError
    from devsetup.ui.console import ClickPrompt

    # ── Logging setup (once, at process start) ──────────────────
    if debug:
        level = "DEBUG"
    elif verbose:
        level = "INFO"
    else:
        level = os.environ.get("DEVSETUP_LOG_LEVEL", "WARNING")

    setup_logging(
        level=level,
        log_file=os.environ.get("DEVSETUP_LOG_FILE"),
        log_file_level=os.environ.get("DEVSETUP_LOG_FILE_LEVEL"),
    )

    try:
        settings = load_settings(find_config_file(Path(config_path) if config_path else None))
        ctx = build_context(settings, ShellCommandAdapter(), ClickPrompt())
        Orchestrator(ctx).run()
    except SetupError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(e.exit_code)


if __name__ == "__main__":
    cli()

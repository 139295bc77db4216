"""
Console prompt — the click-backed Prompt used by the CLI.
"""

from __future__ import annotations

import click

from devsetup.core.prompt import Prompt, Style

_STYLES: dict[str, dict] = {
    "info": {},
    "header": {"bold": True},
    "success": {"fg": "green"},
    "warning": {"fg": "yellow"},
    "error": {"fg": "red"},
}


class ClickPrompt(Prompt):
    """Read answers from the terminal, write progress to stdout."""

    def ask(self, question: str) -> str:
        # default="" lets a bare Enter through (the toolchain confirmation)
        return click.prompt(question, default="", show_default=False, prompt_suffix=" ")

    def say(self, message: str, style: Style = "info") -> None:
        if style == "header":
            click.echo()
        click.secho(message, **_STYLES.get(style, {}))

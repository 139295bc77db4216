"""
Prerequisite stages — run unconditionally, in this order, before the menu.
"""

from __future__ import annotations

import logging
import shlex

from devsetup.core.errors import ToolchainMissing, UserDeclined
from devsetup.core.stages.base import Stage

logger = logging.getLogger(__name__)

AFFIRMATIVE = frozenset({"y", "yes"})


class PowerCheckStage(Stage):
    """Confirmation gate before long-running installs."""

    name = "power"
    title = "Power Check"

    def provision(self) -> None:
        answer = self.ctx.prompt.ask("Is your Mac plugged in to AC power? (y/n)")
        if answer.strip().lower() not in AFFIRMATIVE:
            raise UserDeclined("→ Plug in first, then re-run.")


class ToolchainStage(Stage):
    """Xcode command-line tools.

    ``xcode-select --install`` only opens a GUI installer and returns,
    so the user has to say when it is finished. The toolchain is probed
    again afterwards rather than trusting the answer.
    """

    name = "toolchain"
    title = "Xcode Command Line Tools"

    _PROBE = ["xcode-select", "-p"]

    def is_satisfied(self) -> bool:
        return self.ctx.probe.command_succeeds(self._PROBE)

    def provision(self) -> None:
        prompt = self.ctx.prompt
        prompt.say("→ Installing Xcode CLI tools…")
        self.ctx.runner.run(["xcode-select", "--install"], name="xcode-select --install")
        prompt.say("  (Accept the popup and wait for it to finish.)")
        prompt.ask("Press Enter after installation is complete.")

        if not self.ctx.probe.command_succeeds(self._PROBE):
            raise ToolchainMissing(
                "Xcode command line tools are still not installed. "
                "Re-run once the installer has finished."
            )


class PackageManagerStage(Stage):
    """Homebrew: install it if missing, refresh it if present."""

    name = "homebrew"
    title = "Homebrew"

    def provision(self) -> None:
        ctx = self.ctx
        brew_settings = ctx.settings.homebrew
        brew = ctx.probe.find_command("brew", [brew_settings.bin_dir])

        if brew is None:
            ctx.prompt.say("→ Installing Homebrew…")
            url = shlex.quote(brew_settings.install_url)
            ctx.runner.run(
                ["/bin/bash", "-c", f'/bin/bash -c "$(curl -fsSL {url})"'],
                name="Homebrew install script",
            )
        else:
            ctx.prompt.say("✔ Homebrew already installed.", style="success")

        # Both branches; the marker keeps it to one line
        self.apply_profile(
            "brew shellenv",
            f'eval "$({brew_settings.bin_dir / "brew"} shellenv)"',
        )
        self._export_environment()

        if brew is not None:
            ctx.runner.run([brew, "update"], name="brew update")

    def _export_environment(self) -> None:
        # What `brew shellenv` would export, applied to this process
        prefix = self.ctx.settings.homebrew.prefix
        repository = f"{prefix}/Homebrew" if prefix == "/usr/local" else prefix
        self.ctx.runner.update_environment(
            {
                "HOMEBREW_PREFIX": prefix,
                "HOMEBREW_CELLAR": f"{prefix}/Cellar",
                "HOMEBREW_REPOSITORY": repository,
            },
            path_entries=[
                self.ctx.settings.homebrew.bin_dir,
                self.ctx.settings.homebrew.sbin_dir,
            ],
        )

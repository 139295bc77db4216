"""
Stack stages — the user-selectable tool sets.

Each installs the ToolSpecs from tools() through the matching
package-manager dialect. Brew, pip and npm are no-ops for installed
packages; the conda environment and the profile blocks are probed.
"""

from __future__ import annotations

import logging
import re
import shlex
from pathlib import Path

from devsetup.core.errors import ExternalCommandFailure, SetupError
from devsetup.core.models.tool import ToolSpec
from devsetup.core.stages.base import Stage

logger = logging.getLogger(__name__)


class AcademicStage(Stage):
    name = "academic"
    title = "Academic / General-Learning Stack"

    def tools(self) -> list[ToolSpec]:
        return self.ctx.settings.academic.tools()

    def provision(self) -> None:
        self.brew_install(self.tool_names("formula"))
        self.brew_install_casks(self.tool_names("cask"))

        extensions = self.tool_names("extension")
        if extensions:
            self.ctx.prompt.say("→ Installing VS Code extensions.")
            code = self.ctx.probe.find_command("code", [self.ctx.settings.homebrew.bin_dir])
            command = [code or "code"]
            for ext in extensions:
                command += ["--install-extension", ext]
            self.ctx.runner.run(command, name="VS Code extensions", best_effort=True)


class DataScienceStage(Stage):
    name = "data-science"
    title = "Data-Science Stack"

    def tools(self) -> list[ToolSpec]:
        return self.ctx.settings.data_science.tools()

    def conda_command(self) -> str | None:
        tools = self.ctx.settings.data_science
        return self.ctx.probe.find_command(
            "conda",
            [
                Path(tools.conda_root).expanduser() / "bin",
                Path(self.ctx.settings.homebrew.prefix) / "Caskroom" / "miniconda" / "base" / "bin",
            ],
        )

    def provision(self) -> None:
        tools = self.ctx.settings.data_science
        self.brew_install_casks(self.tool_names("cask"))

        conda = self.conda_command()
        if conda is None:
            raise SetupError("conda not found after installing Miniconda.")

        if self.ctx.probe.conda_env_exists(conda, tools.conda_env):
            logger.info("Conda env %s exists, skipping create", tools.conda_env)
            self.ctx.prompt.say(f"✔ Conda env '{tools.conda_env}' already exists.", style="success")
            return

        self.ctx.runner.run(
            [
                conda, "create", "-y", "-n", tools.conda_env,
                f"python={tools.python_version}", *self.tool_names("conda"),
            ],
            name=f"conda create {tools.conda_env}",
        )

    def notes(self) -> list[str]:
        env = self.ctx.settings.data_science.conda_env
        return [f"✔ Conda env '{env}' ready.  Activate with:  conda activate {env}"]


_PYENV_INIT = 'eval "$(pyenv init --path)"\neval "$(pyenv init -)"'


def latest_patch(listing: str, series: str) -> str | None:
    """Newest ``<series>.N`` release in ``pyenv install --list`` output."""
    pattern = re.compile(rf"^\s*{re.escape(series)}\.(\d+)\s*$")
    patches = [int(m.group(1)) for line in listing.splitlines() if (m := pattern.match(line))]
    if not patches:
        return None
    return f"{series}.{max(patches)}"


class WebPythonStage(Stage):
    name = "web-python"
    title = "Web-Dev (Python) Stack"

    def tools(self) -> list[ToolSpec]:
        return self.ctx.settings.web_python.tools()

    def provision(self) -> None:
        tools = self.ctx.settings.web_python
        runner = self.ctx.runner

        self.brew_install(self.tool_names("formula"))
        self.apply_profile("pyenv init", _PYENV_INIT)

        pyenv = self.ctx.probe.find_command("pyenv", [self.ctx.settings.homebrew.bin_dir]) or "pyenv"

        listing = runner.capture([pyenv, "install", "--list"])
        if not listing.ok:
            raise ExternalCommandFailure(listing.command, listing.return_code, listing.error or "")

        version = latest_patch(listing.output, tools.python_series)
        if version is None:
            raise SetupError(f"pyenv lists no Python {tools.python_series}.x release.")

        runner.run([pyenv, "install", "-s", version], name=f"pyenv install {version}")
        runner.run([pyenv, "global", version], name=f"pyenv global {version}")
        runner.run([pyenv, "exec", "pip", "install", "--upgrade", "pip"], name="upgrade pip")
        packages = self.tool_names("pip")
        if packages:
            runner.run(
                [pyenv, "exec", "pip", "install", *packages],
                name="pip install web packages",
            )


class WebJsStage(Stage):
    name = "web-js"
    title = "Web-Dev (JavaScript) Stack"

    def tools(self) -> list[ToolSpec]:
        return self.ctx.settings.web_js.tools()

    @property
    def nvm_dir(self) -> Path:
        return Path(self.ctx.settings.web_js.nvm_dir).expanduser()

    @property
    def nvm_script(self) -> Path:
        return Path(self.ctx.settings.homebrew.prefix) / "opt" / "nvm" / "nvm.sh"

    def _nvm_dir_for_shell(self) -> str:
        raw = self.ctx.settings.web_js.nvm_dir
        if raw.startswith("~/"):
            return "$HOME/" + raw[2:]
        return raw

    def _profile_block(self) -> str:
        return (
            f'export NVM_DIR="{self._nvm_dir_for_shell()}"\n'
            '[ -s "$(brew --prefix nvm)/nvm.sh" ] && . "$(brew --prefix nvm)/nvm.sh"'
        )

    def _nvm_shell(self, script: str) -> list[str]:
        # nvm is a shell function, so it has to be sourced in the same shell
        setup = (
            f"export NVM_DIR={shlex.quote(str(self.nvm_dir))}; "
            f". {shlex.quote(str(self.nvm_script))}"
        )
        return ["/bin/bash", "-c", f"{setup} && {script}"]

    def provision(self) -> None:
        runner = self.ctx.runner

        self.brew_install(self.tool_names("formula"))

        if not self.ctx.probe.directory_exists(self.nvm_dir):
            self.nvm_dir.mkdir(parents=True, exist_ok=True)
        self.apply_profile("NVM_DIR", self._profile_block())

        runner.run(self._nvm_shell("nvm install --lts"), name="nvm install --lts")
        packages = self.tool_names("npm")
        if packages:
            runner.run(
                self._nvm_shell(
                    "nvm use --lts >/dev/null && npm install -g " + shlex.join(packages)
                ),
                name="npm install -g",
            )

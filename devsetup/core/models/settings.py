"""
Settings model — what gets installed, and where configuration goes.

Every field has a default, so an empty (or absent) settings file
reproduces the stock install. A YAML file only needs the keys it
changes:

    profile: ~/.zprofile
    homebrew:
      prefix: /opt/homebrew
    academic:
      formulae: [python, gcc, openjdk]
    data_science:
      conda_env: datasci
"""

from __future__ import annotations

import platform
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from devsetup.core.models.tool import ToolSpec, specs

HOMEBREW_INSTALL_URL = "https://raw.githubusercontent.com/Homebrew/install/HEAD/install.sh"


def _default_brew_prefix() -> str:
    """Homebrew's default prefix for this CPU architecture."""
    return "/opt/homebrew" if platform.machine() == "arm64" else "/usr/local"


class _Section(BaseModel):
    model_config = ConfigDict(extra="forbid")


class HomebrewSettings(_Section):
    """Where Homebrew lives and where to get it from."""

    prefix: str = Field(default_factory=_default_brew_prefix)
    install_url: str = HOMEBREW_INSTALL_URL

    @property
    def bin_dir(self) -> Path:
        return Path(self.prefix) / "bin"

    @property
    def sbin_dir(self) -> Path:
        return Path(self.prefix) / "sbin"


class AcademicTools(_Section):
    """Academic / general-learning stack."""

    formulae: list[str] = Field(default_factory=lambda: ["python", "gcc", "openjdk"])
    casks: list[str] = Field(default_factory=lambda: ["visual-studio-code"])
    extensions: list[str] = Field(
        default_factory=lambda: ["ms-python.python", "ms-vscode.cpptools", "redhat.java"]
    )

    def tools(self) -> list[ToolSpec]:
        return (
            specs(self.formulae, "formula")
            + specs(self.casks, "cask")
            + specs(self.extensions, "extension")
        )


class DataScienceTools(_Section):
    """Data-science stack: Miniconda plus one named conda environment."""

    casks: list[str] = Field(default_factory=lambda: ["miniconda"])
    conda_root: str = "~/miniconda3"
    conda_env: str = "datasci"
    python_version: str = "3.12"
    packages: list[str] = Field(
        default_factory=lambda: [
            "numpy", "pandas", "matplotlib", "scipy", "scikit-learn", "jupyterlab",
        ]
    )

    def tools(self) -> list[ToolSpec]:
        return specs(self.casks, "cask") + specs(self.packages, "conda")


class WebPythonTools(_Section):
    """Python web-dev stack: pyenv-managed interpreter plus pip globals."""

    formulae: list[str] = Field(default_factory=lambda: ["pyenv"])
    python_series: str = "3.12"
    packages: list[str] = Field(
        default_factory=lambda: [
            "virtualenv", "pipenv", "poetry", "django", "flask",
            "fastapi", "uvicorn[standard]", "pytest",
        ]
    )

    def tools(self) -> list[ToolSpec]:
        return specs(self.formulae, "formula") + specs(self.packages, "pip")


class WebJsTools(_Section):
    """JavaScript web-dev stack: nvm-managed Node plus npm globals."""

    formulae: list[str] = Field(default_factory=lambda: ["nvm"])
    nvm_dir: str = "~/.nvm"
    packages: list[str] = Field(
        default_factory=lambda: ["yarn", "pnpm", "create-react-app", "vite"]
    )

    def tools(self) -> list[ToolSpec]:
        return specs(self.formulae, "formula") + specs(self.packages, "npm")


class Settings(_Section):
    """Root settings document."""

    profile: str = "~/.zprofile"
    homebrew: HomebrewSettings = Field(default_factory=HomebrewSettings)
    academic: AcademicTools = Field(default_factory=AcademicTools)
    data_science: DataScienceTools = Field(default_factory=DataScienceTools)
    web_python: WebPythonTools = Field(default_factory=WebPythonTools)
    web_js: WebJsTools = Field(default_factory=WebJsTools)

    @property
    def profile_path(self) -> Path:
        return Path(self.profile).expanduser()

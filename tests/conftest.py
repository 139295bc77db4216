"""
Shared test fixtures and configuration.
"""

from pathlib import Path

import pytest

from devsetup.core.models.settings import (
    DataScienceTools,
    HomebrewSettings,
    Settings,
    WebJsTools,
)
from devsetup.core.probes import EnvironmentProbe
from devsetup.core.prompt import ScriptedPrompt
from devsetup.core.runner import CommandRunner
from devsetup.core.stages.base import StageContext

from tests.simulated_host import SimulatedHost


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings whose every path lives under tmp_path."""
    return Settings(
        profile=str(tmp_path / ".zprofile"),
        homebrew=HomebrewSettings(prefix="/opt/homebrew"),
        data_science=DataScienceTools(conda_root=str(tmp_path / "miniconda3")),
        web_js=WebJsTools(nvm_dir=str(tmp_path / ".nvm")),
    )


@pytest.fixture
def host() -> SimulatedHost:
    return SimulatedHost()


@pytest.fixture
def make_ctx(settings: Settings):
    """Build a StageContext around a host and scripted answers."""

    def _make(host: SimulatedHost, answers=()) -> StageContext:
        runner = CommandRunner(host, env={"PATH": "/usr/bin:/bin"})
        return StageContext(
            runner=runner,
            probe=EnvironmentProbe(runner),
            prompt=ScriptedPrompt(answers),
            settings=settings,
        )

    return _make

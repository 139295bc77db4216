"""
Stage base — a named, idempotent provisioning step.

A stage runs its probes and install commands through the shared
StageContext. Running a stage twice must leave the host exactly as
running it once: every install either sits behind a probe or is a
package-manager command that is a no-op for installed packages.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from devsetup.core.models.action import Receipt
from devsetup.core.models.settings import Settings
from devsetup.core.models.tool import ToolSpec
from devsetup.core.probes import EnvironmentProbe
from devsetup.core.prompt import Prompt
from devsetup.core.runner import CommandRunner

logger = logging.getLogger(__name__)


@dataclass
class StageContext:
    """What every stage is given to work with."""

    runner: CommandRunner
    probe: EnvironmentProbe
    prompt: Prompt
    settings: Settings = field(default_factory=Settings)

    def brew_command(self) -> str:
        """``brew`` on PATH, or the prefix binary before PATH is updated."""
        return self.probe.find_command("brew", [self.settings.homebrew.bin_dir]) or "brew"


@dataclass
class StageResult:
    """Outcome of one stage run."""

    name: str
    status: str = "ok"   # ok, skipped
    receipts: list[Receipt] = field(default_factory=list)
    profile_changed: bool = False

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "status": self.status,
            "commands": [r.command for r in self.receipts],
            "profile_changed": self.profile_changed,
        }


class Stage(ABC):
    """One step of the install sequence.

    Subclasses set ``name`` and ``title`` and implement ``provision``.
    ``is_satisfied`` is the optional whole-stage idempotence predicate;
    finer-grained checks live inside ``provision``.
    """

    name: str = ""
    title: str = ""

    def __init__(self, ctx: StageContext):
        self.ctx = ctx
        self._profile_changed = False

    def tools(self) -> list[ToolSpec]:
        """Tools this stage installs, in order."""
        return []

    def is_satisfied(self) -> bool:
        return False

    @abstractmethod
    def provision(self) -> None:
        """Do the work. Raises SetupError subclasses on failure."""

    def notes(self) -> list[str]:
        """Lines shown after a successful run."""
        return []

    def run(self) -> StageResult:
        self.ctx.prompt.header(self.title or self.name)
        tools = self.tools()
        if tools:
            logger.debug("Stage %s tools: %s", self.name, ", ".join(t.name for t in tools))
        first_receipt = len(self.ctx.runner.receipts)

        if self.is_satisfied():
            logger.info("Stage %s already satisfied", self.name)
            self.ctx.prompt.say(f"✔ {self.title} already set up.", style="success")
            return StageResult(name=self.name, status="skipped")

        self.provision()
        for line in self.notes():
            self.ctx.prompt.say(line, style="success")

        result = StageResult(
            name=self.name,
            receipts=self.ctx.runner.receipts[first_receipt:],
            profile_changed=self._profile_changed,
        )
        logger.info("Stage %s done (%d commands)", self.name, len(result.receipts))
        return result

    # ── Helpers shared by stages ────────────────────────────────

    def tool_names(self, mechanism: str) -> list[str]:
        """Names from tools() installed through one mechanism, in order."""
        return [t.name for t in self.tools() if t.mechanism == mechanism]

    def apply_profile(self, marker: str, content: str) -> bool:
        changed = self.ctx.runner.apply_config_line(
            self.ctx.settings.profile_path, marker, content
        )
        self._profile_changed = self._profile_changed or changed
        return changed

    def brew_install(self, formulae: list[str]) -> None:
        if not formulae:
            return
        self.ctx.runner.run(
            [self.ctx.brew_command(), "install", *formulae],
            name=f"brew install {' '.join(formulae)}",
        )

    def brew_install_casks(self, casks: list[str]) -> None:
        if not casks:
            return
        self.ctx.runner.run(
            [self.ctx.brew_command(), "install", "--cask", *casks],
            name=f"brew install --cask {' '.join(casks)}",
        )

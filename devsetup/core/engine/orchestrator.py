"""
Orchestrator — the fixed install sequence.

Flow:
    power check → toolchain → package manager → menu → selected stack

Every step runs to completion before the next one starts. Any exit
before DONE (a SetupError or an interrupted prompt) moves the run to
ABORTED and propagates. Re-running the whole installer is the recovery
path; every stage is idempotent.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum

from devsetup.core.errors import SetupError
from devsetup.core.menu import MenuController, StackChoice
from devsetup.core.models.action import Receipt
from devsetup.core.stages import (
    PackageManagerStage,
    PowerCheckStage,
    StageContext,
    StageResult,
    ToolchainStage,
)
from devsetup.core.stages.base import Stage

logger = logging.getLogger(__name__)


class RunState(Enum):
    START = "start"
    POWER_CONFIRMED = "power-confirmed"
    TOOLCHAIN_READY = "toolchain-ready"
    PACKAGE_MANAGER_READY = "package-manager-ready"
    STACK_SELECTED = "stack-selected"
    STACK_PROVISIONED = "stack-provisioned"
    DONE = "done"
    ABORTED = "aborted"


# Prerequisite stage → state reached once it has run
_PREREQUISITES: tuple[tuple[type[Stage], RunState], ...] = (
    (PowerCheckStage, RunState.POWER_CONFIRMED),
    (ToolchainStage, RunState.TOOLCHAIN_READY),
    (PackageManagerStage, RunState.PACKAGE_MANAGER_READY),
)


@dataclass
class RunReport:
    """What happened during one run."""

    run_id: str = ""
    state: RunState = RunState.START
    choice: StackChoice | None = None
    stages: list[StageResult] = field(default_factory=list)
    receipts: list[Receipt] = field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.state == RunState.DONE

    def to_dict(self) -> dict:
        return {
            "run_id": self.run_id,
            "state": self.state.value,
            "choice": self.choice.value if self.choice else None,
            "stages": [s.to_dict() for s in self.stages],
            "error": self.error,
        }


class Orchestrator:
    """Run the prerequisite stages, then the stack the user picks."""

    def __init__(self, ctx: StageContext, menu: MenuController | None = None):
        self.ctx = ctx
        self.menu = menu or MenuController(ctx.prompt)
        self.report = RunReport(run_id=generate_run_id())

    def run(self) -> RunReport:
        """Execute the whole sequence.

        Raises:
            SetupError: Any stage failure, declined power check or
                invalid menu answer. ``self.report.state`` is ABORTED,
                as it is for anything else that ends the run early
                (Ctrl-C, closed input).
        """
        report = self.report
        logger.info("Run %s started", report.run_id)

        try:
            for stage_cls, reached in _PREREQUISITES:
                self._run_stage(stage_cls)
                self._advance(reached)

            report.choice = self.menu.select()
            self._advance(RunState.STACK_SELECTED)

            self._run_stage(self.menu.stage_for(report.choice))
            self._advance(RunState.STACK_PROVISIONED)
            self._advance(RunState.DONE)
        except SetupError as e:
            report.error = str(e)
            raise
        finally:
            report.receipts = list(self.ctx.runner.receipts)
            if report.state != RunState.DONE:
                logger.info(
                    "Run %s aborted after %s: %s",
                    report.run_id, report.state.value, report.error or "interrupted",
                )
                report.state = RunState.ABORTED

        prompt = self.ctx.prompt
        prompt.header("Done ✔")
        prompt.say(
            "Open a new terminal session "
            f"(or 'source {self.ctx.settings.profile}') for PATH changes to take effect."
        )
        return report

    def _run_stage(self, stage_cls: type[Stage]) -> StageResult:
        result = stage_cls(self.ctx).run()
        self.report.stages.append(result)
        return result

    def _advance(self, state: RunState) -> None:
        logger.debug("%s → %s", self.report.state.value, state.value)
        self.report.state = state


def generate_run_id() -> str:
    """Generate a unique run ID."""
    now = datetime.now(UTC).strftime("%Y%m%d-%H%M%S")
    short = uuid.uuid4().hex[:6]
    return f"run-{now}-{short}"

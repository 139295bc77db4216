"""
Environment probes — read-only "is this already done?" checks.

Probes never mutate the host and never raise. When a probe cannot
tell (the query command is missing, exits nonzero, or prints
something unparsable) it answers "not present", and the caller goes
on to the idempotent install step.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from pathlib import Path

from devsetup.core.profile import profile_contains
from devsetup.core.runner import CommandRunner

logger = logging.getLogger(__name__)


class EnvironmentProbe:
    """Host queries, routed through the runner's adapter."""

    def __init__(self, runner: CommandRunner):
        self._runner = runner

    def find_command(self, program: str, extra_dirs: Iterable[Path | str] = ()) -> str | None:
        """Path of ``program`` if it is installed, else None."""
        found = self._runner.which(program, extra_dirs)
        logger.debug("probe find_command(%s) → %s", program, found)
        return found

    def command_exists(self, program: str, extra_dirs: Iterable[Path | str] = ()) -> bool:
        return self.find_command(program, extra_dirs) is not None

    def command_succeeds(self, command: list[str]) -> bool:
        """Whether a query command exits 0."""
        receipt = self._runner.capture(command)
        logger.debug("probe %s → %s", command, receipt.status)
        return receipt.ok

    def profile_contains(self, path: Path, marker: str) -> bool:
        return profile_contains(path, marker)

    def directory_exists(self, path: Path) -> bool:
        return path.is_dir()

    def conda_env_exists(self, conda: str | None, name: str) -> bool:
        """Whether conda knows an environment called ``name``.

        Reads ``conda env list --json`` and compares environment
        directory names exactly.
        """
        if not conda:
            return False

        receipt = self._runner.capture([conda, "env", "list", "--json"])
        if not receipt.ok:
            logger.debug("conda env list failed: %s", receipt.error)
            return False

        try:
            envs = json.loads(receipt.output).get("envs", [])
        except (json.JSONDecodeError, AttributeError):
            logger.debug("Unparsable conda env list output")
            return False

        return any(Path(str(p)).name == name for p in envs)

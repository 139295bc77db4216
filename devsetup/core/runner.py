"""
Command runner — the single place install commands are dispatched.

The runner turns a command list into an Action, hands it to the
adapter, keeps the Receipt, and decides what a failure means:

    - regular step failed     → ExternalCommandFailure (halts the run)
    - best-effort step failed → logged, run continues
    - capture (query) failed  → returned to the caller (probes)

It also owns the environment every command sees, so a package manager
installed mid-run is on PATH for the steps after it.
"""

from __future__ import annotations

import itertools
import logging
import os
import shlex
from collections.abc import Iterable, MutableMapping
from pathlib import Path

from devsetup.adapters.base import Adapter, ExecutionContext
from devsetup.core.errors import ExternalCommandFailure
from devsetup.core.models.action import Action, Receipt
from devsetup.core.profile import apply_config_line

logger = logging.getLogger(__name__)


class CommandRunner:
    """Run host commands through an adapter, fail-fast.

    Args:
        adapter: Host adapter (shell in production, mock in tests).
        env: Environment passed to every command. Defaults to
            ``os.environ`` itself, so updates reach the whole process.
    """

    def __init__(
        self,
        adapter: Adapter,
        env: MutableMapping[str, str] | None = None,
    ):
        self.adapter = adapter
        self.env: MutableMapping[str, str] = os.environ if env is None else env
        self.receipts: list[Receipt] = []
        self._ids = itertools.count(1)

    # ── Commands ────────────────────────────────────────────────

    def run(
        self,
        command: list[str],
        *,
        name: str = "",
        best_effort: bool = False,
    ) -> Receipt:
        """Run a provisioning command to completion.

        Raises:
            ExternalCommandFailure: The command failed and is not best-effort.
        """
        receipt = self._dispatch(
            Action(
                id=self._next_id(),
                name=name,
                command=command,
                best_effort=best_effort,
            )
        )
        self.receipts.append(receipt)

        if receipt.failed:
            if best_effort:
                logger.warning(
                    "Best-effort step failed, continuing: %s (%s)",
                    shlex.join(command),
                    receipt.error,
                )
                return receipt
            raise ExternalCommandFailure(command, receipt.return_code, receipt.error or "")

        logger.info("✓ %s", name or shlex.join(command))
        return receipt

    def capture(self, command: list[str]) -> Receipt:
        """Run a read-only query and return its receipt, failed or not."""
        return self._dispatch(
            Action(id=self._next_id(), name="query", command=command, capture=True)
        )

    def which(self, program: str, extra_dirs: Iterable[Path | str] = ()) -> str | None:
        """Locate an executable on PATH, then in ``extra_dirs``."""
        dirs = [d for d in self.env.get("PATH", "").split(os.pathsep) if d]
        dirs += [str(d) for d in extra_dirs]
        return self.adapter.locate(program, os.pathsep.join(dirs))

    # ── Host configuration ──────────────────────────────────────

    def apply_config_line(self, path: Path, marker: str, content: str) -> bool:
        """Append a profile block unless its marker is present."""
        return apply_config_line(path, marker, content)

    def update_environment(
        self,
        values: dict[str, str] | None = None,
        path_entries: Iterable[Path | str] = (),
    ) -> None:
        """Set variables and prepend PATH entries for later commands.

        Entries already on PATH are left where they are.
        """
        for key, value in (values or {}).items():
            self.env[key] = value

        current = [d for d in self.env.get("PATH", "").split(os.pathsep) if d]
        new = [str(p) for p in path_entries if str(p) not in current]
        if new:
            self.env["PATH"] = os.pathsep.join(new + current)
            logger.debug("PATH += %s", new)

    # ── Internals ───────────────────────────────────────────────

    def _dispatch(self, action: Action) -> Receipt:
        context = ExecutionContext(action=action, env=dict(self.env))
        logger.debug("→ %s", shlex.join(action.command))
        return self.adapter.execute(context)

    def _next_id(self) -> str:
        return f"step-{next(self._ids)}"

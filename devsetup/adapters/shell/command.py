"""
Shell command adapter — run host commands.

Installers are interactive (Homebrew asks for a sudo password, the
conda and pyenv downloads draw progress bars), so regular actions
inherit the terminal. Only ``capture`` actions collect their output.
No timeout is applied: an install takes as long as it takes.
"""

from __future__ import annotations

import logging
import shlex
import shutil
import subprocess
import time

from devsetup.adapters.base import Adapter, ExecutionContext
from devsetup.core.models.action import Receipt

logger = logging.getLogger(__name__)


class ShellCommandAdapter(Adapter):
    """Execute commands with the current process's privileges."""

    @property
    def name(self) -> str:
        return "shell"

    def is_available(self) -> bool:
        return shutil.which("sh") is not None

    def execute(self, context: ExecutionContext) -> Receipt:
        action = context.action
        command = action.command

        valid, error = self.validate(context)
        if not valid:
            return Receipt.failure(
                adapter=self.name,
                action_id=action.id,
                error=error,
                command=list(command),
            )

        logger.debug("Executing: %s", shlex.join(command))
        start = time.monotonic()

        try:
            result = subprocess.run(
                command,
                env=context.env or None,
                cwd=context.cwd,
                capture_output=action.capture,
                text=True,
            )
        except FileNotFoundError:
            return Receipt.failure(
                adapter=self.name,
                action_id=action.id,
                error=f"Command not found: {command[0]}",
                command=list(command),
                return_code=127,
            )
        except OSError as e:
            return Receipt.failure(
                adapter=self.name,
                action_id=action.id,
                error=f"Command execution error: {e}",
                command=list(command),
            )

        elapsed_ms = int((time.monotonic() - start) * 1000)
        output = (result.stdout or "").strip()
        stderr = (result.stderr or "").strip()

        if result.returncode == 0:
            return Receipt.success(
                adapter=self.name,
                action_id=action.id,
                output=output,
                command=list(command),
                return_code=0,
                duration_ms=elapsed_ms,
                metadata={"stderr": stderr} if stderr else {},
            )

        return Receipt.failure(
            adapter=self.name,
            action_id=action.id,
            error=stderr or f"Command exited with code {result.returncode}",
            command=list(command),
            return_code=result.returncode,
            output=output,
            duration_ms=elapsed_ms,
        )

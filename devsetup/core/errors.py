"""
Error taxonomy — every way a run can stop early.

All of them exit with status 1. The CLI catches ``SetupError`` and
prints the message; nothing below the CLI calls ``sys.exit``.
"""

from __future__ import annotations

import shlex


class SetupError(Exception):
    """Base class for conditions that halt the whole run."""

    exit_code = 1


class UserDeclined(SetupError):
    """The power check was answered with anything but yes."""


class InvalidSelection(SetupError):
    """A menu or sub-menu answer is not in the lookup table."""


class ToolchainMissing(SetupError):
    """The command-line toolchain is still absent after the user confirmed installation."""


class ConfigError(SetupError):
    """Raised when the settings file is invalid or unreadable."""


class ExternalCommandFailure(SetupError):
    """A non-best-effort command exited nonzero or could not be started."""

    def __init__(self, command: list[str], return_code: int | None, detail: str = ""):
        self.command = list(command)
        self.return_code = return_code
        self.detail = detail
        status = f"exit {return_code}" if return_code is not None else "not started"
        message = f"Command failed ({status}): {shlex.join(self.command)}"
        if detail:
            message = f"{message}\n{detail}"
        super().__init__(message)

"""
Adapter base — the contract between the command runner and the host.

The runner and the probes only talk to the host through this
interface, never by calling ``subprocess`` themselves. Tests swap in
a mock adapter and never touch the real machine.
"""

from __future__ import annotations

import shutil
from abc import ABC, abstractmethod

from pydantic import BaseModel, Field

from devsetup.core.models.action import Action, Receipt


class ExecutionContext(BaseModel):
    """Everything an adapter needs to run one action."""

    action: Action
    env: dict[str, str] = Field(default_factory=dict)
    cwd: str | None = None


class Adapter(ABC):
    """Abstract base class for host adapters.

    Adapters perform external side effects and return receipts.
    They NEVER raise exceptions — failures are captured in the Receipt.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """The adapter identifier (e.g., 'shell', 'mock')."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the adapter can run commands at all."""

    @abstractmethod
    def execute(self, context: ExecutionContext) -> Receipt:
        """Run the action and return a receipt.

        MUST never raise exceptions. All failures are captured
        in the Receipt with status='failed'.
        """

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        """Validate that the action can be executed.

        Returns:
            (is_valid, error_message). error_message is empty if valid.
        """
        if not context.action.command:
            return False, "Empty command"
        return True, ""

    def locate(self, program: str, path: str | None = None) -> str | None:
        """Resolve an executable name against a PATH string."""
        return shutil.which(program, path=path)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"

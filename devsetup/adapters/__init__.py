"""Adapters — bindings to the host's shell.

Public re-exports for convenient access.
"""

from devsetup.adapters.base import Adapter, ExecutionContext
from devsetup.adapters.mock import MockAdapter
from devsetup.adapters.shell.command import ShellCommandAdapter

__all__ = [
    "Adapter",
    "ExecutionContext",
    "MockAdapter",
    "ShellCommandAdapter",
]

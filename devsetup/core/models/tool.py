"""
ToolSpec — a named installable unit.

The mechanism says which package-manager dialect installs it.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict

Mechanism = Literal["formula", "cask", "conda", "pip", "npm", "extension"]


class ToolSpec(BaseModel):
    """One thing a stage installs."""

    model_config = ConfigDict(frozen=True)

    name: str
    mechanism: Mechanism


def specs(names: list[str], mechanism: Mechanism) -> list[ToolSpec]:
    """Wrap plain names in ToolSpecs, preserving order."""
    return [ToolSpec(name=n, mechanism=mechanism) for n in names]

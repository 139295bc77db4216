"""
Menu controller — maps the user's answer to a stack stage.

The mapping is a static table, checked at import time to cover every
StackChoice. An answer outside the table stops the run: no retry
loop, no default.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum

from devsetup.core.errors import InvalidSelection
from devsetup.core.prompt import Prompt
from devsetup.core.stages.base import Stage
from devsetup.core.stages.stacks import (
    AcademicStage,
    DataScienceStage,
    WebJsStage,
    WebPythonStage,
)

logger = logging.getLogger(__name__)


class StackChoice(Enum):
    ACADEMIC = "academic"
    DATA_SCIENCE = "data-science"
    WEB_PYTHON = "web-python"
    WEB_JS = "web-js"


STACK_STAGES: dict[StackChoice, type[Stage]] = {
    StackChoice.ACADEMIC: AcademicStage,
    StackChoice.DATA_SCIENCE: DataScienceStage,
    StackChoice.WEB_PYTHON: WebPythonStage,
    StackChoice.WEB_JS: WebJsStage,
}


@dataclass(frozen=True)
class MenuEntry:
    """One menu line: either a stack, or a nested sub-menu."""

    label: str
    choice: StackChoice | None = None
    submenu: dict[str, MenuEntry] = field(default_factory=dict)
    submenu_title: str = ""


MAIN_MENU: dict[str, MenuEntry] = {
    "1": MenuEntry("Academic / General-Learning", StackChoice.ACADEMIC),
    "2": MenuEntry("Data-Science", StackChoice.DATA_SCIENCE),
    "3": MenuEntry(
        "Web-Dev",
        submenu={
            "a": MenuEntry("Python (Django / FastAPI etc.)", StackChoice.WEB_PYTHON),
            "b": MenuEntry("JavaScript (Node / React / Vite etc.)", StackChoice.WEB_JS),
        },
        submenu_title="Web-Dev stack:",
    ),
}


def _reachable(menu: dict[str, MenuEntry]) -> set[StackChoice]:
    found: set[StackChoice] = set()
    for entry in menu.values():
        if entry.choice is not None:
            found.add(entry.choice)
        found |= _reachable(entry.submenu)
    return found


def check_tables(stages: dict, menu: dict[str, MenuEntry]) -> None:
    """Every stack needs a stage and a menu entry that reaches it."""
    missing = set(StackChoice) - set(stages)
    if missing:
        raise RuntimeError(f"No stage for: {sorted(c.value for c in missing)}")
    unreachable = set(StackChoice) - _reachable(menu)
    if unreachable:
        raise RuntimeError(f"No menu entry for: {sorted(c.value for c in unreachable)}")


check_tables(STACK_STAGES, MAIN_MENU)


class MenuController:
    """Ask for a stack and resolve it to its stage class."""

    def __init__(self, prompt: Prompt, menu: dict[str, MenuEntry] | None = None):
        self.prompt = prompt
        self.menu = MAIN_MENU if menu is None else menu

    def select(self) -> StackChoice:
        """Resolve the user's selection, including any sub-menu.

        Raises:
            InvalidSelection: An answer is not in the table.
        """
        self.prompt.header("Environment Selection")
        self.prompt.say("Choose one setup option:")
        entry = self._ask(self.menu, case_sensitive=True)

        while entry.choice is None:
            self.prompt.say("")
            self.prompt.say(f" {entry.submenu_title}")
            entry = self._ask(entry.submenu, case_sensitive=False)

        logger.info("Selected stack: %s", entry.choice.value)
        return entry.choice

    def stage_for(self, choice: StackChoice) -> type[Stage]:
        return STACK_STAGES[choice]

    def _ask(self, menu: dict[str, MenuEntry], case_sensitive: bool) -> MenuEntry:
        keys = list(menu)
        for key, entry in menu.items():
            self.prompt.say(f"  {key}) {entry.label}")

        span = f"{keys[0]}-{keys[-1]}" if keys[0].isdigit() else "/".join(keys)
        answer = self.prompt.ask(f"Enter {span}:").strip()
        if not case_sensitive:
            answer = answer.lower()

        if answer not in menu:
            logger.debug("Rejected menu answer %r", answer)
            raise InvalidSelection(f"Invalid selection: {answer!r}")
        return menu[answer]

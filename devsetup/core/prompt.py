"""
Prompt capability — how the installer talks to the user.

The orchestrator and stages never read stdin or print directly; they
receive a Prompt. The CLI passes a click-backed one, tests pass a
``ScriptedPrompt`` with canned answers.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import Literal

Style = Literal["info", "header", "success", "warning", "error"]


class Prompt(ABC):
    """Ask questions and show progress."""

    @abstractmethod
    def ask(self, question: str) -> str:
        """Block until the user answers; return the raw answer."""

    @abstractmethod
    def say(self, message: str, style: Style = "info") -> None:
        """Show a line of progress to the user."""

    def header(self, title: str) -> None:
        self.say(f"=== {title} ===", style="header")


class ScriptedPrompt(Prompt):
    """Prompt with pre-recorded answers, for tests and automation.

    Raises:
        EOFError: When asked more questions than answers were given.
    """

    def __init__(self, answers: Iterable[str] = ()):
        self._answers = list(answers)
        self.questions: list[str] = []
        self.messages: list[tuple[str, str]] = []

    def ask(self, question: str) -> str:
        self.questions.append(question)
        if not self._answers:
            raise EOFError(f"No scripted answer for: {question}")
        return self._answers.pop(0)

    def say(self, message: str, style: Style = "info") -> None:
        self.messages.append((style, message))

    @property
    def transcript(self) -> str:
        return "\n".join(m for _, m in self.messages)

"""
Mock adapter — test double for host commands.

Records every action it receives and answers with success unless a
response has been configured for a command prefix. Executables are
"installed" by listing them in ``programs``.
"""

from __future__ import annotations

from devsetup.adapters.base import Adapter, ExecutionContext
from devsetup.core.models.action import Receipt


class MockAdapter(Adapter):
    """Universal mock adapter for testing.

    Responses are matched on the longest configured command prefix, so
    ``set_failure(["brew", "install"])`` fails every ``brew install ...``.
    """

    def __init__(
        self,
        adapter_name: str = "mock",
        available: bool = True,
        programs: dict[str, str] | None = None,
        default_output: str = "",
    ):
        self._name = adapter_name
        self._available = available
        self._default_output = default_output
        self.programs: dict[str, str] = dict(programs or {})
        self._responses: dict[tuple[str, ...], Receipt] = {}
        self._call_log: list[ExecutionContext] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def call_log(self) -> list[ExecutionContext]:
        """All execution contexts this mock has received."""
        return self._call_log

    @property
    def call_count(self) -> int:
        """Number of times execute has been called."""
        return len(self._call_log)

    @property
    def commands(self) -> list[list[str]]:
        """Commands received, in order."""
        return [c.action.command for c in self._call_log]

    @property
    def executed(self) -> list[list[str]]:
        """Commands received that were not read-only queries."""
        return [c.action.command for c in self._call_log if not c.action.capture]

    def is_available(self) -> bool:
        return self._available

    def locate(self, program: str, path: str | None = None) -> str | None:
        return self.programs.get(program)

    def set_response(self, prefix: list[str], receipt: Receipt) -> None:
        """Set a custom response for commands starting with ``prefix``."""
        self._responses[tuple(prefix)] = receipt

    def set_output(self, prefix: list[str], output: str) -> None:
        """Succeed with the given output for commands starting with ``prefix``."""
        self.set_response(
            prefix,
            Receipt.success(adapter=self._name, action_id="mock", output=output),
        )

    def set_failure(
        self,
        prefix: list[str],
        error: str = "Mock failure",
        return_code: int = 1,
    ) -> None:
        """Configure commands starting with ``prefix`` to fail."""
        self.set_response(
            prefix,
            Receipt.failure(
                adapter=self._name,
                action_id="mock",
                error=error,
                return_code=return_code,
            ),
        )

    def execute(self, context: ExecutionContext) -> Receipt:
        self._call_log.append(context)
        command = context.action.command

        match = self._match(command)
        if match is not None:
            return match.model_copy(
                update={"action_id": context.action.id, "command": list(command)}
            )

        return Receipt.success(
            adapter=self._name,
            action_id=context.action.id,
            output=self._default_output,
            command=list(command),
            metadata={"mock": True},
        )

    def _match(self, command: list[str]) -> Receipt | None:
        best: tuple[str, ...] | None = None
        for prefix in self._responses:
            if tuple(command[: len(prefix)]) == prefix:
                if best is None or len(prefix) > len(best):
                    best = prefix
        return self._responses[best] if best is not None else None

    def reset(self) -> None:
        """Clear call log and custom responses."""
        self._call_log.clear()
        self._responses.clear()

"""Host-side automation service.

Implements the ``automations`` capability: runs automations through the
runner and keeps a bounded, newest-first history of finished runs.
"""

from __future__ import annotations

import logging
import threading
from collections import deque

from automation_engine.automations.registry import AutomationRegistry
from automation_engine.automations.runner import AutomationRunner
from automation_engine.automations.types import AutomationDefinition, AutomationRun
from automation_engine.commands.registry import CommandRegistry
from automation_engine.context import CommandContext

logger = logging.getLogger(__name__)


class RunHistory:
    """Finished runs, newest first, capped at ``limit`` entries."""

    def __init__(self, limit: int = 100) -> None:
        if limit < 1:
            raise ValueError("limit must be >= 1")
        self._runs: deque[AutomationRun] = deque(maxlen=limit)
        self._lock = threading.Lock()

    def add(self, run: AutomationRun) -> None:
        with self._lock:
            self._runs.appendleft(run)

    def list(self, automation_id: str | None = None) -> list[AutomationRun]:
        with self._lock:
            runs = list(self._runs)
        if automation_id is None:
            return runs
        return [r for r in runs if r.automation_id == automation_id]

    def get(self, run_id: str) -> AutomationRun | None:
        with self._lock:
            for run in self._runs:
                if run.id == run_id:
                    return run
            return None

    def clear(self) -> None:
        with self._lock:
            self._runs.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._runs)


class AutomationService:
    """The host's view of automations.

    The execution context refers back to this service (a running automation may
    start another), so the context is bound after construction with :meth:`bind`.
    """

    def __init__(
        self,
        commands: CommandRegistry,
        automations: AutomationRegistry,
        *,
        history_limit: int = 100,
    ) -> None:
        self._commands = commands
        self._automations = automations
        self._history = RunHistory(history_limit)
        self._runner: AutomationRunner | None = None

    @property
    def registry(self) -> AutomationRegistry:
        return self._automations

    @property
    def history(self) -> RunHistory:
        return self._history

    @property
    def runs(self) -> list[AutomationRun]:
        return self._history.list()

    def bind(self, context: CommandContext) -> None:
        self._runner = AutomationRunner(context, self._commands, self._automations)

    def register(self, definition: AutomationDefinition) -> None:
        self._automations.register(definition)

    def unregister(self, automation_id: str) -> None:
        self._automations.unregister(automation_id)

    async def run_automation(self, automation_id: str) -> AutomationRun:
        """Run an automation and record the result.

        Raises:
            AutomationNotFound: Unknown automation id (nothing is recorded).
            RuntimeError: :meth:`bind` has not been called.
        """

        if self._runner is None:
            raise RuntimeError("AutomationService is not bound to an execution context")

        run = await self._runner.run(automation_id)
        self._history.add(run)
        logger.info(
            "Automation run recorded",
            extra={
                "automation_id": automation_id,
                "run_id": run.id,
                "status": run.status.value,
            },
        )
        return run

"""Automation runner.

Interprets one automation into a terminal :class:`AutomationRun`.

State machine per run::

    running -> completed
    running -> failed

Execution failures never escape :meth:`AutomationRunner.run`; callers read
``run.status``. The runner keeps no history: each call owns its own record and
hands it back frozen.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from automation_engine.automations.conditions import evaluate_condition
from automation_engine.automations.registry import AutomationRegistry
from automation_engine.automations.types import (
    AutomationDefinition,
    AutomationLog,
    AutomationRun,
    AutomationStep,
    CodeAutomation,
    DeclarativeAutomation,
    LogLevel,
    RunStatus,
    StepStatus,
)
from automation_engine.commands.registry import CommandRegistry
from automation_engine.context import CommandContext
from automation_engine.errors import AutomationNotFound, ConditionError

logger = logging.getLogger(__name__)

_PY_LEVELS = {
    LogLevel.INFO: logging.INFO,
    LogLevel.WARN: logging.WARNING,
    LogLevel.ERROR: logging.ERROR,
}


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


def _outcome(step: AutomationStep, status: StepStatus, result: Any) -> dict[str, Any]:
    # Stored as returned, never serialized.
    return {
        "step_id": step.id,
        "command_id": step.command_id,
        "status": status,
        "result": result,
    }


class StepFailed(Exception):
    """A declarative step's command raised; carries the original error."""

    def __init__(self, step_id: str, command_id: str, error: Exception) -> None:
        super().__init__(str(error))
        self.step_id = step_id
        self.command_id = command_id
        self.error = error


@dataclass
class _RunRecorder:
    """Mutable working state of a run, owned by a single ``run()`` call."""

    id: str
    automation_id: str
    start_time: datetime
    status: RunStatus = RunStatus.RUNNING
    end_time: datetime | None = None
    logs: list[AutomationLog] = field(default_factory=list)
    results: Any = None

    def finish(self, status: RunStatus) -> None:
        if self.status.is_terminal:
            raise RuntimeError(f"Run {self.id} already {self.status.value}")
        self.status = status
        self.end_time = _utc_now()

    def freeze(self) -> AutomationRun:
        return AutomationRun(
            id=self.id,
            automation_id=self.automation_id,
            start_time=self.start_time,
            end_time=self.end_time,
            status=self.status,
            logs=tuple(self.logs),
            results=self.results,
        )


class AutomationRunner:
    """Runs code and declarative automations against one execution context."""

    def __init__(
        self,
        context: CommandContext,
        commands: CommandRegistry,
        automations: AutomationRegistry,
    ) -> None:
        self._context = context
        self._commands = commands
        self._automations = automations

    async def run(self, automation_id: str) -> AutomationRun:
        """Run an automation to a terminal state.

        Raises:
            AutomationNotFound: No automation is registered under ``automation_id``.
                This is checked before a run record exists; every failure after
                that point is reported through the returned run instead.
        """

        definition = self._automations.get(automation_id)
        if definition is None:
            raise AutomationNotFound(automation_id)

        run = _RunRecorder(
            id=uuid.uuid4().hex,
            automation_id=automation_id,
            start_time=_utc_now(),
        )
        self._log(run, LogLevel.INFO, f"Starting automation: {definition.name}")

        try:
            run.results = await self._execute(definition, run)
        except Exception as e:
            run.finish(RunStatus.FAILED)
            self._log(run, LogLevel.ERROR, f"Automation failed: {e}")
        else:
            run.finish(RunStatus.COMPLETED)
            self._log(run, LogLevel.INFO, "Automation completed successfully")

        return run.freeze()

    async def _execute(self, definition: AutomationDefinition, run: _RunRecorder) -> Any:
        if isinstance(definition, CodeAutomation):
            return await definition.execute(self._context, run.id)
        if isinstance(definition, DeclarativeAutomation):
            return await self._execute_steps(definition, run)
        raise TypeError(f"Unsupported automation type: {type(definition).__name__}")

    async def _execute_steps(
        self, definition: DeclarativeAutomation, run: _RunRecorder
    ) -> list[dict[str, Any]]:
        outcomes: list[dict[str, Any]] = []
        # Partial results stay visible on the run if a later step fails.
        run.results = outcomes

        for step in definition.steps:
            if step.condition and not self._condition_holds(step.condition, outcomes, run):
                self._log(
                    run,
                    LogLevel.INFO,
                    f"Skipping step {step.id} ({step.command_id}): Condition not met",
                )
                outcomes.append(_outcome(step, "skipped", "Condition not met"))
                continue

            self._log(run, LogLevel.INFO, f"Executing step: {step.command_id}")
            try:
                # Copy so default-filling never leaks into the stored definition.
                result = await self._commands.execute(
                    step.command_id, dict(step.args), self._context
                )
            except Exception as e:
                self._log(
                    run,
                    LogLevel.ERROR,
                    f"Step {step.id} ({step.command_id}) failed: {e}",
                )
                raise StepFailed(step.id, step.command_id, e) from e

            outcomes.append(_outcome(step, "completed", result))

        return outcomes

    def _condition_holds(
        self, condition: str, outcomes: list[dict[str, Any]], run: _RunRecorder
    ) -> bool:
        steps = {outcome["step_id"]: outcome for outcome in outcomes}
        try:
            return evaluate_condition(condition, steps=steps, context=self._context)
        except ConditionError as e:
            self._log(
                run,
                LogLevel.WARN,
                f"Condition evaluation failed: {condition}. Error: {e}",
            )
            return False

    def _log(self, run: _RunRecorder, level: LogLevel, message: str) -> None:
        run.logs.append(AutomationLog(timestamp=_utc_now(), level=level, message=message))
        logger.log(
            _PY_LEVELS[level],
            message,
            extra={"automation_id": run.automation_id, "run_id": run.id},
        )
        try:
            self._context.workspace.add_log(f"[Auto:{run.automation_id}] {message}")
        except Exception:
            logger.exception("Host log sink failed", extra={"run_id": run.id})

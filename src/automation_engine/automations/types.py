from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from automation_engine.context import CommandContext


@dataclass(frozen=True, slots=True)
class AutomationStep:
    """One unit of a declarative automation.

    ``condition`` is an expression over ``steps`` (outcomes of earlier steps, by
    step id) and ``context``. A step whose condition is false is skipped.
    """

    id: str
    command_id: str
    args: dict[str, Any] = field(default_factory=dict)
    condition: str | None = None


@dataclass(frozen=True, slots=True)
class CodeAutomation:
    id: str
    name: str
    execute: Callable[[CommandContext, str], Awaitable[Any]]
    description: str = ""
    tags: tuple[str, ...] = ()
    # Metadata only; nothing in the engine drives a clock.
    schedule: str | None = None

    @property
    def kind(self) -> Literal["code"]:
        return "code"


@dataclass(frozen=True, slots=True)
class DeclarativeAutomation:
    id: str
    name: str
    steps: tuple[AutomationStep, ...]
    description: str = ""
    tags: tuple[str, ...] = ()
    schedule: str | None = None

    @property
    def kind(self) -> Literal["declarative"]:
        return "declarative"


AutomationDefinition = CodeAutomation | DeclarativeAutomation


class RunStatus(str, Enum):
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self is not RunStatus.RUNNING


class LogLevel(str, Enum):
    INFO = "info"
    WARN = "warn"
    ERROR = "error"


class AutomationLog(BaseModel):
    model_config = ConfigDict(frozen=True)

    timestamp: datetime
    level: LogLevel
    message: str


StepStatus = Literal["completed", "skipped"]


class StepOutcome(BaseModel):
    """Outcome of one declarative step, as seen by later step conditions."""

    model_config = ConfigDict(frozen=True)

    step_id: str
    command_id: str
    status: StepStatus
    result: Any = None


class AutomationRun(BaseModel):
    """Record of one automation invocation.

    Returned by the runner once terminal, and frozen from then on.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    automation_id: str
    start_time: datetime
    end_time: datetime | None = None
    status: RunStatus
    logs: tuple[AutomationLog, ...] = ()
    results: Any = None

    @property
    def succeeded(self) -> bool:
        return self.status is RunStatus.COMPLETED

    def step_outcomes(self) -> list[StepOutcome]:
        """Declarative results parsed back into outcomes; empty for code runs."""

        if not isinstance(self.results, list):
            return []
        return [StepOutcome.model_validate(item) for item in self.results if isinstance(item, dict)]


class AutomationSummary(BaseModel):
    """Listing shape of a definition (no callables)."""

    id: str
    name: str
    description: str
    kind: Literal["code", "declarative"]
    tags: list[str] = Field(default_factory=list)
    schedule: str | None = None
    steps: list[dict[str, Any]] = Field(default_factory=list)

    @staticmethod
    def of(definition: AutomationDefinition) -> AutomationSummary:
        steps: list[dict[str, Any]] = []
        if isinstance(definition, DeclarativeAutomation):
            steps = [
                {
                    "id": s.id,
                    "command_id": s.command_id,
                    "args": dict(s.args),
                    "condition": s.condition,
                }
                for s in definition.steps
            ]
        return AutomationSummary(
            id=definition.id,
            name=definition.name,
            description=definition.description,
            kind=definition.kind,
            tags=list(definition.tags),
            schedule=definition.schedule,
            steps=steps,
        )

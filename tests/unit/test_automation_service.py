"""Unit tests for the host automation service and its run history."""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime

import pytest

from automation_engine.automations.registry import AutomationRegistry
from automation_engine.automations.types import (
    AutomationRun,
    AutomationStep,
    DeclarativeAutomation,
    RunStatus,
)
from automation_engine.commands.registry import CommandRegistry
from automation_engine.context import CommandContext
from automation_engine.errors import AutomationNotFound
from automation_engine.host import Engine
from automation_engine.host.service import AutomationService, RunHistory


def _run(run_id: str, automation_id: str = "a") -> AutomationRun:
    now = datetime.now(tz=UTC)
    return AutomationRun(
        id=run_id,
        automation_id=automation_id,
        start_time=now,
        end_time=now,
        status=RunStatus.COMPLETED,
    )


def test_history_is_newest_first_and_bounded() -> None:
    history = RunHistory(limit=2)
    for run_id in ("r1", "r2", "r3"):
        history.add(_run(run_id))

    assert [r.id for r in history.list()] == ["r3", "r2"]
    assert history.get("r1") is None
    assert history.get("r2").id == "r2"
    assert len(history) == 2


def test_history_filters_by_automation() -> None:
    history = RunHistory()
    history.add(_run("r1", "x"))
    history.add(_run("r2", "y"))

    assert [r.id for r in history.list("x")] == ["r1"]

    history.clear()
    assert history.list() == []


def test_history_limit_must_be_positive() -> None:
    with pytest.raises(ValueError):
        RunHistory(limit=0)


def test_unbound_service_refuses_to_run(
    commands: CommandRegistry, automations: AutomationRegistry
) -> None:
    service = AutomationService(commands, automations)

    with pytest.raises(RuntimeError):
        asyncio.run(service.run_automation("anything"))


def test_service_records_runs(
    commands: CommandRegistry, automations: AutomationRegistry, context: CommandContext
) -> None:
    service = AutomationService(commands, automations, history_limit=10)
    service.bind(context)
    service.register(
        DeclarativeAutomation(
            id="echo-twice",
            name="Echo twice",
            steps=(
                AutomationStep(id="a", command_id="echo", args={"value": 1}),
                AutomationStep(id="b", command_id="echo", args={"value": 2}),
            ),
        )
    )

    first = asyncio.run(service.run_automation("echo-twice"))
    second = asyncio.run(service.run_automation("echo-twice"))

    assert [r.id for r in service.runs] == [second.id, first.id]
    assert service.history.get(first.id) == first

    with pytest.raises(AutomationNotFound):
        asyncio.run(service.run_automation("missing"))
    assert len(service.runs) == 2

    service.unregister("echo-twice")
    assert service.registry.get("echo-twice") is None


def test_declarative_step_can_trigger_another_automation(engine: Engine) -> None:
    engine.automations.register(
        DeclarativeAutomation(
            id="inner",
            name="Inner",
            steps=(AutomationStep(id="agents", command_id="list_agents"),),
        )
    )
    engine.automations.register(
        DeclarativeAutomation(
            id="outer",
            name="Outer",
            steps=(
                AutomationStep(id="call", command_id="run_automation", args={"id": "inner"}),
                AutomationStep(
                    id="after",
                    command_id="list_agents",
                    condition="steps.call.result.status === 'completed'",
                ),
            ),
        )
    )

    outer = asyncio.run(engine.automations.run_automation("outer"))

    assert outer.status == RunStatus.COMPLETED
    assert [o.status for o in outer.step_outcomes()] == ["completed", "completed"]
    # Both runs land in history; the outer one finishes last.
    assert [r.automation_id for r in engine.automations.runs] == ["outer", "inner"]
    assert outer.results[0]["result"]["runId"] == engine.automations.runs[1].id

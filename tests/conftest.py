"""Test configuration and fixtures."""

from __future__ import annotations

from typing import Any

import pytest

from automation_engine.automations.registry import AutomationRegistry
from automation_engine.commands.registry import CommandRegistry
from automation_engine.commands.types import ArgType, CommandDefinition, arg
from automation_engine.config import EngineSettings
from automation_engine.context import CommandContext
from automation_engine.host import Engine, build_engine
from automation_engine.host.memory import InMemoryWorkspace


@pytest.fixture
def settings(monkeypatch: pytest.MonkeyPatch) -> EngineSettings:
    """Provide settings isolated from the developer's environment and .env file."""
    for name in (
        "LOG_LEVEL",
        "AUTOMATION_LOG_JSON",
        "AUTOMATION_DEFAULT_USER",
        "AUTOMATION_DEFAULT_ROLE",
        "AUTOMATION_RUN_HISTORY_LIMIT",
        "AUTOMATION_CORS_ORIGINS",
    ):
        monkeypatch.delenv(name, raising=False)
    return EngineSettings(_env_file=None)


@pytest.fixture
def engine(settings: EngineSettings) -> Engine:
    """Provide a fully wired in-memory engine with builtin commands."""
    return build_engine(settings)


@pytest.fixture
def context(engine: Engine) -> CommandContext:
    return engine.context


@pytest.fixture
def workspace(engine: Engine) -> InMemoryWorkspace:
    return engine.workspace


@pytest.fixture
def seeded_workspace(workspace: InMemoryWorkspace) -> InMemoryWorkspace:
    """Workspace with three active agents and no channels."""
    workspace.set_agents(
        [
            {"id": "a1", "name": "Alice", "role": "researcher", "status": "active"},
            {"id": "a2", "name": "Bob", "role": "builder", "status": "active"},
            {"id": "a3", "name": "Carol", "role": "curator", "status": "active"},
        ]
    )
    return workspace


@pytest.fixture
def calls() -> list[tuple[str, dict[str, Any]]]:
    """Records (command_id, args) for every invocation of the test commands."""
    return []


@pytest.fixture
def commands(calls: list[tuple[str, dict[str, Any]]]) -> CommandRegistry:
    """A registry of small test commands: echo, fail and greet."""

    async def echo(args: dict[str, Any], _context: CommandContext) -> Any:
        calls.append(("echo", dict(args)))
        return args["value"]

    async def fail(args: dict[str, Any], _context: CommandContext) -> Any:
        calls.append(("fail", dict(args)))
        raise RuntimeError(args.get("message") or "command exploded")

    async def greet(args: dict[str, Any], _context: CommandContext) -> str:
        calls.append(("greet", dict(args)))
        return f"{args['greeting']}, {args['name']}"

    registry = CommandRegistry()
    registry.register_all(
        [
            CommandDefinition(
                id="echo",
                description="Return the value argument",
                args=dict([arg("value", ArgType.OBJECT, "Anything")]),
                execute=echo,
            ),
            CommandDefinition(
                id="fail",
                description="Always raises",
                args=dict([arg("message", ArgType.STRING, required=False)]),
                execute=fail,
            ),
            CommandDefinition(
                id="greet",
                description="Build a greeting",
                rbac=("orchestrator",),
                args=dict(
                    [
                        arg("name", ArgType.STRING),
                        arg("greeting", ArgType.STRING, required=False, default="Hello"),
                    ]
                ),
                execute=greet,
            ),
        ]
    )
    return registry


@pytest.fixture
def automations() -> AutomationRegistry:
    return AutomationRegistry()

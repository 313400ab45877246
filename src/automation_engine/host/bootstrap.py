"""Wires registries, in-memory state and the execution context into an engine."""

from __future__ import annotations

from dataclasses import dataclass

from automation_engine.automations.definitions import build_health_check
from automation_engine.automations.registry import AutomationRegistry
from automation_engine.commands.definitions import register_builtin_commands
from automation_engine.commands.registry import CommandRegistry
from automation_engine.config import EngineSettings
from automation_engine.context import AuthCapability, CommandContext, User
from automation_engine.host.dispatch import CommandDispatcher
from automation_engine.host.memory import (
    InMemoryArchitect,
    InMemoryEcosystem,
    InMemoryJobs,
    InMemorySystem,
    InMemoryWorkspace,
    InMemoryWorkspaceManager,
)
from automation_engine.host.service import AutomationService


@dataclass(frozen=True, slots=True)
class Engine:
    settings: EngineSettings
    commands: CommandRegistry
    automations: AutomationService
    dispatcher: CommandDispatcher
    context: CommandContext
    workspace: InMemoryWorkspace
    jobs: InMemoryJobs
    ecosystem: InMemoryEcosystem
    system: InMemorySystem


def build_engine(settings: EngineSettings | None = None) -> Engine:
    settings = settings or EngineSettings()

    commands = register_builtin_commands(CommandRegistry())
    automation_registry = AutomationRegistry()
    automation_registry.register(build_health_check(commands))
    service = AutomationService(
        commands, automation_registry, history_limit=settings.run_history_limit
    )

    workspace = InMemoryWorkspace()
    jobs = InMemoryJobs()
    ecosystem = InMemoryEcosystem()
    system = InMemorySystem()
    context = CommandContext(
        workspace=workspace,
        jobs=jobs,
        ecosystem=ecosystem,
        auth=AuthCapability(user=User(id=settings.default_user, role=settings.default_role)),
        system=system,
        architect=InMemoryArchitect(workspace=workspace),
        automations=service,
        workspace_manager=InMemoryWorkspaceManager(workspace=workspace),
    )
    service.bind(context)

    return Engine(
        settings=settings,
        commands=commands,
        automations=service,
        dispatcher=CommandDispatcher(commands, context),
        context=context,
        workspace=workspace,
        jobs=jobs,
        ecosystem=ecosystem,
        system=system,
    )

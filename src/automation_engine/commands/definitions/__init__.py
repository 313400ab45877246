"""Builtin command definitions.

Each module exposes its definitions as module-level constants plus a
``COMMANDS`` tuple; :func:`register_builtin_commands` registers all of them.
"""

from __future__ import annotations

from automation_engine.commands.definitions import (
    agent,
    architect,
    artifact,
    automation,
    channel,
    data,
    ecosystem,
    group,
    jobs,
    maintenance,
    messaging,
    query,
    system,
    topology,
    workspace,
)
from automation_engine.commands.registry import CommandRegistry
from automation_engine.commands.types import CommandDefinition

BUILTIN_COMMANDS: tuple[CommandDefinition, ...] = (
    *agent.COMMANDS,
    *channel.COMMANDS,
    *group.COMMANDS,
    *messaging.COMMANDS,
    *query.COMMANDS,
    *maintenance.COMMANDS,
    *jobs.COMMANDS,
    *artifact.COMMANDS,
    *ecosystem.COMMANDS,
    *data.COMMANDS,
    *topology.COMMANDS,
    *system.COMMANDS,
    *architect.COMMANDS,
    *workspace.COMMANDS,
    *automation.COMMANDS,
)

__all__ = ["BUILTIN_COMMANDS", "register_builtin_commands"]


def register_builtin_commands(registry: CommandRegistry) -> CommandRegistry:
    registry.register_all(BUILTIN_COMMANDS)
    return registry

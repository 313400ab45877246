from __future__ import annotations

from typing import Any

from automation_engine.commands.definitions.common import EVERYONE
from automation_engine.commands.types import ArgType, CommandDefinition, arg
from automation_engine.context import CommandContext


async def _list_agents(args: dict[str, Any], context: CommandContext) -> dict[str, Any]:
    return {"agents": list(context.workspace.agents)}


async def _list_groups(args: dict[str, Any], context: CommandContext) -> dict[str, Any]:
    return {"groups": list(context.workspace.groups)}


async def _list_channels(args: dict[str, Any], context: CommandContext) -> dict[str, Any]:
    return {"channels": list(context.workspace.channels)}


async def _list_messages(args: dict[str, Any], context: CommandContext) -> dict[str, Any]:
    limit = int(args.get("limit") or 50)
    messages = context.workspace.messages
    return {"messages": list(messages[-limit:]) if limit > 0 else []}


def _listing(id: str, description: str, tag: str, key: str, execute: Any) -> CommandDefinition:
    return CommandDefinition(
        id=id,
        description=description,
        tags=("query", tag),
        rbac=EVERYONE,
        output=f"List of {key}.",
        output_schema={"type": "object", "properties": {key: {"type": "array"}}},
        execute=execute,
    )


list_agents = _listing("list_agents", "List all active agents in the workspace.", "agent", "agents", _list_agents)
list_groups = _listing("list_groups", "List all agent groups.", "group", "groups", _list_groups)
list_channels = _listing(
    "list_channels", "List all communication channels.", "channel", "channels", _list_channels
)

list_messages = CommandDefinition(
    id="list_messages",
    description="List recent messages.",
    tags=("query", "message"),
    rbac=EVERYONE,
    args=dict(
        [
            arg(
                "limit",
                ArgType.NUMBER,
                "Max messages to return",
                required=False,
                default=50,
            )
        ]
    ),
    output="List of recent messages.",
    output_schema={"type": "object", "properties": {"messages": {"type": "array"}}},
    execute=_list_messages,
)

COMMANDS: tuple[CommandDefinition, ...] = (list_agents, list_groups, list_channels, list_messages)

from __future__ import annotations

from typing import Any

from automation_engine.commands.types import ArgType, CommandDefinition, arg
from automation_engine.context import CommandContext

BULK_TYPES: tuple[str, ...] = ("agents", "channels", "groups", "messages")


async def _reset_workspace(args: dict[str, Any], context: CommandContext) -> str:
    workspace = context.workspace
    workspace.set_agents([])
    workspace.set_channels([])
    workspace.set_groups([])
    workspace.set_messages([])
    context.jobs.clear_jobs()
    workspace.add_log("Workspace completely reset via command")
    return "Workspace reset"


async def _bulk_delete(args: dict[str, Any], context: CommandContext) -> str:
    kind = args["type"]
    ids = {str(i) for i in args["ids"]}
    workspace = context.workspace

    if kind == "agents":
        workspace.set_agents([a for a in workspace.agents if a["id"] not in ids])
        # Anything that points at a removed agent goes with it.
        workspace.set_channels(
            [c for c in workspace.channels if c.get("from") not in ids and c.get("to") not in ids]
        )
        workspace.set_groups(
            [
                {**g, "members": [m for m in g.get("members", []) if m not in ids]}
                for g in workspace.groups
            ]
        )
        workspace.set_messages(
            [
                m
                for m in workspace.messages
                if m.get("fromId") not in ids and m.get("toId") not in ids
            ]
        )
    elif kind == "channels":
        workspace.set_channels([c for c in workspace.channels if c["id"] not in ids])
        workspace.set_messages([m for m in workspace.messages if m.get("channelId") not in ids])
    elif kind == "groups":
        workspace.set_groups([g for g in workspace.groups if g["id"] not in ids])
    elif kind == "messages":
        workspace.set_messages([m for m in workspace.messages if m["id"] not in ids])
    else:
        raise ValueError(f"Unknown type: {kind}")

    workspace.add_log(f"Bulk deleted {len(ids)} {kind}")
    return f"Deleted {len(ids)} {kind}"


reset_workspace = CommandDefinition(
    id="reset_workspace",
    description="Clears all agents, channels, groups, and messages from the workspace.",
    tags=("maintenance", "system", "danger"),
    rbac=("orchestrator",),
    output="Confirmation message",
    execute=_reset_workspace,
)

bulk_delete = CommandDefinition(
    id="bulk_delete",
    description="Deletes multiple items of a specific type by ID.",
    tags=("maintenance", "modification"),
    rbac=("orchestrator",),
    args=dict(
        [
            arg(
                "type",
                ArgType.STRING,
                "agents | channels | groups | messages",
                validation=lambda v: v in BULK_TYPES or f"Unknown type: {v}",
            ),
            arg("ids", ArgType.ARRAY, "List of IDs to delete"),
        ]
    ),
    output="Confirmation",
    execute=_bulk_delete,
)

COMMANDS: tuple[CommandDefinition, ...] = (reset_workspace, bulk_delete)

from __future__ import annotations

import random
from typing import Any

from automation_engine.commands.definitions.common import (
    find_channel_between,
    new_id,
    ref_id,
    require_agent,
    utc_now_iso,
)
from automation_engine.commands.types import ArgType, CommandDefinition, arg
from automation_engine.context import CommandContext

CHANNEL_TYPES: tuple[str, ...] = ("data", "task", "consensus")


async def _create_channel(args: dict[str, Any], context: CommandContext) -> dict[str, Any]:
    workspace = context.workspace
    from_agent = require_agent(workspace.agents, args["from"])
    to_agent = require_agent(workspace.agents, args["to"])
    if from_agent["id"] == to_agent["id"]:
        raise ValueError("Cannot create channel to self")

    if find_channel_between(workspace.channels, from_agent["id"], to_agent["id"]) is not None:
        workspace.add_log(
            f"Channel between {from_agent['name']} and {to_agent['name']} already exists"
        )
        return {"status": "exists", "message": "Channel already exists"}

    channel: dict[str, Any] = {
        "id": new_id(),
        "from": from_agent["id"],
        "to": to_agent["id"],
        "type": args.get("type") or "data",
        "offset": random.random() * 100,
        "createdAt": utc_now_iso(),
    }
    network_id = (
        args.get("networkId")
        or context.ecosystem.active_network_id
        or from_agent.get("networkId")
    )
    if network_id:
        channel["networkId"] = network_id

    workspace.set_channels([*workspace.channels, channel])
    workspace.add_log(f"Channel created: {from_agent['name']} <-> {to_agent['name']}")
    return {"status": "created", "channelId": channel["id"]}


async def _delete_channel(args: dict[str, Any], context: CommandContext) -> dict[str, bool]:
    context.workspace.remove_channel(ref_id(args["id"]))
    return {"success": True}


async def _edit_channel(args: dict[str, Any], context: CommandContext) -> dict[str, Any]:
    workspace = context.workspace
    channel_id = ref_id(args["id"])
    if not any(c["id"] == channel_id for c in workspace.channels):
        raise LookupError(f"Channel '{channel_id}' not found")
    workspace.set_channels(
        [{**c, "type": args["type"]} if c["id"] == channel_id else c for c in workspace.channels]
    )
    workspace.add_log(f"Channel {channel_id} changed to {args['type']}")
    return {"success": True, "channelId": channel_id}


create_channel = CommandDefinition(
    id="create_channel",
    description="Creates a communication channel between two agents",
    tags=("infrastructure", "channel"),
    rbac=("orchestrator", "builder"),
    args=dict(
        [
            arg("from", ArgType.STRING, "ID or Name of first agent"),
            arg("to", ArgType.STRING, "ID or Name of second agent"),
            arg(
                "type",
                ArgType.STRING,
                "Type of channel (data, task, consensus)",
                required=False,
                default="data",
            ),
            arg(
                "networkId",
                ArgType.STRING,
                "ID of the network this channel belongs to",
                required=False,
            ),
        ]
    ),
    output="JSON object containing the created channel details.",
    output_schema={
        "type": "object",
        "properties": {"status": {"type": "string"}, "channelId": {"type": "string"}},
    },
    execute=_create_channel,
)

delete_channel = CommandDefinition(
    id="delete_channel",
    description="Remove a communication channel.",
    tags=("modification", "channel", "delete"),
    rbac=("orchestrator", "curator"),
    args=dict([arg("id", ArgType.CHANNEL, "Channel ID")]),
    output="Confirmation of deletion.",
    output_schema={"type": "object", "properties": {"success": {"type": "boolean"}}},
    execute=_delete_channel,
)

edit_channel = CommandDefinition(
    id="edit_channels",
    description="Edit channel properties (e.g. type).",
    tags=("modification", "channel", "edit"),
    rbac=("orchestrator", "builder"),
    args=dict(
        [
            arg("id", ArgType.CHANNEL, "Channel ID"),
            arg(
                "type",
                ArgType.STRING,
                "New channel type",
                validation=lambda v: v in CHANNEL_TYPES or f"Type must be one of {', '.join(CHANNEL_TYPES)}",
            ),
        ]
    ),
    output="Confirmation of the change.",
    execute=_edit_channel,
)

COMMANDS: tuple[CommandDefinition, ...] = (create_channel, delete_channel, edit_channel)

"""Messaging commands.

Messages are recorded in the workspace with status ``sent``. Delivering them to
an agent's model is the host's concern.
"""

from __future__ import annotations

import time
from typing import Any

from automation_engine.commands.definitions.common import (
    find_channel_between,
    new_id,
    ref_id,
    require_agent,
)
from automation_engine.commands.types import ArgType, CommandDefinition, arg
from automation_engine.context import CommandContext


def _message(channel_id: str, from_id: str, to_id: str, content: str) -> dict[str, Any]:
    return {
        "id": new_id(),
        "channelId": channel_id,
        "fromId": from_id,
        "toId": to_id,
        "content": content,
        "response": None,
        "status": "sent",
        "ts": int(time.time() * 1000),
    }


async def _send_message(args: dict[str, Any], context: CommandContext) -> dict[str, Any]:
    workspace = context.workspace
    sender = require_agent(workspace.agents, args["from_agent_name"], label="Sender agent")
    recipient = require_agent(workspace.agents, args["to_agent_name"], label="Recipient agent")

    channel = find_channel_between(workspace.channels, sender["id"], recipient["id"])
    if channel is None:
        raise LookupError(
            f"No channel exists between {args['from_agent_name']} and {args['to_agent_name']}"
        )

    message = _message(channel["id"], sender["id"], recipient["id"], args["message"])
    workspace.set_messages([*workspace.messages, message])
    workspace.add_log(f"{sender['name']} -> {recipient['name']}: message sent via command")
    return {"status": "sent", "messageId": message["id"]}


async def _broadcast_message(args: dict[str, Any], context: CommandContext) -> dict[str, Any]:
    workspace = context.workspace
    group_id = ref_id(args["group_id"])
    group = next((g for g in workspace.groups if g["id"] == group_id), None)
    if group is None:
        raise LookupError("Group not found")
    if len(group["members"]) < 2:
        raise ValueError("Group needs at least 2 members")

    sender_id = ref_id(args["sender_id"]) if args.get("sender_id") else group["members"][0]
    sender = require_agent(workspace.agents, sender_id, label="Sender")

    workspace.add_log(f'Broadcasting to "{group["name"]}"...')
    content = f"[GROUP BROADCAST - {group['name']}] {args['message']}"

    new_messages: list[dict[str, Any]] = []
    for receiver_id in group["members"]:
        if receiver_id == sender["id"]:
            continue
        channel = find_channel_between(workspace.channels, sender["id"], receiver_id)
        if channel is None:
            continue
        new_messages.append(_message(channel["id"], sender["id"], receiver_id, content))

    workspace.set_messages([*workspace.messages, *new_messages])
    workspace.add_log("Broadcast complete")
    return {"success": True, "count": len(new_messages)}


send_message = CommandDefinition(
    id="send_message",
    description="Sends a direct message from one agent to another",
    tags=("messaging", "interaction"),
    rbac=("orchestrator", "user"),
    args=dict(
        [
            arg("from_agent_name", ArgType.STRING, "Name of the sender agent"),
            arg("to_agent_name", ArgType.STRING, "Name of the recipient agent"),
            arg("message", ArgType.STRING, "The content of the message"),
        ]
    ),
    output="Status and id of the recorded message.",
    execute=_send_message,
)

broadcast_message = CommandDefinition(
    id="broadcast_message",
    description="Sends a message to all members of a group.",
    tags=("messaging", "interaction", "group"),
    rbac=("orchestrator",),
    args=dict(
        [
            arg("group_id", ArgType.GROUP, "Group ID"),
            arg("message", ArgType.STRING, "Message Content"),
            arg(
                "sender_id",
                ArgType.AGENT,
                "Sender Agent ID (defaults to the first member)",
                required=False,
            ),
        ]
    ),
    output="Number of messages recorded.",
    execute=_broadcast_message,
)

COMMANDS: tuple[CommandDefinition, ...] = (send_message, broadcast_message)

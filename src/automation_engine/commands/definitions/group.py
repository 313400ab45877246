from __future__ import annotations

import math
import random
import secrets
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

GOVERNANCE_MODELS: tuple[str, ...] = ("majority", "threshold", "delegated", "unanimous")
GROUP_COLORS: tuple[str, ...] = ("#a78bfa", "#f472b6", "#38bdf8", "#fbbf24", "#34d399", "#fb7185")


async def _create_group(args: dict[str, Any], context: CommandContext) -> dict[str, Any]:
    workspace = context.workspace

    member_ids: list[str] = []
    for ref in args["members"]:
        agent_id = require_agent(workspace.agents, ref)["id"]
        if agent_id not in member_ids:
            member_ids.append(agent_id)
    if len(member_ids) < 2:
        raise ValueError("Group must have at least 2 members")

    network_id = args.get("networkId") or context.ecosystem.active_network_id
    group: dict[str, Any] = {
        "id": new_id(),
        "name": args["name"],
        "governance": args.get("governance") or "majority",
        "members": member_ids,
        "threshold": math.ceil(len(member_ids) / 2),
        "did": f"did:group:z{secrets.token_hex(16)}",
        "color": GROUP_COLORS[len(workspace.groups) % len(GROUP_COLORS)],
        "createdAt": utc_now_iso(),
    }
    if network_id:
        group["networkId"] = network_id

    workspace.set_groups([*workspace.groups, group])
    workspace.add_log(f'Group "{group["name"]}" created via command')

    # Every pair of members gets a consensus channel unless one already exists.
    channels = list(workspace.channels)
    created = 0
    for i, a in enumerate(member_ids):
        for b in member_ids[i + 1 :]:
            if find_channel_between(channels, a, b) is not None:
                continue
            channel: dict[str, Any] = {
                "id": new_id(),
                "from": a,
                "to": b,
                "type": "consensus",
                "offset": random.random() * 100,
                "createdAt": utc_now_iso(),
            }
            if context.ecosystem.active_network_id:
                channel["networkId"] = context.ecosystem.active_network_id
            channels.append(channel)
            created += 1

    if created:
        workspace.set_channels(channels)
        workspace.add_log(f"Created {created} consensus channels for group")

    return {"status": "created", "groupId": group["id"], "channelCount": created}


async def _delete_group(args: dict[str, Any], context: CommandContext) -> dict[str, bool]:
    context.workspace.remove_group(ref_id(args["id"]))
    return {"success": True}


async def _toggle_group_member(args: dict[str, Any], context: CommandContext) -> dict[str, Any]:
    workspace = context.workspace
    group_id = ref_id(args["groupId"])
    agent = require_agent(workspace.agents, args["agentId"])

    group = next((g for g in workspace.groups if g["id"] == group_id), None)
    if group is None:
        raise LookupError(f"Group '{group_id}' not found")

    members = list(group["members"])
    if agent["id"] in members:
        members.remove(agent["id"])
        action = "removed"
    else:
        members.append(agent["id"])
        action = "added"

    updated = {**group, "members": members, "threshold": math.ceil(len(members) / 2)}
    workspace.set_groups([updated if g["id"] == group_id else g for g in workspace.groups])
    workspace.add_log(f"Agent {agent.get('name', agent['id'])} {action} in group {group['name']}")
    return {"success": True, "action": action, "members": members}


create_group = CommandDefinition(
    id="create_group",
    description="Creates a new agent group",
    tags=("infrastructure", "group"),
    rbac=("orchestrator", "builder"),
    args=dict(
        [
            arg("name", ArgType.STRING, "Name of the group"),
            arg("members", ArgType.ARRAY, "List of agent IDs or Names to include"),
            arg(
                "governance",
                ArgType.STRING,
                "Governance model",
                validation=lambda v: v in GOVERNANCE_MODELS or "Invalid governance model",
            ),
            arg(
                "networkId",
                ArgType.STRING,
                "ID of the network this group belongs to",
                required=False,
            ),
        ]
    ),
    output="JSON object containing the created group details.",
    output_schema={
        "type": "object",
        "properties": {
            "status": {"type": "string"},
            "groupId": {"type": "string"},
            "channelCount": {"type": "number"},
        },
    },
    execute=_create_group,
)

delete_group = CommandDefinition(
    id="delete_group",
    description="Dissolve an agent group.",
    tags=("modification", "group", "delete"),
    rbac=("orchestrator", "curator"),
    args=dict([arg("id", ArgType.GROUP, "Group ID")]),
    output="Confirmation of deletion.",
    output_schema={"type": "object", "properties": {"success": {"type": "boolean"}}},
    execute=_delete_group,
)

toggle_group_member = CommandDefinition(
    id="toggle_group_member",
    description="Add an agent to a group, or remove it if already a member.",
    tags=("modification", "group"),
    rbac=("orchestrator", "curator"),
    args=dict(
        [
            arg("groupId", ArgType.GROUP, "Group ID"),
            arg("agentId", ArgType.AGENT, "Agent ID or name"),
        ]
    ),
    output="The resulting member list.",
    execute=_toggle_group_member,
)

COMMANDS: tuple[CommandDefinition, ...] = (create_group, delete_group, toggle_group_member)

from __future__ import annotations

import random
from typing import Any

from automation_engine.commands.definitions.common import new_id, ref_id, utc_now_iso
from automation_engine.commands.types import ArgType, CommandDefinition, arg
from automation_engine.context import CommandContext


async def _create_bridge(args: dict[str, Any], context: CommandContext) -> dict[str, Any]:
    from_agent = ref_id(args["from_agent"])
    to_agent = ref_id(args["to_agent"])
    ecosystem = context.ecosystem

    for bridge in ecosystem.bridges:
        ends = (bridge.get("fromAgentId"), bridge.get("toAgentId"))
        if ends == (from_agent, to_agent) or ends == (to_agent, from_agent):
            raise ValueError("Bridge already exists.")

    bridge = {
        "id": new_id(),
        "fromNetworkId": ref_id(args["from_network"]),
        "toNetworkId": ref_id(args["to_network"]),
        "fromAgentId": from_agent,
        "toAgentId": to_agent,
        "type": args.get("type") or "data",
        "offset": random.random() * 100,
        "createdAt": utc_now_iso(),
    }
    ecosystem.set_bridges([*ecosystem.bridges, bridge])
    context.workspace.add_log("Bridge created successfully.")
    return {"success": True, "bridge": bridge}


async def _delete_bridge(args: dict[str, Any], context: CommandContext) -> dict[str, bool]:
    ecosystem = context.ecosystem
    ecosystem.set_bridges([b for b in ecosystem.bridges if b.get("id") != args["id"]])
    context.workspace.add_log("Bridge dissolved")
    return {"success": True}


async def _print_topology(args: dict[str, Any], context: CommandContext) -> dict[str, Any]:
    workspace = context.workspace
    return {
        "agents": [{"id": a["id"], "name": a.get("name"), "role": a.get("role")} for a in workspace.agents],
        "channels": [
            {"from": c.get("from"), "to": c.get("to"), "type": c.get("type")} for c in workspace.channels
        ],
        "groups": [{"name": g.get("name"), "members": list(g.get("members", []))} for g in workspace.groups],
        "ecosystems": [{"id": e["id"], "name": e.get("name")} for e in context.ecosystem.ecosystems],
        "bridges": list(context.ecosystem.bridges),
    }


create_bridge = CommandDefinition(
    id="create_bridge",
    description="Create a bridge between two agents in different networks.",
    tags=("topology", "bridge", "create"),
    rbac=("orchestrator", "builder"),
    args=dict(
        [
            arg("from_network", ArgType.NETWORK, "Source Network ID"),
            arg("to_network", ArgType.NETWORK, "Target Network ID"),
            arg("from_agent", ArgType.AGENT, "Source Agent ID"),
            arg("to_agent", ArgType.AGENT, "Target Agent ID"),
            arg("type", ArgType.STRING, "Type: data, task, consensus", required=False, default="data"),
        ]
    ),
    output="Details of the created bridge.",
    output_schema={
        "type": "object",
        "properties": {"success": {"type": "boolean"}, "bridge": {"type": "object"}},
    },
    execute=_create_bridge,
)

delete_bridge = CommandDefinition(
    id="delete_bridge",
    description="Remove a bridge connection.",
    tags=("topology", "bridge", "delete"),
    rbac=("orchestrator",),
    args=dict([arg("id", ArgType.STRING, "Bridge ID")]),
    output="Confirmation of deletion.",
    output_schema={"type": "object", "properties": {"success": {"type": "boolean"}}},
    execute=_delete_bridge,
)

print_topology = CommandDefinition(
    id="print_topology",
    description="Output the current network topology (agents, channels, bridges) as JSON.",
    tags=("topology", "query"),
    rbac=("researcher", "builder", "orchestrator", "curator"),
    output="JSON representation of the entire network topology.",
    output_schema={
        "type": "object",
        "properties": {
            "agents": {"type": "array"},
            "channels": {"type": "array"},
            "groups": {"type": "array"},
            "ecosystems": {"type": "array"},
            "bridges": {"type": "array"},
        },
    },
    execute=_print_topology,
)

COMMANDS: tuple[CommandDefinition, ...] = (create_bridge, delete_bridge, print_topology)

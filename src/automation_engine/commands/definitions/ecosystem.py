"""Saved networks ("ecosystems"): snapshots of the workspace that can be reloaded."""

from __future__ import annotations

from typing import Any

from automation_engine.commands.definitions.common import EVERYONE, new_id, ref_id, utc_now_iso
from automation_engine.commands.types import ArgType, CommandDefinition, arg
from automation_engine.context import CommandContext

DEFAULT_NETWORK_COLOR = "#00e5a0"


async def _save_ecosystem(args: dict[str, Any], context: CommandContext) -> dict[str, Any]:
    workspace = context.workspace
    network = {
        "id": new_id(),
        "name": args["name"],
        "did": f"did:decops:net:{new_id()}",
        "color": DEFAULT_NETWORK_COLOR,
        "agents": list(workspace.agents),
        "channels": list(workspace.channels),
        "groups": list(workspace.groups),
        "messages": list(workspace.messages),
        "createdAt": utc_now_iso(),
    }
    context.ecosystem.set_ecosystems([*context.ecosystem.ecosystems, network])
    workspace.add_log(f'Ecosystem "{args["name"]}" saved.')
    return {"success": True, "network": network}


async def _load_ecosystem(args: dict[str, Any], context: CommandContext) -> dict[str, bool]:
    network_id = ref_id(args["id"])
    network = next((n for n in context.ecosystem.ecosystems if n["id"] == network_id), None)
    if network is None:
        raise LookupError("Ecosystem not found")

    workspace = context.workspace
    workspace.set_agents(list(network.get("agents", [])))
    workspace.set_channels(list(network.get("channels", [])))
    workspace.set_groups(list(network.get("groups", [])))
    workspace.set_messages(list(network.get("messages", [])))
    workspace.add_log(f'Loaded network "{network["name"]}" into workspace')
    return {"success": True}


async def _list_ecosystems(args: dict[str, Any], context: CommandContext) -> dict[str, Any]:
    return {
        "ecosystems": [
            {"id": n["id"], "name": n["name"], "agentCount": len(n.get("agents", []))}
            for n in context.ecosystem.ecosystems
        ]
    }


async def _delete_ecosystem(args: dict[str, Any], context: CommandContext) -> dict[str, bool]:
    network_id = ref_id(args["id"])
    ecosystem = context.ecosystem
    ecosystem.set_ecosystems([n for n in ecosystem.ecosystems if n["id"] != network_id])
    ecosystem.set_bridges(
        [
            b
            for b in ecosystem.bridges
            if b.get("fromNetworkId") != network_id and b.get("toNetworkId") != network_id
        ]
    )
    context.workspace.add_log("Network dissolved from ecosystem")
    return {"success": True}


save_ecosystem = CommandDefinition(
    id="save_ecosystem",
    description="Save the current agent, channel, and group configuration as a named ecosystem.",
    tags=("ecosystem", "save"),
    rbac=("orchestrator", "curator"),
    args=dict([arg("name", ArgType.STRING, "Name for the saved ecosystem")]),
    output="JSON object of the saved network configuration.",
    output_schema={
        "type": "object",
        "properties": {"success": {"type": "boolean"}, "network": {"type": "object"}},
    },
    execute=_save_ecosystem,
)

load_ecosystem = CommandDefinition(
    id="load_ecosystem",
    description="Load an ecosystem configuration into the active workspace.",
    tags=("ecosystem", "load"),
    rbac=("orchestrator", "curator"),
    args=dict([arg("id", ArgType.NETWORK, "ID of the ecosystem to load")]),
    output="Confirmation of load operation.",
    output_schema={"type": "object", "properties": {"success": {"type": "boolean"}}},
    execute=_load_ecosystem,
)

list_ecosystems = CommandDefinition(
    id="list_ecosystems",
    description="List all saved ecosystems.",
    tags=("ecosystem", "query"),
    rbac=EVERYONE,
    output="List of all saved ecosystems.",
    output_schema={
        "type": "object",
        "properties": {"ecosystems": {"type": "array", "items": {"type": "object"}}},
    },
    execute=_list_ecosystems,
)

delete_ecosystem = CommandDefinition(
    id="delete_ecosystem",
    description="Delete a saved ecosystem.",
    tags=("ecosystem", "delete"),
    rbac=("orchestrator",),
    args=dict([arg("id", ArgType.NETWORK, "ID of the ecosystem to delete")]),
    output="Confirmation of deletion.",
    output_schema={"type": "object", "properties": {"success": {"type": "boolean"}}},
    execute=_delete_ecosystem,
)

COMMANDS: tuple[CommandDefinition, ...] = (
    save_ecosystem,
    load_ecosystem,
    list_ecosystems,
    delete_ecosystem,
)

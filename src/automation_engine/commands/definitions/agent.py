from __future__ import annotations

import hashlib
import secrets
from typing import Any

from automation_engine.commands.definitions.common import (
    ROLES,
    new_id,
    require_agent,
    utc_now_iso,
)
from automation_engine.commands.types import ArgType, CommandDefinition, arg
from automation_engine.context import CommandContext


def _generate_did() -> str:
    return f"did:key:z{secrets.token_hex(16)}"


def _generate_key_pair() -> dict[str, str]:
    private = secrets.token_hex(32)
    public = hashlib.sha256(private.encode("ascii")).hexdigest()
    return {"publicKey": public, "privateKey": private}


async def _create_agent(args: dict[str, Any], context: CommandContext) -> dict[str, Any]:
    workspace = context.workspace
    agent = {
        "id": new_id(),
        "name": args["name"],
        "role": args["role"],
        "prompt": args.get("prompt") or "",
        "did": _generate_did(),
        "keys": _generate_key_pair(),
        "createdAt": utc_now_iso(),
        "status": "active",
    }
    if context.ecosystem.active_network_id:
        agent["networkId"] = context.ecosystem.active_network_id

    workspace.set_agents([*workspace.agents, agent])
    workspace.add_log(f"Created agent: {agent['name']} ({agent['role']})")
    return {"agentId": agent["id"], "did": agent["did"]}


async def _ping_agent(args: dict[str, Any], context: CommandContext) -> dict[str, Any]:
    agent = require_agent(context.workspace.agents, args["agentId"])
    if agent.get("status", "active") != "active":
        raise RuntimeError(f"Agent '{agent.get('name', agent['id'])}' is not responding")
    return {"agentId": agent["id"], "status": "online"}


async def _delete_agent(args: dict[str, Any], context: CommandContext) -> dict[str, bool]:
    context.workspace.remove_agent(args["id"])
    return {"success": True}


async def _update_agent_prompt(args: dict[str, Any], context: CommandContext) -> dict[str, Any]:
    workspace = context.workspace
    agent = require_agent(workspace.agents, args["id"])
    workspace.set_agents(
        [{**a, "prompt": args["prompt"]} if a["id"] == agent["id"] else a for a in workspace.agents]
    )
    workspace.add_log(f"Updated prompt for agent: {agent.get('name', agent['id'])}")
    return {"success": True, "agentId": agent["id"]}


create_agent = CommandDefinition(
    id="create_agent",
    description="Creates a new AI agent in the workspace",
    tags=("agent", "workspace"),
    rbac=("orchestrator", "builder"),
    args=dict(
        [
            arg(
                "name",
                ArgType.STRING,
                "The name of the agent",
                validation=lambda v: len(v) >= 3 or "Name must be at least 3 characters",
            ),
            arg(
                "role",
                ArgType.STRING,
                "The role of the agent (researcher, builder, etc.)",
                validation=lambda v: v in ROLES or "Invalid role",
            ),
            arg(
                "prompt",
                ArgType.STRING,
                "Getting started prompt for the agent",
                required=False,
                default="",
            ),
        ]
    ),
    output="The id and DID of the created agent.",
    output_schema={
        "type": "object",
        "properties": {"agentId": {"type": "string"}, "did": {"type": "string"}},
    },
    execute=_create_agent,
)

ping_agent = CommandDefinition(
    id="ping_agent",
    description="Checks that an agent exists and is responsive",
    tags=("agent", "health"),
    rbac=("orchestrator", "validator"),
    args=dict([arg("agentId", ArgType.AGENT, "ID or name of the agent to ping")]),
    output="Online status of the agent.",
    execute=_ping_agent,
)

delete_agent = CommandDefinition(
    id="delete_agent",
    description="Remove an agent from the workspace.",
    tags=("modification", "agent", "delete"),
    rbac=("orchestrator", "curator"),
    args=dict([arg("id", ArgType.STRING, "Agent ID")]),
    output="Confirmation of deletion.",
    output_schema={"type": "object", "properties": {"success": {"type": "boolean"}}},
    execute=_delete_agent,
)

update_agent_prompt = CommandDefinition(
    id="update_agent_prompt",
    description="Replace the system prompt of an agent.",
    tags=("modification", "agent"),
    rbac=("orchestrator", "curator", "builder"),
    args=dict(
        [
            arg("id", ArgType.AGENT, "Agent ID or name"),
            arg("prompt", ArgType.STRING, "New prompt"),
        ]
    ),
    output="Confirmation of the update.",
    execute=_update_agent_prompt,
)

COMMANDS: tuple[CommandDefinition, ...] = (create_agent, ping_agent, delete_agent, update_agent_prompt)

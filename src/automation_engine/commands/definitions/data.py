"""Read-only JSON exports of workspace and ecosystem state."""

from __future__ import annotations

from typing import Any

from automation_engine.commands.definitions.common import EVERYONE, utc_now_iso
from automation_engine.commands.types import ArgType, CommandDefinition, arg
from automation_engine.context import CommandContext, Record

EXPORT_VERSION = "1.0"

ENTITY_TYPES: tuple[str, ...] = ("agent", "channel", "group", "message", "ecosystem", "bridge")


def _export(kind: str, data: dict[str, Any]) -> dict[str, Any]:
    return {"version": EXPORT_VERSION, "type": kind, "exportedAt": utc_now_iso(), "data": data}


def _workspace_data(context: CommandContext) -> dict[str, list[Record]]:
    workspace = context.workspace
    return {
        "agents": list(workspace.agents),
        "channels": list(workspace.channels),
        "groups": list(workspace.groups),
        "messages": list(workspace.messages),
    }


def _ecosystem_data(context: CommandContext) -> dict[str, list[Record]]:
    return {
        "ecosystems": list(context.ecosystem.ecosystems),
        "bridges": list(context.ecosystem.bridges),
    }


async def _export_full_backup(args: dict[str, Any], context: CommandContext) -> dict[str, Any]:
    return _export(
        "full-backup",
        {"workspace": _workspace_data(context), "ecosystem": _ecosystem_data(context)},
    )


async def _export_workspace(args: dict[str, Any], context: CommandContext) -> dict[str, Any]:
    return _export("workspace", _workspace_data(context))


async def _export_ecosystem(args: dict[str, Any], context: CommandContext) -> dict[str, Any]:
    return _export("ecosystem", _ecosystem_data(context))


async def _export_data(args: dict[str, Any], context: CommandContext) -> Record:
    kind, entity_id = args["type"], args["id"]
    sources = {
        "agent": context.workspace.agents,
        "channel": context.workspace.channels,
        "group": context.workspace.groups,
        "message": context.workspace.messages,
        "ecosystem": context.ecosystem.ecosystems,
        "bridge": context.ecosystem.bridges,
    }
    if kind not in sources:
        raise ValueError(f"Unknown entity type: {kind}")

    found = next((item for item in sources[kind] if item.get("id") == entity_id), None)
    if found is None:
        raise LookupError(f"{kind} with ID {entity_id} not found.")
    return found


def _export_schema(kind: str) -> dict[str, Any]:
    return {
        "type": "object",
        "properties": {
            "version": {"type": "string"},
            "type": {"type": "string", "const": kind},
            "data": {"type": "object"},
        },
    }


export_full_backup = CommandDefinition(
    id="export_full_backup",
    description="Export the entire application state (workspace and ecosystem) as a JSON backup.",
    tags=("data", "export", "backup"),
    rbac=("orchestrator",),
    output="A complete JSON backup of the system.",
    output_schema=_export_schema("full-backup"),
    execute=_export_full_backup,
)

export_workspace = CommandDefinition(
    id="export_workspace",
    description="Export the active workspace configuration (agents, channels, groups, messages).",
    tags=("data", "export", "workspace"),
    rbac=("orchestrator", "curator"),
    output="JSON export of the current workspace.",
    output_schema=_export_schema("workspace"),
    execute=_export_workspace,
)

export_ecosystem = CommandDefinition(
    id="export_ecosystem",
    description="Export all saved ecosystems and bridges.",
    tags=("data", "export", "ecosystem"),
    rbac=("orchestrator", "curator"),
    output="JSON export of saved ecosystems.",
    output_schema=_export_schema("ecosystem"),
    execute=_export_ecosystem,
)

export_data = CommandDefinition(
    id="export_data",
    description="Export a specific entity by ID and Type.",
    tags=("data", "export", "query"),
    rbac=EVERYONE,
    args=dict(
        [
            arg("type", ArgType.STRING, f"Type of entity: {', '.join(ENTITY_TYPES)}"),
            arg("id", ArgType.STRING, "ID of the entity to export"),
        ]
    ),
    output="JSON representation of the requested entity.",
    output_schema={"type": "object"},
    execute=_export_data,
)

COMMANDS: tuple[CommandDefinition, ...] = (
    export_full_backup,
    export_workspace,
    export_ecosystem,
    export_data,
)

from __future__ import annotations

from typing import Any

from automation_engine.commands.types import ArgType, CommandDefinition, arg
from automation_engine.context import CommandContext, WorkspaceManagerCapability


def _manager(context: CommandContext) -> WorkspaceManagerCapability:
    if context.workspace_manager is None:
        raise RuntimeError("Workspace Manager not available")
    return context.workspace_manager


async def _list_workspaces(args: dict[str, Any], context: CommandContext) -> dict[str, Any]:
    return {"workspaces": _manager(context).list()}


async def _create_workspace(args: dict[str, Any], context: CommandContext) -> str:
    workspace_id = await _manager(context).create(args["name"], args.get("description"))
    context.workspace.add_log(f"Created workspace: {args['name']}")
    return workspace_id


async def _switch_workspace(args: dict[str, Any], context: CommandContext) -> str:
    await _manager(context).switch(args["id"])
    return f"Switched to workspace {args['id']}"


async def _delete_workspace(args: dict[str, Any], context: CommandContext) -> str:
    await _manager(context).delete(args["id"])
    context.workspace.add_log(f"Deleted workspace: {args['id']}")
    return f"Deleted workspace {args['id']}"


async def _duplicate_workspace(args: dict[str, Any], context: CommandContext) -> str:
    workspace_id = await _manager(context).duplicate(args["sourceId"], args.get("name"))
    context.workspace.add_log(
        f"Duplicated workspace {args['sourceId']} to new workspace {workspace_id}"
    )
    return workspace_id


list_workspaces = CommandDefinition(
    id="list_workspaces",
    description="List all workspaces",
    tags=("workspace", "query"),
    rbac=("orchestrator",),
    output="List of workspaces",
    execute=_list_workspaces,
)

create_workspace = CommandDefinition(
    id="create_workspace",
    description="Create a new workspace",
    tags=("workspace", "system"),
    rbac=("orchestrator",),
    args=dict(
        [
            arg("name", ArgType.STRING, "Name of the new workspace"),
            arg("description", ArgType.STRING, "Description of the workspace", required=False),
        ]
    ),
    output="The ID of the created workspace",
    execute=_create_workspace,
)

switch_workspace = CommandDefinition(
    id="switch_workspace",
    description="Switch to a different workspace",
    tags=("workspace", "system"),
    rbac=("orchestrator",),
    args=dict([arg("id", ArgType.STRING, "ID of the workspace to switch to")]),
    output="Confirmation message",
    execute=_switch_workspace,
)

delete_workspace = CommandDefinition(
    id="delete_workspace",
    description="Delete a workspace",
    tags=("workspace", "system"),
    rbac=("orchestrator",),
    args=dict([arg("id", ArgType.STRING, "ID of the workspace to delete")]),
    output="Confirmation message",
    execute=_delete_workspace,
)

duplicate_workspace = CommandDefinition(
    id="duplicate_workspace",
    description="Duplicate an existing workspace",
    tags=("workspace", "system"),
    rbac=("orchestrator",),
    args=dict(
        [
            arg("sourceId", ArgType.STRING, "ID of the workspace to duplicate"),
            arg("name", ArgType.STRING, "Name for the new workspace (optional)", required=False),
        ]
    ),
    output="The ID of the new workspace",
    execute=_duplicate_workspace,
)

COMMANDS: tuple[CommandDefinition, ...] = (
    list_workspaces,
    create_workspace,
    switch_workspace,
    delete_workspace,
    duplicate_workspace,
)

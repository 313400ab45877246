from __future__ import annotations

import secrets
import time
from typing import Any

from automation_engine.commands.types import ArgType, CommandDefinition, arg
from automation_engine.context import CommandContext

ARTIFACT_TYPES: tuple[str, ...] = ("markdown", "json", "yaml", "code")

_RESULT_SCHEMA = {
    "type": "object",
    "properties": {"success": {"type": "boolean"}, "artifact": {"type": "object"}},
}


async def _create_artifact(args: dict[str, Any], context: CommandContext) -> dict[str, Any]:
    artifact = {
        "id": f"art-{int(time.time() * 1000)}-{secrets.token_hex(3)}",
        "name": args["name"],
        "type": args["type"],
        "content": args["content"],
    }
    context.jobs.import_artifact(artifact)
    context.workspace.add_log(f"Artifact created: {args['name']}")
    return {"success": True, "artifact": artifact}


async def _edit_artifact(args: dict[str, Any], context: CommandContext) -> dict[str, Any]:
    existing = next((a for a in context.jobs.all_artifacts if a.get("id") == args["id"]), None)
    if existing is None:
        raise LookupError(f"Artifact {args['id']} not found.")

    updated = {**existing, "content": args["content"]}
    context.jobs.remove_artifact(args["id"])
    context.jobs.import_artifact(updated)
    context.workspace.add_log(f"Artifact updated: {existing.get('name', args['id'])}")
    return {"success": True, "artifact": updated}


async def _delete_artifact(args: dict[str, Any], context: CommandContext) -> dict[str, bool]:
    context.jobs.remove_artifact(args["id"])
    context.workspace.add_log(f"Artifact deleted: {args['id']}")
    return {"success": True}


create_artifact = CommandDefinition(
    id="create_artifact",
    description="Create a new text-based artifact (Markdown, Code, JSON).",
    tags=("artifact", "content", "create"),
    rbac=("researcher", "builder", "orchestrator"),
    args=dict(
        [
            arg("name", ArgType.STRING, "Name of the artifact (e.g. docs.md)"),
            arg(
                "type",
                ArgType.STRING,
                "Type: markdown, json, yaml, code",
                default="markdown",
                validation=lambda v: v in ARTIFACT_TYPES or f"Unsupported artifact type: {v}",
            ),
            arg("content", ArgType.STRING, "The text content of the artifact"),
        ]
    ),
    output="Details of the created artifact.",
    output_schema=_RESULT_SCHEMA,
    execute=_create_artifact,
)

edit_artifact = CommandDefinition(
    id="edit_artifact",
    description="Edit an existing artifact's content.",
    tags=("artifact", "content", "edit"),
    rbac=("builder", "orchestrator"),
    args=dict(
        [
            arg("id", ArgType.STRING, "ID of the artifact to edit"),
            arg("content", ArgType.STRING, "New content"),
        ]
    ),
    output="Details of the updated artifact.",
    output_schema=_RESULT_SCHEMA,
    execute=_edit_artifact,
)

delete_artifact = CommandDefinition(
    id="delete_artifact",
    description="Permanently remove an artifact.",
    tags=("artifact", "delete"),
    rbac=("orchestrator", "curator"),
    args=dict([arg("id", ArgType.STRING, "ID of the artifact to delete")]),
    output="Confirmation of deletion.",
    output_schema={"type": "object", "properties": {"success": {"type": "boolean"}}},
    execute=_delete_artifact,
)

COMMANDS: tuple[CommandDefinition, ...] = (create_artifact, edit_artifact, delete_artifact)

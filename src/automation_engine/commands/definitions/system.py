from __future__ import annotations

from typing import Any

from automation_engine.commands.types import ArgType, CommandDefinition, arg
from automation_engine.context import CommandContext

DEFAULT_MODEL = "claude-3-5-sonnet-20240620"


async def _set_api_key(args: dict[str, Any], context: CommandContext) -> dict[str, bool]:
    context.system.set_api_key(args["key"])
    context.workspace.add_log("API Key updated successfully.")
    return {"success": True}


async def _select_ai_model(args: dict[str, Any], context: CommandContext) -> dict[str, Any]:
    context.system.set_model(args["model"])
    context.workspace.add_log(f"AI Model switched to: {args['model']}")
    return {"success": True, "model": args["model"]}


set_api_key = CommandDefinition(
    id="set_api_key",
    description="Configure the API key for AI services.",
    tags=("system", "config", "security"),
    rbac=("orchestrator", "curator"),
    args=dict(
        [
            arg(
                "key",
                ArgType.STRING,
                "The API key string (starts with sk-)",
                validation=lambda v: v.startswith("sk-") or "Invalid key format (must start with sk-)",
            )
        ]
    ),
    output="Confirmation of API key update.",
    output_schema={"type": "object", "properties": {"success": {"type": "boolean"}}},
    execute=_set_api_key,
)

select_ai_model = CommandDefinition(
    id="select_ai_model",
    description="Select the AI model used for agent intelligence.",
    tags=("system", "config", "ai"),
    rbac=("orchestrator", "curator"),
    args=dict(
        [arg("model", ArgType.STRING, f"Model ID (e.g., {DEFAULT_MODEL})", default=DEFAULT_MODEL)]
    ),
    output="Confirmation of model selection.",
    output_schema={
        "type": "object",
        "properties": {"success": {"type": "boolean"}, "model": {"type": "string"}},
    },
    execute=_select_ai_model,
)

COMMANDS: tuple[CommandDefinition, ...] = (set_api_key, select_ai_model)

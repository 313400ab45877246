from __future__ import annotations

from typing import Any

from automation_engine.commands.types import ArgType, CommandDefinition, arg
from automation_engine.context import CommandContext


async def _prompt_architect(args: dict[str, Any], context: CommandContext) -> dict[str, Any]:
    context.workspace.add_log(f"Architect triggered with prompt: {args['prompt']}")
    await context.architect.generate_network(args["prompt"])
    return {"success": True, "message": "Architect generation started."}


async def _deploy_network(args: dict[str, Any], context: CommandContext) -> dict[str, Any]:
    result = await context.architect.deploy_network()
    context.workspace.add_log("Architect network deployed.")
    return {"success": True, "result": result}


prompt_architect = CommandDefinition(
    id="prompt_architect",
    description="Generate a new network design using the AI Architect.",
    tags=("architect", "create", "ai"),
    rbac=("builder", "orchestrator"),
    args=dict([arg("prompt", ArgType.STRING, "Description of the network to build")]),
    output="Confirmation that generation has started.",
    output_schema={
        "type": "object",
        "properties": {"success": {"type": "boolean"}, "message": {"type": "string"}},
    },
    execute=_prompt_architect,
)

deploy_network = CommandDefinition(
    id="deploy_network",
    description="Deploy the network most recently generated by the Architect.",
    tags=("architect", "deploy"),
    rbac=("builder", "orchestrator"),
    output="Confirmation of deployment.",
    execute=_deploy_network,
)

COMMANDS: tuple[CommandDefinition, ...] = (prompt_architect, deploy_network)

from __future__ import annotations

from typing import Any

from automation_engine.commands.types import ArgType, CommandDefinition, arg
from automation_engine.context import CommandContext


async def _run_automation(args: dict[str, Any], context: CommandContext) -> dict[str, Any]:
    run = await context.automations.run_automation(args["id"])
    return {"runId": run.id, "status": run.status.value, "results": run.results}


run_automation = CommandDefinition(
    id="run_automation",
    description="Run another registered automation and wait for its result.",
    tags=("automation", "system"),
    rbac=("orchestrator",),
    args=dict([arg("id", ArgType.STRING, "ID of the automation to run")]),
    output="Id, status and step results of the finished run.",
    output_schema={
        "type": "object",
        "properties": {
            "runId": {"type": "string"},
            "status": {"type": "string"},
            "results": {"type": "object"},
        },
    },
    execute=_run_automation,
)

COMMANDS: tuple[CommandDefinition, ...] = (run_automation,)

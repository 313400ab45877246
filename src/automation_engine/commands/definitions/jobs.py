"""Job queue and job catalog commands.

The queue and catalog live in the host's job system, reached through
``context.jobs``.
"""

from __future__ import annotations

import time
from typing import Any

from automation_engine.commands.types import ArgType, CommandDefinition, arg
from automation_engine.context import CommandContext
from automation_engine.jobs import JobDefinition, JobStep


async def _queue_new_job(args: dict[str, Any], context: CommandContext) -> dict[str, str]:
    job_id = context.jobs.add_job({"type": args["type"], "request": dict(args.get("request") or {})})
    return {"status": "queued", "jobId": job_id}


async def _pause_queue(args: dict[str, Any], context: CommandContext) -> str:
    context.jobs.pause_queue()
    return "Queue paused"


async def _resume_queue(args: dict[str, Any], context: CommandContext) -> str:
    context.jobs.resume_queue()
    return "Queue resumed"


async def _delete_queued_job(args: dict[str, Any], context: CommandContext) -> str:
    context.jobs.remove_job(args["id"])
    return f"Job {args['id']} removed"


async def _list_queued_jobs(args: dict[str, Any], context: CommandContext) -> list[dict[str, Any]]:
    return context.jobs.get_queue()


async def _list_catalog_jobs(args: dict[str, Any], context: CommandContext) -> list[dict[str, Any]]:
    return context.jobs.get_catalog()


def _job_step(raw: Any) -> JobStep:
    if isinstance(raw, JobStep):
        return raw
    if not isinstance(raw, dict):
        raise ValueError("Each step must be an object")
    data = dict(raw)
    # Accept the camelCase key used by hosts that serialize steps from JSON.
    if "commandId" in data and "command_id" not in data:
        data["command_id"] = data.pop("commandId")
    return JobStep.model_validate(data)


async def _save_job_definition(args: dict[str, Any], context: CommandContext) -> str:
    definition = JobDefinition(
        id=f"job-def-{int(time.time() * 1000)}",
        name=args["name"],
        description=args.get("description") or "",
        mode=args.get("mode") or "serial",
        steps=[_job_step(step) for step in args["steps"]],
    )
    context.jobs.save_definition(definition.model_dump(mode="json"))
    return definition.id


async def _delete_job_definition(args: dict[str, Any], context: CommandContext) -> str:
    context.jobs.delete_definition(args["id"])
    return f"Definition {args['id']} deleted"


queue_new_job = CommandDefinition(
    id="queue_new_job",
    description="Adds a new job to the execution queue.",
    tags=("job", "system"),
    rbac=("orchestrator", "builder", "researcher"),
    args=dict(
        [
            arg("type", ArgType.STRING, "Command ID to run"),
            arg("request", ArgType.OBJECT, "Arguments for the command", default={}),
        ]
    ),
    output="The ID of the queued job.",
    execute=_queue_new_job,
)

pause_queue = CommandDefinition(
    id="pause_queue",
    description="Pauses the job execution queue.",
    tags=("job", "system"),
    rbac=("orchestrator",),
    output="Status message",
    execute=_pause_queue,
)

resume_queue = CommandDefinition(
    id="resume_queue",
    description="Resumes the job execution queue.",
    tags=("job", "system"),
    rbac=("orchestrator",),
    output="Status message",
    execute=_resume_queue,
)

delete_queued_job = CommandDefinition(
    id="delete_queued_job",
    description="Removes a job from the queue (cancel).",
    tags=("job", "system"),
    rbac=("orchestrator",),
    args=dict([arg("id", ArgType.STRING, "Job ID to remove")]),
    output="Status message",
    execute=_delete_queued_job,
)

list_queued_jobs = CommandDefinition(
    id="list_queued_jobs",
    description="Lists all jobs currently in the queue.",
    tags=("job", "query"),
    rbac=("orchestrator", "builder", "researcher"),
    output="List of queued jobs",
    execute=_list_queued_jobs,
)

list_catalog_jobs = CommandDefinition(
    id="list_catalog_jobs",
    description="Lists all saved job definitions in the catalog.",
    tags=("job", "catalog", "query"),
    rbac=("orchestrator", "builder", "researcher"),
    output="List of job definitions",
    execute=_list_catalog_jobs,
)

save_job_definition = CommandDefinition(
    id="save_job_definition",
    description="Saves a job definition to the catalog.",
    tags=("job", "catalog"),
    rbac=("orchestrator", "builder"),
    args=dict(
        [
            arg("name", ArgType.STRING, "Job Name"),
            arg("description", ArgType.STRING, "Job Description", required=False, default=""),
            arg(
                "mode",
                ArgType.STRING,
                "serial | parallel",
                required=False,
                default="serial",
                validation=lambda v: v in ("serial", "parallel") or "Mode must be serial or parallel",
            ),
            arg("steps", ArgType.ARRAY, "List of job steps"),
        ]
    ),
    output="ID of saved definition",
    execute=_save_job_definition,
)

delete_job_definition = CommandDefinition(
    id="delete_job_definition",
    description="Deletes a job definition from the catalog.",
    tags=("job", "catalog"),
    rbac=("orchestrator",),
    args=dict([arg("id", ArgType.STRING, "Definition ID")]),
    output="Status message",
    execute=_delete_job_definition,
)

COMMANDS: tuple[CommandDefinition, ...] = (
    queue_new_job,
    pause_queue,
    resume_queue,
    delete_queued_job,
    list_queued_jobs,
    list_catalog_jobs,
    save_job_definition,
    delete_job_definition,
)

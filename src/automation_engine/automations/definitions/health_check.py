"""Agent health check.

Pings every agent through the command registry and queues an investigation
job when any of them fail to answer.
"""

from __future__ import annotations

import logging
from typing import Any

from automation_engine.automations.types import CodeAutomation
from automation_engine.commands.registry import CommandRegistry
from automation_engine.context import CommandContext

logger = logging.getLogger(__name__)

HEALTH_CHECK_ID = "health_check"
INVESTIGATION_JOB_TYPE = "investigate_agent_failures"


def build_health_check(commands: CommandRegistry) -> CodeAutomation:
    """Return the health-check automation bound to ``commands``."""

    async def execute(context: CommandContext, run_id: str) -> dict[str, Any]:
        workspace = context.workspace
        agents = list(workspace.agents)
        report: dict[str, Any] = {"total": len(agents), "online": 0, "offline": 0, "failures": []}

        workspace.add_log(f"[HealthCheck] Pinging {len(agents)} agents...")

        for agent in agents:
            try:
                await commands.execute("ping_agent", {"agentId": agent["id"]}, context)
            except Exception as e:
                report["offline"] += 1
                report["failures"].append(
                    {"agentId": agent["id"], "name": agent.get("name"), "error": str(e)}
                )
            else:
                report["online"] += 1

        if report["offline"]:
            workspace.add_log(f"[HealthCheck] Found {report['offline']} unresponsive agents.")
            job_id = context.jobs.add_job(
                {
                    "type": INVESTIGATION_JOB_TYPE,
                    "request": {
                        "failures": report["failures"],
                        "source": "health_check_automation",
                        "runId": run_id,
                    },
                }
            )
            logger.info(
                "Queued agent investigation job",
                extra={"run_id": run_id, "job_id": job_id, "offline": report["offline"]},
            )
            workspace.add_log("[HealthCheck] Queued investigation job.")
        else:
            workspace.add_log("[HealthCheck] All systems nominal.")

        return report

    return CodeAutomation(
        id=HEALTH_CHECK_ID,
        name="System Health Check",
        description=(
            "Pings all agents to ensure they are online and responsive. "
            "Queues repair jobs for unresponsive agents."
        ),
        tags=("health", "system", "maintenance"),
        schedule="every 5m",
        execute=execute,
    )

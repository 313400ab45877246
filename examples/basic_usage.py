#!/usr/bin/env python3
"""Programmatic automation example.

This demonstrates using the engine components directly:

* build an in-memory engine from settings (`.env` is honoured)
* register a declarative automation whose later steps depend on earlier ones
* run it and print the run record as JSON

The team name is passed as an argument.
"""

from __future__ import annotations

import argparse
import asyncio
import json
from typing import Sequence

from automation_engine.automations import AutomationStep, DeclarativeAutomation
from automation_engine.config import EngineSettings
from automation_engine.host import build_engine
from automation_engine.logging import configure_logging


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Bootstrap a two-agent team with an automation.")
    parser.add_argument("--team", default="Core", help="Group name for the new team")
    return parser.parse_args(argv)


def _bootstrap(team: str) -> DeclarativeAutomation:
    return DeclarativeAutomation(
        id="bootstrap_team",
        name=f"Bootstrap {team}",
        steps=(
            AutomationStep(
                id="alice",
                command_id="create_agent",
                args={"name": "Alice", "role": "researcher"},
            ),
            AutomationStep(
                id="bob",
                command_id="create_agent",
                args={"name": "Bob", "role": "builder"},
            ),
            AutomationStep(
                id="team",
                command_id="create_group",
                args={"name": team, "members": ["Alice", "Bob"], "governance": "majority"},
                condition="steps.alice.status === 'completed' && steps.bob.status === 'completed'",
            ),
            AutomationStep(
                id="hello",
                command_id="send_message",
                args={"from_agent_name": "Alice", "to_agent_name": "Bob", "message": "Welcome!"},
                condition="steps.team.result.channelCount > 0",
            ),
        ),
    )


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)

    settings = EngineSettings()
    configure_logging(settings.log_level, json_output=settings.log_json)

    engine = build_engine(settings)
    engine.automations.register(_bootstrap(args.team))

    run = asyncio.run(engine.automations.run_automation("bootstrap_team"))

    print(json.dumps(run.model_dump(mode="json"), indent=2))
    print(f"Agents: {[a['name'] for a in engine.workspace.agents]}")
    print(f"Messages recorded: {len(engine.workspace.messages)}")
    return 0 if run.succeeded else 1


if __name__ == "__main__":
    raise SystemExit(main())

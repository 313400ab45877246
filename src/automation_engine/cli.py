"""CLI entrypoint for the automation engine.

Runs commands and automations against a fresh in-memory host. Output is JSON on
stdout; logs go to stderr.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import Any

from pydantic import ValidationError

from automation_engine import __version__
from automation_engine.automations.types import AutomationSummary
from automation_engine.config import EngineSettings
from automation_engine.context import User
from automation_engine.errors import EngineError
from automation_engine.host import build_engine
from automation_engine.logging import configure_logging

logger = logging.getLogger(__name__)


def _parse_json_object(value: str) -> dict[str, Any]:
    try:
        parsed = json.loads(value)
    except json.JSONDecodeError as e:
        raise argparse.ArgumentTypeError(f"invalid JSON: {e.msg}") from e
    if not isinstance(parsed, dict):
        raise argparse.ArgumentTypeError("expected a JSON object")
    return parsed


def _print_json(payload: Any) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False, default=str))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="automation-engine",
        description="Command registry and automation runner",
    )
    parser.add_argument("--version", action="version", version=f"automation-engine {__version__}")

    subparsers = parser.add_subparsers(dest="command", required=True)

    list_commands = subparsers.add_parser("list-commands", help="List registered commands")
    list_commands.add_argument("--tag", default=None, help="Only show commands with this tag")

    subparsers.add_parser("list-automations", help="List registered automations")

    exec_cmd = subparsers.add_parser("exec", help="Execute a single command")
    exec_cmd.add_argument("command_id", help="Command id, e.g. 'create_agent'")
    exec_cmd.add_argument(
        "--args",
        dest="command_args",
        type=_parse_json_object,
        default={},
        help='Command arguments as a JSON object, e.g. \'{"name": "Alice"}\'',
    )
    exec_cmd.add_argument(
        "--role",
        default=None,
        help="Role to run as (defaults to AUTOMATION_DEFAULT_ROLE)",
    )

    run_cmd = subparsers.add_parser("run", help="Run an automation and print its run record")
    run_cmd.add_argument("automation_id", help="Automation id, e.g. 'health_check'")

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = EngineSettings()
    except ValidationError as e:
        # Logging isn't configured yet; keep it simple and actionable.
        print("Configuration error (check your .env):", file=sys.stderr)
        print(e, file=sys.stderr)
        return 2

    configure_logging(settings.log_level, json_output=settings.log_json)
    engine = build_engine(settings)

    try:
        if args.command == "list-commands":
            definitions = engine.commands.get_all()
            if args.tag:
                definitions = [d for d in definitions if args.tag in d.tags]
            _print_json([d.to_json() for d in definitions])
            return 0

        if args.command == "list-automations":
            _print_json(
                [
                    AutomationSummary.of(d).model_dump(mode="json")
                    for d in engine.automations.registry.get_all()
                ]
            )
            return 0

        if args.command == "exec":
            user = None
            if args.role is not None:
                user = User(id=settings.default_user, role=args.role)
            result = asyncio.run(
                engine.dispatcher.execute(args.command_id, args.command_args, user=user)
            )
            _print_json({"command_id": args.command_id, "result": result})
            return 0

        if args.command == "run":
            run = asyncio.run(engine.automations.run_automation(args.automation_id))
            _print_json(run.model_dump(mode="json"))
            # A failed run is still a successful invocation, but CI should notice.
            return 0 if run.succeeded else 4

        logger.error("Unknown command", extra={"command": args.command})
        return 2

    except EngineError as e:
        logger.warning(str(e), extra={"error_type": type(e).__name__})
        print(str(e), file=sys.stderr)
        return 1

    except Exception:
        logger.exception("Command failed")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())

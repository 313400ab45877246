"""Unit tests for the role-checked host dispatcher."""

from __future__ import annotations

import asyncio
import dataclasses

import pytest

from automation_engine.commands.registry import CommandRegistry
from automation_engine.context import AuthCapability, CommandContext, User
from automation_engine.errors import CommandNotFound, MissingArgument, PermissionDenied
from automation_engine.host.dispatch import CommandDispatcher


def test_allowed_role_executes(commands: CommandRegistry, context: CommandContext) -> None:
    dispatcher = CommandDispatcher(commands, context)

    # The context user is the default orchestrator.
    assert asyncio.run(dispatcher.execute("greet", {"name": "Ada"})) == "Hello, Ada"


def test_disallowed_role_is_rejected_before_the_command_runs(
    commands: CommandRegistry, context: CommandContext, calls: list
) -> None:
    dispatcher = CommandDispatcher(commands, context)

    with pytest.raises(PermissionDenied, match="Role 'researcher' is not allowed to execute greet"):
        asyncio.run(
            dispatcher.execute("greet", {"name": "Ada"}, user=User(id="u1", role="researcher"))
        )

    assert calls == []


def test_missing_user_is_rejected_for_restricted_commands(
    commands: CommandRegistry, context: CommandContext
) -> None:
    anonymous = dataclasses.replace(context, auth=AuthCapability(user=None))
    dispatcher = CommandDispatcher(commands, anonymous)

    with pytest.raises(PermissionDenied):
        asyncio.run(dispatcher.execute("greet", {"name": "Ada"}))


def test_empty_rbac_is_open_to_every_role(
    commands: CommandRegistry, context: CommandContext
) -> None:
    dispatcher = CommandDispatcher(commands, context)

    result = asyncio.run(dispatcher.execute("echo", {"value": 7}, user=User(id="g", role="guest")))

    assert result == 7


def test_unknown_command_and_validation_errors_pass_through(
    commands: CommandRegistry, context: CommandContext
) -> None:
    dispatcher = CommandDispatcher(commands, context)

    with pytest.raises(CommandNotFound):
        asyncio.run(dispatcher.execute("nope"))
    with pytest.raises(MissingArgument):
        asyncio.run(dispatcher.execute("greet", {}))


def test_dispatcher_does_not_mutate_caller_args(
    commands: CommandRegistry, context: CommandContext
) -> None:
    dispatcher = CommandDispatcher(commands, context)
    args = {"name": "Ada"}

    asyncio.run(dispatcher.execute("greet", args))

    assert args == {"name": "Ada"}

"""Command registry: definition storage, argument validation and dispatch.

Authorization is deliberately absent here. Each definition carries an ``rbac``
allow-list, but checking it is the host dispatch layer's job
(see :mod:`automation_engine.host.dispatch`).
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Sequence
from typing import Any

from automation_engine.commands.types import ArgType, CommandArg, CommandDefinition
from automation_engine.context import CommandContext
from automation_engine.errors import (
    CommandNotFound,
    MissingArgument,
    TypeMismatch,
    ValidationFailed,
)

logger = logging.getLogger(__name__)


def _matches_type(arg_type: ArgType, value: Any) -> bool:
    if arg_type is ArgType.STRING:
        return isinstance(value, str)
    if arg_type is ArgType.NUMBER:
        # bool is an int subclass; it is not a number here.
        return isinstance(value, int | float) and not isinstance(value, bool)
    if arg_type is ArgType.BOOLEAN:
        return isinstance(value, bool)
    if arg_type is ArgType.ARRAY:
        return isinstance(value, list | tuple)
    # object and reference types are validated, if at all, by the command.
    return True


def _validate_one(spec: CommandArg, args: dict[str, Any]) -> None:
    value = args.get(spec.name)

    if value is None:
        if spec.has_default:
            args[spec.name] = value = copy.deepcopy(spec.default)
        elif spec.required:
            raise MissingArgument(spec.name)
        else:
            # Optional without default: leave the key as the caller supplied it.
            return

    if value is not None and not _matches_type(spec.type, value):
        raise TypeMismatch(spec.name, spec.type.value)

    if spec.validation is not None and value is not None:
        result = spec.validation(value)
        if result is not True:
            reason = result if isinstance(result, str) else "Validation failed"
            raise ValidationFailed(spec.name, reason)


def validate_args(definition: CommandDefinition, args: dict[str, Any]) -> dict[str, Any]:
    """Validate ``args`` against every declared argument of ``definition``.

    Defaults are written back into ``args`` in place, and the same dict is
    returned. Arguments the command does not declare pass through unchecked.

    Raises:
        MissingArgument: A required argument has no value and no default.
        TypeMismatch: A string/number/boolean/array argument has the wrong type.
        ValidationFailed: The argument's custom validator rejected the value.
    """

    for spec in definition.args.values():
        _validate_one(spec, args)
    return args


class CommandRegistry:
    def __init__(self) -> None:
        self._commands: dict[str, CommandDefinition] = {}

    def register(self, definition: CommandDefinition) -> None:
        if definition.id in self._commands:
            logger.warning(
                "Command already registered, overwriting", extra={"command_id": definition.id}
            )
        self._commands[definition.id] = definition

    def register_all(self, definitions: Sequence[CommandDefinition]) -> None:
        for definition in definitions:
            self.register(definition)

    def unregister(self, command_id: str) -> None:
        self._commands.pop(command_id, None)

    def get(self, command_id: str) -> CommandDefinition | None:
        return self._commands.get(command_id)

    def get_all(self) -> list[CommandDefinition]:
        return list(self._commands.values())

    def __contains__(self, command_id: object) -> bool:
        return command_id in self._commands

    def __len__(self) -> int:
        return len(self._commands)

    async def execute(
        self, command_id: str, args: dict[str, Any], context: CommandContext
    ) -> Any:
        """Validate ``args`` and run the command.

        ``args`` is mutated in place with resolved defaults. Whatever the command
        body raises propagates unchanged.

        Raises:
            CommandNotFound: No command is registered under ``command_id``.
            ArgumentError: See :func:`validate_args`.
        """

        definition = self._commands.get(command_id)
        if definition is None:
            raise CommandNotFound(command_id)

        validate_args(definition, args)

        logger.debug("Executing command", extra={"command_id": command_id})
        return await definition.execute(args, context)

"""Exception taxonomy for command dispatch and automation runs.

Registry-level errors are raised before a command body runs. Errors raised by a
command body itself are never wrapped; they propagate to the caller unchanged.
"""

from __future__ import annotations


class EngineError(Exception):
    """Base class for errors raised by the engine itself."""


class CommandNotFound(EngineError, LookupError):
    def __init__(self, command_id: str) -> None:
        super().__init__(f"Command {command_id} not found")
        self.command_id = command_id


class AutomationNotFound(EngineError, LookupError):
    def __init__(self, automation_id: str) -> None:
        super().__init__(f"Automation {automation_id} not found")
        self.automation_id = automation_id


class ArgumentError(EngineError, ValueError):
    """An argument failed validation before the command body ran."""

    def __init__(self, argument: str, message: str) -> None:
        super().__init__(message)
        self.argument = argument


class MissingArgument(ArgumentError):
    def __init__(self, argument: str) -> None:
        super().__init__(argument, f"Missing required argument: {argument}")


class TypeMismatch(ArgumentError):
    def __init__(self, argument: str, expected: str) -> None:
        article = "an" if expected[:1] in "aeiou" else "a"
        super().__init__(argument, f"Argument {argument} must be {article} {expected}")
        self.expected = expected


class ValidationFailed(ArgumentError):
    def __init__(self, argument: str, reason: str) -> None:
        super().__init__(argument, f"Argument {argument} invalid: {reason}")
        self.reason = reason


class ConditionError(EngineError):
    """A step condition could not be parsed or evaluated.

    The runner downgrades this to a warning and skips the step.
    """


class ConditionSyntaxError(ConditionError):
    def __init__(self, message: str, position: int) -> None:
        super().__init__(f"{message} at position {position}")
        self.position = position


class PermissionDenied(EngineError):
    """Raised by the host dispatch layer, never by the registry."""

    def __init__(self, command_id: str, role: str | None) -> None:
        super().__init__(f"Role '{role}' is not allowed to execute {command_id}")
        self.command_id = command_id
        self.role = role

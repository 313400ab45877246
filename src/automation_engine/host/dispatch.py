"""Role-checked command dispatch for hosts.

The command registry never looks at a definition's ``rbac`` list. Hosts that
expose commands to users go through :class:`CommandDispatcher` instead, which
rejects callers whose role is not on the list before delegating.
"""

from __future__ import annotations

import logging
from typing import Any

from automation_engine.commands.registry import CommandRegistry
from automation_engine.context import CommandContext, User
from automation_engine.errors import CommandNotFound, PermissionDenied

logger = logging.getLogger(__name__)


class CommandDispatcher:
    def __init__(self, registry: CommandRegistry, context: CommandContext) -> None:
        self._registry = registry
        self._context = context

    @property
    def registry(self) -> CommandRegistry:
        return self._registry

    def is_allowed(self, command_id: str, role: str | None) -> bool:
        definition = self._registry.get(command_id)
        if definition is None:
            raise CommandNotFound(command_id)
        # An empty allow-list leaves the command open to every role.
        if not definition.rbac:
            return True
        return role is not None and role in definition.rbac

    async def execute(
        self,
        command_id: str,
        args: dict[str, Any] | None = None,
        *,
        user: User | None = None,
    ) -> Any:
        """Run a command on behalf of ``user`` (defaults to the context's user).

        Raises:
            CommandNotFound: Unknown command.
            PermissionDenied: The caller's role is not in the command's ``rbac``.
            ArgumentError: Argument validation failed.
        """

        caller = user if user is not None else self._context.auth.user
        role = caller.role if caller is not None else None

        if not self.is_allowed(command_id, role):
            logger.warning(
                "Command rejected by role check",
                extra={"command_id": command_id, "role": role},
            )
            raise PermissionDenied(command_id, role)

        return await self._registry.execute(command_id, dict(args or {}), self._context)

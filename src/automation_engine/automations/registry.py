"""In-memory store of automation definitions."""

from __future__ import annotations

import logging

from automation_engine.automations.types import AutomationDefinition

logger = logging.getLogger(__name__)


class AutomationRegistry:
    """Definitions keyed by id. Re-registering an id replaces the definition."""

    def __init__(self) -> None:
        self._automations: dict[str, AutomationDefinition] = {}

    def register(self, definition: AutomationDefinition) -> None:
        if definition.id in self._automations:
            logger.warning(
                "Overwriting automation definition", extra={"automation_id": definition.id}
            )
        self._automations[definition.id] = definition

    def unregister(self, automation_id: str) -> None:
        self._automations.pop(automation_id, None)

    def get(self, automation_id: str) -> AutomationDefinition | None:
        return self._automations.get(automation_id)

    def get_all(self) -> list[AutomationDefinition]:
        return list(self._automations.values())

    def __contains__(self, automation_id: object) -> bool:
        return automation_id in self._automations

    def __len__(self) -> int:
        return len(self._automations)

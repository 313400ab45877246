"""Builtin automations."""

from automation_engine.automations.definitions.health_check import (
    HEALTH_CHECK_ID,
    build_health_check,
)

__all__ = ["HEALTH_CHECK_ID", "build_health_check"]

"""Automation definitions, the automation registry and the runner."""

from automation_engine.automations.registry import AutomationRegistry
from automation_engine.automations.runner import AutomationRunner
from automation_engine.automations.types import (
    AutomationLog,
    AutomationRun,
    AutomationStep,
    CodeAutomation,
    DeclarativeAutomation,
    RunStatus,
)

__all__ = [
    "AutomationLog",
    "AutomationRegistry",
    "AutomationRun",
    "AutomationRunner",
    "AutomationStep",
    "CodeAutomation",
    "DeclarativeAutomation",
    "RunStatus",
]

"""Automation Engine.

A host-embeddable command registry and automation runner:
- typed, validated commands dispatched against a host-supplied context
- code and declarative (step-based) automations with conditional steps
- run records with structured logs
"""

__version__ = "0.1.0"

from automation_engine.config import EngineSettings

__all__ = ["__version__", "EngineSettings"]

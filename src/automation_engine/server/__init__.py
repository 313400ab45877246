"""FastAPI server adapter for automation-engine.

Business logic stays in the engine core and `automation_engine.host`; routing
and HTTP error mapping live here.
"""

from __future__ import annotations

__all__ = ["create_app"]

from automation_engine.server.app import create_app

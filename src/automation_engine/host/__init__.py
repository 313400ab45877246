"""Reference host: in-memory state, role-checked dispatch and run history.

The engine core never imports from here.
"""

from __future__ import annotations

__all__ = ["Engine", "build_engine"]

from automation_engine.host.bootstrap import Engine, build_engine

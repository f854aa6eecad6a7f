"""SCM Gate Domain Modules

Domains:
- scm: git location, version gating and command execution
- workflow: event loop management for running the git coroutines
"""

__all__ = [
    "scm",
    "workflow",
]

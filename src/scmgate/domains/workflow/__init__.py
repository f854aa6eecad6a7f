"""Workflow Domain

Runs the asynchronous git operations from synchronous entry points.

Key Components:
- run_in_event_loop: Runs a coroutine function in a fresh, cleaned-up event loop
"""

from .event_loop_utils import run_in_event_loop

__all__ = [
    "run_in_event_loop",
]

"""
Contrast SCM Gate

A version-gated wrapper around the git and git-lfs command line tools.
git is located once, its version is checked against the minimum this
library needs, and every operation then builds a command line using only
the flags the detected git understands.

Usage:
    ```python
    from src.scmgate import GitCommandManager
    from src.scmgate.domains.workflow import run_in_event_loop

    manager = GitCommandManager()
    run_in_event_loop(manager.load_execution_info)
    exit_code = run_in_event_loop(manager.git_fetch, "/path/to/repo", "origin", 0)
    ```
"""

__version__ = "1.2.0"
__author__ = "Contrast Security"
__description__ = "Version-gated git command wrapper"

from .domains.scm import GitCommandManager, ScmCommandOperations, VersionInfo
from .shared import (
    FailureCategory,
    NotInitializedError,
    ScmGateError,
    ToolNotFoundError,
    VersionIncompatibleError,
)

__all__ = [
    # Metadata
    "__version__",
    "__author__",
    "__description__",

    "GitCommandManager",
    "ScmCommandOperations",
    "VersionInfo",
    "FailureCategory",
    "ScmGateError",
    "ToolNotFoundError",
    "NotInitializedError",
    "VersionIncompatibleError",
]

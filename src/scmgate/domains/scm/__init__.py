"""Source Control Management Domain

This domain wraps the git command line behind a version-gated interface.

Key Components:
- GitCommandManager: Locates git / git-lfs and runs every git operation
- ScmCommandOperations: Abstract interface implemented by GitCommandManager
- VersionInfo, GateState: Detected tool versions and the readiness state
- ProcessRunner: Runs one git child process and collects its output
"""

from .git_command_manager import GitCommandManager
from .process_runner import ExecutionResult, Invocation, ProcessRunner
from .scm_operations import ScmCommandOperations
from .version_gate import GatePhase, GateState, ToolKind, ToolLocation, VersionGate, VersionInfo

__all__ = [
    "GitCommandManager",
    "ScmCommandOperations",
    "ProcessRunner",
    "Invocation",
    "ExecutionResult",
    "VersionInfo",
    "VersionGate",
    "GateState",
    "GatePhase",
    "ToolKind",
    "ToolLocation",
]

# -
# #%L
# Contrast AI SmartFix
# %%
# Copyright (C) 2025 Contrast Security, Inc.
# %%
# Contact: support@contrastsecurity.com
# License: Commercial
# NOTICE: This Software and the patented inventions embodied within may only be
# used as part of Contrast Security's commercial offerings. Even though it is
# made available through public repositories, use of this Software is subject to
# the applicable End User Licensing Agreement found at
# https://www.contrastsecurity.com/enduser-terms-0317a or as otherwise agreed
# between Contrast Security and the End User. The Software may not be reverse
# engineered, modified, repackaged, sold, redistributed or otherwise used in a
# way not consistent with the End User License Agreement.
# #L%
#

"""
Version Gate Module

Holds the detected git / git-lfs locations and versions and answers
"is the installed version at least X" for version-conditional command lines.
"""

from dataclasses import dataclass
from enum import Enum
from functools import total_ordering
from typing import Optional

from packaging.version import InvalidVersion, Version, parse as parse_version

from src.scmgate.shared.exceptions import (
    NotInitializedError,
    ToolNotFoundError,
    VersionIncompatibleError,
)


@total_ordering
@dataclass(frozen=True, eq=False)
class VersionInfo:
    """A major.minor[.patch] tool version. A missing patch compares as 0."""

    major: int
    minor: int
    patch: Optional[int] = None

    @classmethod
    def parse(cls, text: str) -> Optional["VersionInfo"]:
        """Parse "2.30" or "2.30.1" into a VersionInfo, or None if it isn't one."""
        if not text:
            return None
        try:
            release = parse_version(text.strip()).release
        except InvalidVersion:
            return None
        if len(release) < 2 or len(release) > 3:
            return None
        return cls(*release)

    def as_version(self) -> Version:
        return Version(str(self))

    def __str__(self) -> str:
        if self.patch is None:
            return f"{self.major}.{self.minor}"
        return f"{self.major}.{self.minor}.{self.patch}"

    def __eq__(self, other):
        if not isinstance(other, VersionInfo):
            return NotImplemented
        return self.as_version() == other.as_version()

    def __lt__(self, other):
        if not isinstance(other, VersionInfo):
            return NotImplemented
        return self.as_version() < other.as_version()

    def __hash__(self):
        return hash((self.major, self.minor, self.patch or 0))


class ToolKind(Enum):
    PRIMARY = "primary"
    EXTENSION = "extension"


@dataclass(frozen=True)
class ToolLocation:
    path: str
    kind: ToolKind


class VersionGate:
    """Location and version of one tool, with version compliance checks."""

    def __init__(self, tool_name: str):
        self.tool_name = tool_name
        self.location: Optional[ToolLocation] = None
        self.version: Optional[VersionInfo] = None
        self._populated = False

    @property
    def populated(self) -> bool:
        return self._populated

    def locate(self, location: Optional[ToolLocation]) -> None:
        self.location = location

    def record_version(self, version: Optional[VersionInfo]) -> None:
        self.version = version
        self._populated = True

    def require_location(self) -> ToolLocation:
        if self.location is None:
            raise ToolNotFoundError(
                f"Could not find {self.tool_name} installed on the system. "
                f"Please make sure {self.tool_name} is installed and available in the PATH."
            )
        return self.location

    def ensure_version(self, required: VersionInfo, throw_on_mismatch: bool) -> bool:
        """
        Check the installed version against a required version.

        Args:
            required: Minimum version needed by the caller
            throw_on_mismatch: Raise instead of returning False when too old

        Returns:
            bool: True if the installed version is >= required

        Raises:
            NotInitializedError: The version was never recorded
            ToolNotFoundError: The tool is not installed
            VersionIncompatibleError: Too old and throw_on_mismatch is set
        """
        if not self._populated:
            raise NotInitializedError(f"{self.tool_name} version has not been detected yet.")

        location = self.require_location()
        if self.version is None:
            raise ToolNotFoundError(f"Unable to determine the version of {self.tool_name} at '{location.path}'.")

        if self.version < required and throw_on_mismatch:
            raise VersionIncompatibleError(required, location.path, self.version, tool_name=self.tool_name)

        return self.version >= required


class GatePhase(Enum):
    UNINITIALIZED = "uninitialized"
    READY = "ready"


class GateState:
    """
    Primary and extension tool gates, moving once from UNINITIALIZED to READY.

    Accessors other than the gates themselves raise ToolNotFoundError until
    the state is READY.
    """

    def __init__(self):
        self.phase = GatePhase.UNINITIALIZED
        self.primary = VersionGate("git")
        self.extension = VersionGate("git-lfs")
        self._user_agent: Optional[str] = None

    @property
    def is_ready(self) -> bool:
        return self.phase is GatePhase.READY

    def mark_ready(self, user_agent: Optional[str]) -> None:
        if self.is_ready:
            raise RuntimeError("Git execution info has already been loaded.")
        self.primary.require_location()
        if self.primary.version is None:
            raise ToolNotFoundError("Git version is unknown, execution info cannot be completed.")
        self._user_agent = user_agent
        self.phase = GatePhase.READY

    def require_ready(self) -> None:
        if not self.is_ready:
            raise ToolNotFoundError("Git execution info has not been loaded. Call load_execution_info() first.")

    @property
    def git_path(self) -> str:
        self.require_ready()
        return self.primary.location.path

    @property
    def git_version(self) -> VersionInfo:
        self.require_ready()
        return self.primary.version

    @property
    def lfs_path(self) -> Optional[str]:
        self.require_ready()
        return self.extension.location.path if self.extension.location else None

    @property
    def lfs_version(self) -> Optional[VersionInfo]:
        self.require_ready()
        return self.extension.version

    @property
    def user_agent(self) -> Optional[str]:
        self.require_ready()
        return self._user_agent

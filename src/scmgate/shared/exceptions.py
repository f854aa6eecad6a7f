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
Exceptions raised by the SCM gate.

Command failures are not exceptions: a non-zero exit code is returned to the
caller as data. Parse failures are represented as None. Cancellation is the
standard asyncio.CancelledError.
"""

from .failure_categories import FailureCategory


class ScmGateError(Exception):
    """Base class for errors that make the git environment unusable."""

    category = FailureCategory.GENERAL_FAILURE


class ToolNotFoundError(ScmGateError):
    """Raised when a required tool was never located on this machine."""

    category = FailureCategory.TOOL_NOT_FOUND


class NotInitializedError(ScmGateError):
    """Raised when a version gate is queried before it was populated."""

    category = FailureCategory.NOT_INITIALIZED


class VersionIncompatibleError(ScmGateError):
    """Raised when the installed tool is older than a hard-required version."""

    category = FailureCategory.VERSION_INCOMPATIBLE

    def __init__(self, required, installed_path, installed, tool_name="git"):
        self.required = required
        self.installed_path = installed_path
        self.installed = installed
        self.tool_name = tool_name
        super().__init__(
            f"Minimum required {tool_name} version is {required}, "
            f"your {tool_name} ('{installed_path}') version is {installed}."
        )

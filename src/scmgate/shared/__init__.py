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

"""Shared exceptions and failure categories."""

from .exceptions import (
    ScmGateError,
    ToolNotFoundError,
    NotInitializedError,
    VersionIncompatibleError,
)
from .failure_categories import FailureCategory

__all__ = [
    "ScmGateError",
    "ToolNotFoundError",
    "NotInitializedError",
    "VersionIncompatibleError",
    "FailureCategory",
]

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
Output Parser Module

Best-effort extraction of a version or a remote URL from captured git output.
Nothing here raises: an unusable output yields None.
"""

import re
from typing import Iterable, List, Optional
from urllib.parse import urlsplit

from src.utils import debug_log
from .version_gate import VersionInfo

# we are interested in major.minor[.patch]
VERSION_PATTERN = re.compile(r"\d+\.\d+(\.\d+)?", re.IGNORECASE)
_URL_FORBIDDEN_CHARS = re.compile(r"[\s\\<>\"{}|^`]")


def non_empty_lines(lines: Optional[Iterable[str]]) -> List[str]:
    """Drops empty and missing entries from captured output."""
    return [line for line in (lines or []) if line]


def parse_version_output(lines: Optional[Iterable[str]]) -> Optional[VersionInfo]:
    """
    Extract a version from the output of a version probe.

    Args:
        lines: Captured output lines, expected to hold exactly one non-empty line

    Returns:
        VersionInfo: The first major.minor[.patch] match, or None
    """
    remaining = non_empty_lines(lines)
    if len(remaining) != 1:
        debug_log(f"Unexpected version output ({len(remaining)} non-empty lines), ignoring it.")
        return None

    match = VERSION_PATTERN.search(remaining[0])
    if not match:
        return None
    return VersionInfo.parse(match.group(0))


def is_absolute_url(value: str) -> bool:
    """True for a well-formed absolute URI such as https://host/path or file:///path."""
    if not value or _URL_FORBIDDEN_CHARS.search(value):
        return False
    try:
        parts = urlsplit(value)
    except ValueError:
        return False
    if not parts.scheme:
        return False
    if parts.netloc:
        try:
            # Raises on an invalid port
            parts.port
        except ValueError:
            return False
        return True
    return parts.path.startswith("/")


def parse_url_output(lines: Optional[Iterable[str]]) -> Optional[str]:
    """
    Extract a remote URL from the output of a config query.

    Args:
        lines: Captured output lines, expected to hold exactly one non-empty line

    Returns:
        str: The URL if it is absolute and well formed, otherwise None
    """
    remaining = non_empty_lines(lines)
    if len(remaining) != 1:
        debug_log(f"Unable to capture a remote url, the output is not expected: {remaining}")
        return None

    url = remaining[0].strip()
    if not is_absolute_url(url):
        debug_log(f"The url '{url}' is not an absolute well formed url.")
        return None
    return url

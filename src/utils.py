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

import os
import sys
import platform

# Unicode to ASCII fallback mappings for Windows
UNICODE_FALLBACKS = {
    '❌': 'X',  # ❌ -> X
    '✅': '',  # ✅ -> ''
    '⚠️': '!',  # ⚠️ -> !
    '→': '->',  # → -> ->
}


def is_debug_mode() -> bool:
    """Returns True when DEBUG_MODE is enabled in the environment."""
    return os.environ.get("DEBUG_MODE", "false").lower() == "true"


def safe_print(message, file=None, flush=True):
    """Safely print message, handling encoding issues on Windows."""
    try:
        print(message, file=file, flush=flush)
    except UnicodeEncodeError:
        # On Windows, replace Unicode chars with ASCII equivalents
        for unicode_char, ascii_fallback in UNICODE_FALLBACKS.items():
            message = message.replace(unicode_char, ascii_fallback)

        # Replace any remaining problematic Unicode characters with '?'
        if platform.system() == 'Windows':
            message = ''.join([c if ord(c) < 128 else '?' for c in message])

        print(message, file=file, flush=flush)


def log(message: str, is_error: bool = False, is_warning: bool = False):
    """Prints a message to stdout, or to stderr for errors."""
    if message is None:
        message = ""
    if is_error:
        safe_print(message, file=sys.stderr, flush=True)
    elif is_warning:
        safe_print(f"WARNING: {message}", flush=True)
    else:
        safe_print(message, flush=True)


def debug_log(*args, **kwargs):
    """Prints only if DEBUG_MODE is True."""
    if is_debug_mode():
        message = " ".join(map(str, args))
        safe_print(message, flush=True)


def prepend_path(directory: str, env=None):
    """Prepends a directory to PATH (in os.environ unless another mapping is given)."""
    env = os.environ if env is None else env
    current = env.get("PATH", "")
    if current:
        env["PATH"] = f"{directory}{os.pathsep}{current}"
    else:
        env["PATH"] = directory
    return env["PATH"]

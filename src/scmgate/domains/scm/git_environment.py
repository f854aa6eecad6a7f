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
Git Environment Module

Builds the environment handed to every git child process.
"""

from typing import Dict, Mapping, Optional

TERMINAL_PROMPT_VAR = "GIT_TERMINAL_PROMPT"
HTTP_USER_AGENT_VAR = "GIT_HTTP_USER_AGENT"
# GIT_TRACE* writes diagnostics into the normal output of every command,
# which breaks version and remote url parsing.
TRACE_VAR_PREFIX = "GIT_TRACE"


def compose_user_agent(git_version, distribution_id: str, distribution_version: str) -> str:
    """e.g. git/2.30.1 (contrast-scm-gate/1.2.0)"""
    return f"git/{git_version} ({distribution_id}/{distribution_version})"


def format_variable_name(name: Optional[str]) -> str:
    """Maps a public variable name to an environment name: "a.b c" -> "A_B_C"."""
    return (name or "").replace(".", "_").replace(" ", "_").upper()


def is_trace_variable(name: str) -> bool:
    return name.upper().startswith(TRACE_VAR_PREFIX)


def build_git_environment(public_variables: Optional[Mapping[str, Optional[str]]],
                          user_agent: Optional[str] = None) -> Dict[str, str]:
    """
    Compose the git environment.

    Args:
        public_variables: Public configuration variables to mirror into the environment
        user_agent: Value for GIT_HTTP_USER_AGENT, skipped when empty

    Returns:
        Dict[str, str]: Upper-cased variable names mapped to their values
    """
    git_env = {TERMINAL_PROMPT_VAR: "0"}

    if user_agent:
        git_env[HTTP_USER_AGENT_VAR] = user_agent

    for name, value in (public_variables or {}).items():
        formatted_name = format_variable_name(name)
        if not formatted_name or is_trace_variable(formatted_name):
            continue
        git_env[formatted_name] = value if value is not None else ""

    # Prompts stay disabled whatever the public variables say
    git_env[TERMINAL_PROMPT_VAR] = "0"
    return git_env

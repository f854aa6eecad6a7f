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
import json
from pathlib import Path
from typing import Optional, Any, Dict
from src.utils import debug_log, log


class ScmGateConfig:
    """
    Configuration manager for the SCM gate.
    Handles loading, validating, and accessing configuration values.
    """

    # Preset values
    VERSION = "1.2.0"
    DISTRIBUTION_ID = "contrast-scm-gate"

    def __init__(self, env_vars=None):
        """
        Initialize the configuration manager.

        Args:
            env_vars: Optional dictionary of environment variables (for testing)
        """
        self.env_vars = env_vars if env_vars is not None else os.environ
        self._load_config()

    def _get_env_var(self, var_name: str, default: Optional[Any] = None) -> Optional[str]:
        """Gets an environment variable, or the default when it is unset or empty."""
        value = self.env_vars.get(var_name)
        return value if value else default

    def _get_bool(self, var_name: str, default: str = "false") -> bool:
        return self._get_env_var(var_name, default=default).lower() == "true"

    def _load_config(self):
        """Loads all configuration from environment variables."""

        # --- Tool Resolution ---
        self.use_builtin_git = self._get_bool("USE_BUILTIN_GIT")
        self.externals_dir = Path(self._get_env_var(
            "AGENT_EXTERNALS_DIR",
            default=str(Path(__file__).parent.parent / "externals"))).resolve()
        self.work_dir = Path(self._get_env_var("AGENT_WORK_DIR", default=os.getcwd())).resolve()

        # --- Fetch Behaviour ---
        self.disable_fetch_prune_tags = self._get_bool("DISABLE_FETCH_PRUNE_TAGS")

        # --- Public Variables mirrored into the git environment ---
        self.public_variables = self._parse_public_variables(
            self._get_env_var("SCM_GATE_VARIABLES", default="{}")
        )

        # Debug logs for configuration
        debug_log(f"Use Built-in Git: {self.use_builtin_git}")
        debug_log(f"Externals Directory: {self.externals_dir}")
        debug_log(f"Work Directory: {self.work_dir}")
        debug_log(f"Disable Fetch Prune Tags: {self.disable_fetch_prune_tags}")
        # Values may hold secrets, only the names are logged
        debug_log(f"Public Variables: {sorted(self.public_variables)}")

    def _parse_public_variables(self, json_str: Optional[str]) -> Dict[str, Optional[str]]:
        """Parse the public variable map from a JSON object string."""
        try:
            if not json_str:
                return {}

            variables = json.loads(json_str)

            if not isinstance(variables, dict):
                log(f"SCM_GATE_VARIABLES must be a JSON object, got {type(variables)}. Ignoring it.", is_warning=True)
                return {}

            return {
                str(name): (None if value is None else str(value))
                for name, value in variables.items()
            }
        except json.JSONDecodeError:
            log("Error parsing SCM_GATE_VARIABLES JSON. Ignoring it.", is_error=True)
            return {}


_config_instance: Optional[ScmGateConfig] = None


def get_config() -> ScmGateConfig:
    """Returns the shared configuration, creating it on first use."""
    global _config_instance
    if _config_instance is None:
        _config_instance = ScmGateConfig()
    return _config_instance


def reset_config():
    """Drops the shared configuration so the next get_config() reloads it."""
    global _config_instance
    _config_instance = None

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

import sys
import os
from datetime import datetime

# Add the project root to the Python path to allow for absolute imports
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from src.utils import debug_log, log  # noqa: E402
from src.config import get_config  # noqa: E402
from src.scmgate.domains.scm import GitCommandManager  # noqa: E402
from src.scmgate.domains.workflow import run_in_event_loop  # noqa: E402
from src.scmgate.shared import ScmGateError  # noqa: E402


def create_git_command_manager():
    """Create a GitCommandManager bound to the shared configuration."""
    return GitCommandManager(config=get_config())


def report_execution_info(manager: GitCommandManager):
    """Logs the git / git-lfs locations and versions the manager resolved."""
    state = manager.state
    log(f"git location: {state.git_path}")
    log(f"git version: {state.git_version}")
    if state.lfs_path:
        log(f"git-lfs location: {state.lfs_path}")
        log(f"git-lfs version: {state.lfs_version or 'unknown'}")
    else:
        log("git-lfs: not installed")
    log(f"git user agent: {state.user_agent}")


def main():
    """Main orchestration logic: resolve git and report what was found."""
    start_time = datetime.now()
    log("--- Starting Contrast SCM Gate ---")

    config = get_config()
    debug_log(f"Contrast SCM Gate version {config.VERSION}")

    manager = create_git_command_manager()
    try:
        run_in_event_loop(manager.load_execution_info)
    except ScmGateError as e:
        log(f"Error: {e} (category: {e.category.value})", is_error=True)
        sys.exit(1)

    report_execution_info(manager)

    total_runtime = datetime.now() - start_time
    log(f"\n--- Script finished (total runtime: {total_runtime}) ---")


if __name__ == "__main__":
    main()

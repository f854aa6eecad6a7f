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
Git Command Manager Module

Public git operation set. Locates git / git-lfs once, gates version dependent
flags on the detected version and runs each command through ProcessRunner.
"""

import asyncio
import os
import platform
import shutil
from typing import List, Optional, Tuple

from src.config import get_config
from src.utils import debug_log, log, prepend_path
from src.scmgate.shared.exceptions import ToolNotFoundError
from src.scmgate.shared.failure_categories import FailureCategory
from . import command_builder
from .git_environment import build_git_environment, compose_user_agent
from .output_parser import parse_url_output, parse_version_output
from .process_runner import Invocation, OutputSink, ProcessRunner
from .scm_operations import ScmCommandOperations
from .version_gate import GateState, ToolKind, ToolLocation, VersionInfo


class GitCommandManager(ScmCommandOperations):
    """
    Version-gated wrapper around the git command line.

    Instances start uninitialized; load_execution_info() must complete before
    any repository operation. Operations are independent coroutines, callers
    are responsible for not running two of them against the same repository
    at once.
    """

    # every command line built here needs at least git 2.0
    MIN_REQUIRED_GIT_VERSION = VersionInfo(2, 0)
    RECOMMENDED_GIT_VERSION = VersionInfo(2, 17)

    def __init__(self, config=None, output_sink: Optional[OutputSink] = None):
        self.config = config or get_config()
        self.output_sink = output_sink or log
        self.state = GateState()

    def ensure_git_version(self, required_version: VersionInfo, throw_on_mismatch: bool) -> bool:
        return self.state.primary.ensure_version(required_version, throw_on_mismatch)

    def ensure_git_lfs_version(self, required_version: VersionInfo, throw_on_mismatch: bool) -> bool:
        return self.state.extension.ensure_version(required_version, throw_on_mismatch)

    async def load_execution_info(self, use_builtin_git: Optional[bool] = None) -> None:
        if self.state.is_ready:
            raise RuntimeError("Git execution info has already been loaded.")
        if use_builtin_git is None:
            use_builtin_git = self.config.use_builtin_git

        git_location, lfs_location = self._resolve_tool_locations(use_builtin_git)
        self.state.primary.locate(git_location)
        self.state.extension.locate(lfs_location)

        git_version = await self.git_version()
        if git_version is None:
            raise ToolNotFoundError(f"Unable to detect the version of git at '{git_location.path}'.")
        self.state.primary.record_version(git_version)
        debug_log(f"Detect git version: {git_version}.")

        lfs_version = None
        if lfs_location is not None:
            lfs_version = await self.git_lfs_version()
            debug_log(f"Detect git-lfs version: '{lfs_version or ''}'.")
        self.state.extension.record_version(lfs_version)

        self.ensure_git_version(self.MIN_REQUIRED_GIT_VERSION, throw_on_mismatch=True)

        if not self.ensure_git_version(self.RECOMMENDED_GIT_VERSION, throw_on_mismatch=False):
            log(f"To get a better Git experience, upgrade your Git to at least version "
                f"'{self.RECOMMENDED_GIT_VERSION}'. Your current Git version is '{git_version}'.",
                is_warning=True)

        user_agent = compose_user_agent(git_version, self.config.DISTRIBUTION_ID, self.config.VERSION)
        debug_log(f"Set git useragent to: {user_agent}.")
        self.state.mark_ready(user_agent)

    def _resolve_tool_locations(self, use_builtin_git: bool) -> Tuple[ToolLocation, Optional[ToolLocation]]:
        git_path = None
        lfs_path = None

        if use_builtin_git:
            # Only the Windows distribution bundles git
            if platform.system() == 'Windows':
                git_root = os.path.join(str(self.config.externals_dir), "git")
                git_path = os.path.join(git_root, "cmd", "git.exe")
                mingw = "mingw32" if platform.architecture()[0] == "32bit" else "mingw64"
                lfs_path = os.path.join(git_root, mingw, "bin", "git-lfs.exe")

                # git-lfs goes first so that cmd/git.exe wins over mingw*/bin/git.exe
                log(f"Prepending PATH with the directory containing {os.path.basename(git_path)}")
                prepend_path(os.path.dirname(lfs_path))
                new_path = prepend_path(os.path.dirname(git_path))
                debug_log(f"PATH: '{new_path}'")
            else:
                debug_log("No built-in git is shipped for this platform.")
        else:
            git_path = shutil.which("git")
            if not git_path:
                raise ToolNotFoundError(
                    "Could not find git installed on the system. "
                    "Please make sure git is installed and available in the PATH.")
            lfs_path = shutil.which("git-lfs")

        if not git_path or not os.path.isfile(git_path):
            raise ToolNotFoundError(f"Git executable not found: '{git_path}'.")

        git_location = ToolLocation(os.path.abspath(git_path), ToolKind.PRIMARY)
        lfs_location = None
        if lfs_path and os.path.isfile(lfs_path):
            lfs_location = ToolLocation(os.path.abspath(lfs_path), ToolKind.EXTENSION)
        else:
            debug_log("git-lfs was not found, LFS operations are unavailable.")
        return git_location, lfs_location

    def _git_environment(self):
        user_agent = self.state.user_agent if self.state.is_ready else None
        return build_git_environment(self.config.public_variables, user_agent)

    def _require_lfs(self) -> None:
        self.state.require_ready()
        self.state.extension.require_location()

    async def _execute_git_command(self, repository_path, command: str, options: Optional[str] = None,
                                   additional_command_line: Optional[str] = None,
                                   cancellation_event: Optional[asyncio.Event] = None,
                                   output: Optional[List[str]] = None) -> int:
        """
        Runs git in repository_path. Output is streamed to the output sink,
        or captured into `output` when a list is given.

        Returns:
            int: The git exit code, zero or not
        """
        location = self.state.primary.require_location()
        invocation = Invocation(
            working_directory=str(repository_path),
            command=command,
            options=options,
            additional_command_line=additional_command_line,
            environment=self._git_environment(),
            cancellation_event=cancellation_event,
        )
        log(f"[command]git {invocation.arguments}")

        runner = ProcessRunner(location.path)
        result = await runner.run(invocation, sink=self.output_sink, output=output)
        if result.exit_code != 0:
            debug_log(f"{FailureCategory.COMMAND_FAILED.value}: git {invocation.command} exited with {result.exit_code}")
        return result.exit_code

    async def git_init(self, repository_path: str) -> int:
        self.state.require_ready()
        debug_log(f"Init git repository at: {repository_path}.")
        return await self._execute_git_command(
            repository_path, "init", command_builder.build_init_options(repository_path))

    async def git_fetch(self, repository_path: str, remote_name: str, fetch_depth: int,
                        ref_specs: Optional[List[str]] = None, additional_command_line: Optional[str] = None,
                        cancellation_event: Optional[asyncio.Event] = None) -> int:
        self.state.require_ready()
        debug_log(f"Fetch git repository at: {repository_path} remote: {remote_name}.")
        options = command_builder.build_fetch_options(
            self.state.git_version,
            remote_name,
            fetch_depth,
            ref_specs,
            shallow_repository=command_builder.is_shallow_repository(repository_path),
            disable_prune_tags=self.config.disable_fetch_prune_tags,
        )
        return await self._execute_git_command(
            repository_path, "fetch", options, additional_command_line, cancellation_event)

    async def git_lfs_fetch(self, repository_path: str, remote_name: str, ref_spec: str,
                            additional_command_line: Optional[str] = None,
                            cancellation_event: Optional[asyncio.Event] = None) -> int:
        self._require_lfs()
        lfs_config = command_builder.LFS_CONFIG_FILE
        debug_log(f"Checkout {lfs_config} for git repository at: {repository_path} remote: {remote_name}.")

        checkout_exit_code = await self._execute_git_command(
            repository_path, "checkout", command_builder.build_lfs_config_checkout_options(ref_spec),
            additional_command_line, cancellation_event)
        if checkout_exit_code != 0:
            debug_log(f"There were some issues while checkout of {lfs_config} - probably because this file "
                      "does not exist (see message above for more details). Continue fetching.")

        debug_log(f"Fetch LFS objects for git repository at: {repository_path} remote: {remote_name}.")
        return await self._execute_git_command(
            repository_path, "lfs", command_builder.build_lfs_fetch_options(remote_name, ref_spec),
            additional_command_line, cancellation_event)

    async def git_checkout(self, repository_path: str, committish_or_branch: str,
                           cancellation_event: Optional[asyncio.Event] = None) -> int:
        self.state.require_ready()
        debug_log(f"Checkout {committish_or_branch}.")
        options = command_builder.build_checkout_options(self.state.git_version, committish_or_branch)
        return await self._execute_git_command(
            repository_path, "checkout", options, cancellation_event=cancellation_event)

    async def git_clean(self, repository_path: str) -> int:
        self.state.require_ready()
        debug_log(f"Delete untracked files/folders for repository at {repository_path}.")
        return await self._execute_git_command(
            repository_path, "clean", command_builder.build_clean_options(self.state.git_version))

    async def git_reset(self, repository_path: str) -> int:
        self.state.require_ready()
        debug_log(f"Undo any changes to tracked files in the working tree for repository at {repository_path}.")
        return await self._execute_git_command(repository_path, "reset", command_builder.RESET_OPTIONS)

    async def git_remote_add(self, repository_path: str, remote_name: str, remote_url: str) -> int:
        self.state.require_ready()
        debug_log(f"Add git remote: {remote_name} to url: {remote_url} for repository under: {repository_path}.")
        return await self._execute_git_command(
            repository_path, "remote", command_builder.build_remote_add_options(remote_name, remote_url))

    async def git_remote_set_url(self, repository_path: str, remote_name: str, remote_url: str) -> int:
        self.state.require_ready()
        debug_log(f"Set git fetch url to: {remote_url} for remote: {remote_name}.")
        return await self._execute_git_command(
            repository_path, "remote", command_builder.build_remote_set_url_options(remote_name, remote_url))

    async def git_remote_set_push_url(self, repository_path: str, remote_name: str, remote_url: str) -> int:
        self.state.require_ready()
        debug_log(f"Set git push url to: {remote_url} for remote: {remote_name}.")
        return await self._execute_git_command(
            repository_path, "remote", command_builder.build_remote_set_push_url_options(remote_name, remote_url))

    async def git_submodule_clean(self, repository_path: str) -> int:
        self.state.require_ready()
        debug_log(f"Delete untracked files/folders for submodules at {repository_path}.")
        return await self._execute_git_command(
            repository_path, "submodule", command_builder.build_submodule_clean_options(self.state.git_version))

    async def git_submodule_reset(self, repository_path: str) -> int:
        self.state.require_ready()
        debug_log(f"Undo any changes to tracked files in the working tree for submodules at {repository_path}.")
        return await self._execute_git_command(
            repository_path, "submodule", command_builder.SUBMODULE_RESET_OPTIONS)

    async def git_submodule_update(self, repository_path: str, fetch_depth: int,
                                   additional_command_line: Optional[str] = None, recursive: bool = False,
                                   cancellation_event: Optional[asyncio.Event] = None) -> int:
        self.state.require_ready()
        debug_log("Update the registered git submodules.")
        return await self._execute_git_command(
            repository_path, "submodule", command_builder.build_submodule_update_options(fetch_depth, recursive),
            additional_command_line, cancellation_event)

    async def git_submodule_sync(self, repository_path: str, recursive: bool = False,
                                 cancellation_event: Optional[asyncio.Event] = None) -> int:
        self.state.require_ready()
        debug_log("Synchronizes submodules' remote URL configuration setting.")
        return await self._execute_git_command(
            repository_path, "submodule", command_builder.build_submodule_sync_options(recursive),
            cancellation_event=cancellation_event)

    async def git_get_fetch_url(self, repository_path: str) -> Optional[str]:
        self.state.require_ready()
        debug_log(f"Inspect remote.origin.url for repository under {repository_path}")

        output: List[str] = []
        exit_code = await self._execute_git_command(
            repository_path, "config", command_builder.GET_FETCH_URL_OPTIONS, output=output)

        if exit_code != 0:
            log(f"'git config {command_builder.GET_FETCH_URL_OPTIONS}' failed with exit code: {exit_code}, "
                f"output: '{os.linesep.join(output)}'", is_warning=True)
            return None

        fetch_url = parse_url_output(output)
        if fetch_url:
            debug_log(f"Get remote origin fetch url from git config: {fetch_url}")
        return fetch_url

    async def git_config(self, repository_path: str, config_key: str, config_value: str) -> int:
        self.state.require_ready()
        debug_log(f"Set git config {config_key}")
        return await self._execute_git_command(
            repository_path, "config", command_builder.build_config_options(config_key, config_value))

    async def git_config_exist(self, repository_path: str, config_key: str) -> bool:
        self.state.require_ready()
        debug_log(f"Checking git config {config_key} exist or not")

        # Captured and dropped, the value might be a secret
        output: List[str] = []
        exit_code = await self._execute_git_command(
            repository_path, "config", command_builder.build_config_exist_options(config_key), output=output)
        return exit_code == 0

    async def git_config_unset(self, repository_path: str, config_key: str) -> int:
        self.state.require_ready()
        debug_log(f"Unset git config --unset-all {config_key}")
        return await self._execute_git_command(
            repository_path, "config", command_builder.build_config_unset_options(config_key))

    async def git_disable_auto_gc(self, repository_path: str) -> int:
        self.state.require_ready()
        debug_log("Disable git auto garbage collection.")
        return await self._execute_git_command(repository_path, "config", command_builder.DISABLE_AUTO_GC_OPTIONS)

    async def git_repack(self, repository_path: str) -> int:
        self.state.require_ready()
        debug_log("Compress .git directory.")
        return await self._execute_git_command(repository_path, "repack", command_builder.REPACK_OPTIONS)

    async def git_prune(self, repository_path: str) -> int:
        self.state.require_ready()
        debug_log("Delete unreachable objects under .git directory.")
        return await self._execute_git_command(repository_path, "prune", command_builder.PRUNE_OPTIONS)

    async def git_lfs_prune(self, repository_path: str) -> int:
        self._require_lfs()
        debug_log("Deletes local copies of LFS files which are old and no longer referenced.")
        return await self._execute_git_command(repository_path, "lfs", command_builder.LFS_PRUNE_OPTIONS)

    async def git_count_objects(self, repository_path: str) -> int:
        self.state.require_ready()
        debug_log("Inspect .git directory.")
        return await self._execute_git_command(
            repository_path, "count-objects", command_builder.COUNT_OBJECTS_OPTIONS)

    async def git_lfs_install(self, repository_path: str) -> int:
        self._require_lfs()
        debug_log("Ensure git-lfs installed.")
        return await self._execute_git_command(repository_path, "lfs", command_builder.LFS_INSTALL_OPTIONS)

    async def git_lfs_logs(self, repository_path: str) -> int:
        self._require_lfs()
        debug_log("Get git-lfs logs.")
        return await self._execute_git_command(repository_path, "lfs", command_builder.LFS_LOGS_OPTIONS)

    async def git_version(self) -> Optional[VersionInfo]:
        debug_log("Get git version.")
        return await self._probe_version("version")

    async def git_lfs_version(self) -> Optional[VersionInfo]:
        debug_log("Get git-lfs version.")
        self.state.extension.require_location()
        return await self._probe_version("lfs version")

    async def _probe_version(self, command: str) -> Optional[VersionInfo]:
        output: List[str] = []
        exit_code = await self._execute_git_command(self.config.work_dir, command, output=output)
        if output:
            log(os.linesep.join(output))
        if exit_code != 0:
            return None
        return parse_version_output(output)

"""
Base class for SCM command operations.

This module defines the ScmCommandOperations abstract base class which serves as
the contract for a version-gated source-control command wrapper.
"""

import asyncio
from abc import ABC, abstractmethod
from typing import List, Optional

from .version_gate import VersionInfo


class ScmCommandOperations(ABC):
    """
    Abstract base class for SCM command operations.

    Every operation except load_execution_info, ensure_*_version and the
    version probes requires execution info to have been loaded first.
    Operations returning an int return the raw exit code of the command.
    """

    @abstractmethod
    def ensure_git_version(self, required_version: VersionInfo, throw_on_mismatch: bool) -> bool:
        """
        Checks the installed git version against a required version.

        Args:
            required_version (VersionInfo): Minimum version
            throw_on_mismatch (bool): Raise VersionIncompatibleError instead of returning False

        Returns:
            bool: True if git is at least required_version
        """
        pass

    @abstractmethod
    def ensure_git_lfs_version(self, required_version: VersionInfo, throw_on_mismatch: bool) -> bool:
        """Same as ensure_git_version for git-lfs."""
        pass

    @abstractmethod
    async def load_execution_info(self, use_builtin_git: Optional[bool] = None) -> None:
        """
        Locates git and git-lfs, detects their versions and enforces the minimum git version.

        Args:
            use_builtin_git (bool): Use the git bundled under the externals directory
        """
        pass

    @abstractmethod
    async def git_init(self, repository_path: str) -> int:
        """git init "<repository_path>" """
        pass

    @abstractmethod
    async def git_fetch(self, repository_path: str, remote_name: str, fetch_depth: int,
                        ref_specs: Optional[List[str]] = None, additional_command_line: Optional[str] = None,
                        cancellation_event: Optional[asyncio.Event] = None) -> int:
        """
        git fetch --tags --prune [--prune-tags] --progress --no-recurse-submodules <remote> [--depth=N|--unshallow] [refspecs]

        Args:
            repository_path (str): Repository root
            remote_name (str): Remote to fetch from
            fetch_depth (int): Shallow fetch depth, 0 or less for full history
            ref_specs (List[str]): Ref-specs to fetch; empty entries are ignored
            additional_command_line (str): Inserted before the fetch sub-command
            cancellation_event (asyncio.Event): Set to kill the fetch

        Returns:
            int: Exit code
        """
        pass

    @abstractmethod
    async def git_lfs_fetch(self, repository_path: str, remote_name: str, ref_spec: str,
                            additional_command_line: Optional[str] = None,
                            cancellation_event: Optional[asyncio.Event] = None) -> int:
        """git checkout <ref_spec> -- .lfsconfig, then git lfs fetch <remote> <ref_spec>"""
        pass

    @abstractmethod
    async def git_checkout(self, repository_path: str, committish_or_branch: str,
                           cancellation_event: Optional[asyncio.Event] = None) -> int:
        """git checkout [--progress] --force <committish_or_branch>"""
        pass

    @abstractmethod
    async def git_clean(self, repository_path: str) -> int:
        """git clean -ffdx"""
        pass

    @abstractmethod
    async def git_reset(self, repository_path: str) -> int:
        """git reset --hard HEAD"""
        pass

    @abstractmethod
    async def git_remote_add(self, repository_path: str, remote_name: str, remote_url: str) -> int:
        pass

    @abstractmethod
    async def git_remote_set_url(self, repository_path: str, remote_name: str, remote_url: str) -> int:
        pass

    @abstractmethod
    async def git_remote_set_push_url(self, repository_path: str, remote_name: str, remote_url: str) -> int:
        pass

    @abstractmethod
    async def git_submodule_clean(self, repository_path: str) -> int:
        """git submodule foreach --recursive "git clean -ffdx" """
        pass

    @abstractmethod
    async def git_submodule_reset(self, repository_path: str) -> int:
        """git submodule foreach --recursive "git reset --hard HEAD" """
        pass

    @abstractmethod
    async def git_submodule_update(self, repository_path: str, fetch_depth: int,
                                   additional_command_line: Optional[str] = None, recursive: bool = False,
                                   cancellation_event: Optional[asyncio.Event] = None) -> int:
        """git submodule update --init --force [--depth=N] [--recursive]"""
        pass

    @abstractmethod
    async def git_submodule_sync(self, repository_path: str, recursive: bool = False,
                                 cancellation_event: Optional[asyncio.Event] = None) -> int:
        """git submodule sync [--recursive]"""
        pass

    @abstractmethod
    async def git_get_fetch_url(self, repository_path: str) -> Optional[str]:
        """
        Reads remote.origin.url.

        Returns:
            str: The url, or None if it is missing or not an absolute url
        """
        pass

    @abstractmethod
    async def git_config(self, repository_path: str, config_key: str, config_value: str) -> int:
        pass

    @abstractmethod
    async def git_config_exist(self, repository_path: str, config_key: str) -> bool:
        """
        Checks whether a config key is set. The value is never logged.

        Returns:
            bool: True if git config --get-all <key> exits with 0
        """
        pass

    @abstractmethod
    async def git_config_unset(self, repository_path: str, config_key: str) -> int:
        pass

    @abstractmethod
    async def git_disable_auto_gc(self, repository_path: str) -> int:
        pass

    @abstractmethod
    async def git_repack(self, repository_path: str) -> int:
        pass

    @abstractmethod
    async def git_prune(self, repository_path: str) -> int:
        pass

    @abstractmethod
    async def git_lfs_prune(self, repository_path: str) -> int:
        pass

    @abstractmethod
    async def git_count_objects(self, repository_path: str) -> int:
        pass

    @abstractmethod
    async def git_lfs_install(self, repository_path: str) -> int:
        pass

    @abstractmethod
    async def git_lfs_logs(self, repository_path: str) -> int:
        pass

    @abstractmethod
    async def git_version(self) -> Optional[VersionInfo]:
        pass

    @abstractmethod
    async def git_lfs_version(self) -> Optional[VersionInfo]:
        pass

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
Command Builder Module

One pure function per git operation, turning the detected version and the
call parameters into the option string passed after the git sub-command.
"""

import os
import re
from typing import Iterable, Optional

from .version_gate import VersionInfo

# Minimum versions for version dependent flags (inclusive)
FETCH_PRUNE_TAGS_MIN_VERSION = VersionInfo(2, 17)
CHECKOUT_PROGRESS_MIN_VERSION = VersionInfo(2, 7)
CLEAN_DOUBLE_FORCE_MIN_VERSION = VersionInfo(2, 4)

LFS_CONFIG_FILE = ".lfsconfig"
SHALLOW_MARKER_FILE = os.path.join(".git", "shallow")

RESET_OPTIONS = "--hard HEAD"
GET_FETCH_URL_OPTIONS = "--get remote.origin.url"
DISABLE_AUTO_GC_OPTIONS = "gc.auto 0"
REPACK_OPTIONS = "-adfl"
PRUNE_OPTIONS = "-v"
LFS_PRUNE_OPTIONS = "prune"
COUNT_OBJECTS_OPTIONS = "-v -H"
LFS_INSTALL_OPTIONS = "install --local"
LFS_LOGS_OPTIONS = "logs last"
SUBMODULE_RESET_OPTIONS = 'foreach --recursive "git reset --hard HEAD"'


def join_options(*tokens: Optional[str]) -> str:
    """Space-joins the non-empty tokens."""
    return " ".join(token for token in tokens if token)


def quote_path(path: str) -> str:
    """Wraps a path in double quotes so split_arguments keeps it as one argument."""
    # backslashes are only special in front of a quote, including the closing one
    escaped = re.sub(r'(\\*)"', r'\1\1\\"', path)
    escaped = re.sub(r'(\\+)$', r'\1\1', escaped)
    return f'"{escaped}"'


def is_shallow_repository(repository_path: str) -> bool:
    return os.path.isfile(os.path.join(repository_path, SHALLOW_MARKER_FILE))


def build_init_options(repository_path: str) -> str:
    return quote_path(repository_path)


def fetch_depth_option(fetch_depth: int, shallow_repository: bool) -> Optional[str]:
    """
    --depth=N for a shallow fetch; --unshallow when a full fetch is requested
    on a repository that is currently shallow; nothing otherwise.
    """
    if fetch_depth > 0:
        return f"--depth={fetch_depth}"
    if shallow_repository:
        return "--unshallow"
    return None


def build_fetch_options(git_version: VersionInfo, remote_name: str, fetch_depth: int,
                        ref_specs: Optional[Iterable[Optional[str]]] = None,
                        shallow_repository: bool = False,
                        disable_prune_tags: bool = False) -> str:
    """git fetch --tags --prune [--prune-tags] --progress --no-recurse-submodules <remote> [depth] [refspecs]"""
    prune_tags = None
    if git_version >= FETCH_PRUNE_TAGS_MIN_VERSION and not disable_prune_tags:
        prune_tags = "--prune-tags"

    ref_specs = [ref_spec for ref_spec in (ref_specs or []) if ref_spec]

    return join_options(
        "--tags",
        "--prune",
        prune_tags,
        "--progress",
        "--no-recurse-submodules",
        remote_name,
        fetch_depth_option(fetch_depth, shallow_repository),
        *ref_specs,
    )


def build_lfs_config_checkout_options(ref_spec: str) -> str:
    return join_options(ref_spec, "--", LFS_CONFIG_FILE)


def build_lfs_fetch_options(remote_name: str, ref_spec: Optional[str]) -> str:
    return join_options("fetch", remote_name, ref_spec)


def build_checkout_options(git_version: VersionInfo, committish_or_branch: str) -> str:
    # git 2.7 reports checkout progress to stderr when redirected
    if git_version >= CHECKOUT_PROGRESS_MIN_VERSION:
        return join_options("--progress", "--force", committish_or_branch)
    return join_options("--force", committish_or_branch)


def clean_flags(git_version: VersionInfo) -> str:
    # -ff also removes nested repositories, supported since git 2.4
    if git_version >= CLEAN_DOUBLE_FORCE_MIN_VERSION:
        return "-ffdx"
    return "-fdx"


def build_clean_options(git_version: VersionInfo) -> str:
    return clean_flags(git_version)


def build_submodule_clean_options(git_version: VersionInfo) -> str:
    return f'foreach --recursive "git clean {clean_flags(git_version)}"'


def build_submodule_update_options(fetch_depth: int, recursive: bool) -> str:
    return join_options(
        "update --init --force",
        f"--depth={fetch_depth}" if fetch_depth > 0 else None,
        "--recursive" if recursive else None,
    )


def build_submodule_sync_options(recursive: bool) -> str:
    return join_options("sync", "--recursive" if recursive else None)


def build_remote_add_options(remote_name: str, remote_url: str) -> str:
    return join_options("add", remote_name, remote_url)


def build_remote_set_url_options(remote_name: str, remote_url: str) -> str:
    return join_options("set-url", remote_name, remote_url)


def build_remote_set_push_url_options(remote_name: str, remote_url: str) -> str:
    return join_options("set-url", "--push", remote_name, remote_url)


def build_config_options(config_key: str, config_value: str) -> str:
    return join_options(config_key, config_value)


def build_config_exist_options(config_key: str) -> str:
    return join_options("--get-all", config_key)


def build_config_unset_options(config_key: str) -> str:
    return join_options("--unset-all", config_key)

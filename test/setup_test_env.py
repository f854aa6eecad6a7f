"""Standard test environment setup helper.

This module provides consistent test environment setup across all test files
and helpers for running a Python script in place of the git executable.
"""

import os
import sys
import tempfile
import shutil
from pathlib import Path
from unittest.mock import patch


def get_standard_test_env_vars():
    """
    Get standard environment variables needed for testing.

    Returns:
        dict: Dictionary of environment variables needed for testing
    """
    return {
        # Tool resolution
        'USE_BUILTIN_GIT': 'false',
        'AGENT_EXTERNALS_DIR': '/tmp/externals',
        'AGENT_WORK_DIR': tempfile.gettempdir(),

        # Fetch behaviour
        'DISABLE_FETCH_PRUNE_TAGS': 'false',
        'SCM_GATE_VARIABLES': '{}',

        # Keep PATH so child processes still start
        'PATH': os.environ.get('PATH', ''),

        # Debug and testing flags
        'DEBUG_MODE': 'true',
        'TESTING': 'true'
    }


def setup_test_environment(**overrides):
    """
    Set up standard test environment with all required variables.

    Returns:
        unittest.mock._patch: Environment patch that should be started/stopped by caller
    """
    env_vars = get_standard_test_env_vars()
    env_vars.update(overrides)
    return patch.dict(os.environ, env_vars, clear=True)


class TestEnvironmentMixin:
    """
    Mixin class to provide standard test environment setup.

    Usage:
        class TestMyClass(unittest.TestCase, TestEnvironmentMixin):
            def setUp(self):
                self.setup_standard_test_env()

            def tearDown(self):
                self.cleanup_standard_test_env()
    """

    def setup_standard_test_env(self, **overrides):
        """Set up standard test environment."""
        self._env_patcher = setup_test_environment(**overrides)
        self._env_patcher.start()

    def cleanup_standard_test_env(self):
        """Clean up standard test environment."""
        if hasattr(self, '_env_patcher'):
            self._env_patcher.stop()


def create_temp_repo_dir(shallow=False):
    """
    Create a temporary directory laid out like a git work tree.

    Args:
        shallow: Also create the .git/shallow marker

    Returns:
        pathlib.Path: Path to temporary directory
    """
    repo_dir = Path(tempfile.mkdtemp())
    (repo_dir / '.git').mkdir()
    if shallow:
        (repo_dir / '.git' / 'shallow').write_text('0123456789abcdef\n')
    return repo_dir


def cleanup_temp_dir(temp_dir):
    """
    Clean up temporary directory.

    Args:
        temp_dir: Path to temporary directory to clean up
    """
    if temp_dir and temp_dir.exists():
        shutil.rmtree(temp_dir, ignore_errors=True)


def write_script(directory, name, source):
    """
    Write a Python script that stands in for a git child process.

    Returns:
        str: Path to the script, to be run with sys.executable
    """
    script_path = Path(directory) / name
    script_path.write_text(source)
    return str(script_path)


PYTHON_EXECUTABLE = sys.executable

"""Test configuration and setup for pytest.

Puts the project root and the test directory on sys.path so test modules can
import `src` and `setup_test_env` directly, and drops the shared configuration
between tests so environment patches take effect.
"""

import sys
from pathlib import Path

import pytest

# Add the project root to Python path so that 'src' imports work
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# Add test directory to path for test helpers
test_dir = Path(__file__).parent
sys.path.insert(0, str(test_dir))


@pytest.fixture(autouse=True)
def _fresh_config():
    from src.config import reset_config
    reset_config()
    yield
    reset_config()

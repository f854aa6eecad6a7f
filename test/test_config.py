"""Tests for the environment driven configuration and its singleton accessors."""
import os
import unittest
from pathlib import Path
from unittest.mock import patch

from setup_test_env import TestEnvironmentMixin
from src.config import ScmGateConfig, get_config, reset_config


class TestScmGateConfig(unittest.TestCase):

    def test_defaults(self):
        config = ScmGateConfig(env_vars={})

        self.assertFalse(config.use_builtin_git)
        self.assertFalse(config.disable_fetch_prune_tags)
        self.assertEqual(config.public_variables, {})
        self.assertEqual(config.work_dir, Path(os.getcwd()).resolve())
        self.assertEqual(config.externals_dir.name, "externals")

    def test_values_from_environment(self):
        config = ScmGateConfig(env_vars={
            'USE_BUILTIN_GIT': 'TRUE',
            'AGENT_EXTERNALS_DIR': '/opt/agent/externals',
            'AGENT_WORK_DIR': '/opt/agent/_work',
            'DISABLE_FETCH_PRUNE_TAGS': 'true',
            'SCM_GATE_VARIABLES': '{"system.debug": "true", "build.reason": null, "retries": 3}',
        })

        self.assertTrue(config.use_builtin_git)
        self.assertTrue(config.disable_fetch_prune_tags)
        self.assertEqual(config.externals_dir, Path('/opt/agent/externals').resolve())
        self.assertEqual(config.work_dir, Path('/opt/agent/_work').resolve())
        self.assertEqual(config.public_variables, {
            "system.debug": "true",
            "build.reason": None,
            "retries": "3",
        })

    @patch('src.config.log')
    def test_invalid_variables_json(self, mock_log):
        config = ScmGateConfig(env_vars={'SCM_GATE_VARIABLES': '{not json'})
        self.assertEqual(config.public_variables, {})
        mock_log.assert_called_once()
        self.assertTrue(mock_log.call_args.kwargs.get('is_error'))

    @patch('src.config.log')
    def test_variables_must_be_an_object(self, mock_log):
        config = ScmGateConfig(env_vars={'SCM_GATE_VARIABLES': '["a", "b"]'})
        self.assertEqual(config.public_variables, {})
        self.assertTrue(mock_log.call_args.kwargs.get('is_warning'))

    def test_empty_values_fall_back_to_defaults(self):
        config = ScmGateConfig(env_vars={'AGENT_WORK_DIR': '', 'USE_BUILTIN_GIT': ''})
        self.assertEqual(config.work_dir, Path(os.getcwd()).resolve())
        self.assertFalse(config.use_builtin_git)
        self.assertIsNone(config._get_env_var('SOME_UNSET_SETTING'))


class TestConfigSingleton(unittest.TestCase, TestEnvironmentMixin):

    def setUp(self):
        reset_config()
        self.setup_standard_test_env(USE_BUILTIN_GIT='true')

    def tearDown(self):
        self.cleanup_standard_test_env()
        reset_config()

    def test_get_config_returns_same_instance(self):
        instances = [get_config() for _ in range(5)]
        for instance in instances[1:]:
            self.assertIs(instances[0], instance)
        self.assertTrue(instances[0].use_builtin_git)

    def test_reset_config_reloads(self):
        first = get_config()
        os.environ['USE_BUILTIN_GIT'] = 'false'
        reset_config()
        second = get_config()

        self.assertIsNot(first, second)
        self.assertFalse(second.use_builtin_git)


if __name__ == '__main__':
    unittest.main()

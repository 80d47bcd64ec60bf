# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from actionflow_core.cli.config import ActionFlowConfig, get_config, load_and_validate_config


class TestDefaults:
    def test_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            cfg = ActionFlowConfig()
        assert cfg.log_level == "WARNING"
        assert cfg.log_file is None
        assert cfg.max_log_file_bytes is None
        assert cfg.log_backup_count is None
        assert cfg.output_format == "text"
        assert cfg.warnings_as_errors is False
        assert cfg.extensions == (".yml", ".yaml")


class TestEnvOverrides:
    """ACTIONFLOW_* env vars override config values."""

    @pytest.mark.parametrize(
        "env_var, field, value, expected",
        [
            ("ACTIONFLOW_LOG_LEVEL", "log_level", "INFO", "INFO"),
            ("ACTIONFLOW_LOG_LEVEL", "log_level", "debug", "DEBUG"),
            ("ACTIONFLOW_LOG_FILE", "log_file", "/tmp/actionflow.log", "/tmp/actionflow.log"),
            ("ACTIONFLOW_MAX_LOG_FILE_BYTES", "max_log_file_bytes", "1048576", 1048576),
            ("ACTIONFLOW_LOG_BACKUP_COUNT", "log_backup_count", "3", 3),
            ("ACTIONFLOW_OUTPUT_FORMAT", "output_format", "TABLE", "table"),
            ("ACTIONFLOW_WARNINGS_AS_ERRORS", "warnings_as_errors", "true", True),
            ("ACTIONFLOW_WORKFLOW_EXTENSIONS", "workflow_extensions", ".yml, .wf", ".yml,.wf"),
        ],
    )
    def test_env_var_overrides_field(self, env_var, field, value, expected):
        with patch.dict(os.environ, {env_var: value}):
            cfg = ActionFlowConfig()
            assert getattr(cfg, field) == expected


class TestValidation:
    """Bad config must fail at startup, not halfway through a run."""

    @pytest.mark.parametrize(
        "env_var, value, error_match",
        [
            ("ACTIONFLOW_LOG_LEVEL", "TRACE", "not a valid log level"),
            ("ACTIONFLOW_LOG_LEVEL", "verbose", "not a valid log level"),
            ("ACTIONFLOW_MAX_LOG_FILE_BYTES", "-1", "must be >= 0"),
            ("ACTIONFLOW_LOG_BACKUP_COUNT", "-1", "must be >= 0"),
            ("ACTIONFLOW_OUTPUT_FORMAT", "json", "is not supported"),
            ("ACTIONFLOW_WORKFLOW_EXTENSIONS", " , ", "at least one extension"),
            ("ACTIONFLOW_WORKFLOW_EXTENSIONS", "yml", "must start with"),
        ],
    )
    def test_bad_value_rejected(self, env_var, value, error_match):
        with patch.dict(os.environ, {env_var: value}):
            with pytest.raises(ValidationError, match=error_match):
                ActionFlowConfig()

    def test_zero_backup_count_allowed(self):
        with patch.dict(os.environ, {"ACTIONFLOW_LOG_BACKUP_COUNT": "0"}):
            assert ActionFlowConfig().log_backup_count == 0


class TestSingleton:
    def test_get_config_is_cached(self):
        assert get_config() is get_config()

    def test_load_and_validate_replaces_cache(self):
        first = get_config()
        with patch.dict(os.environ, {"ACTIONFLOW_LOG_LEVEL": "ERROR"}):
            cfg = load_and_validate_config()
        assert cfg is not first
        assert get_config() is cfg
        assert cfg.log_level == "ERROR"

    def test_load_and_validate_raises(self):
        with patch.dict(os.environ, {"ACTIONFLOW_LOG_LEVEL": "nope"}):
            with pytest.raises(ValidationError):
                load_and_validate_config()

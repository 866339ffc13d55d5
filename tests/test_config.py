# Copyright (c) 2023-2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

"""Tests for configuration module."""

import logging

import pytest
from pydantic import ValidationError

from causalchain.config import ChainSettings, settings


class TestChainSettings:
    def test_defaults(self, monkeypatch):
        """Defaults apply without environment overrides."""
        monkeypatch.delenv("CAUSALCHAIN_LOG_LEVEL", raising=False)
        monkeypatch.delenv("CAUSALCHAIN_PROPAGATE_SUBSCRIBER_ERRORS", raising=False)
        config = ChainSettings(_env_file=None)
        assert config.LOG_LEVEL == "INFO"
        assert config.PROPAGATE_SUBSCRIBER_ERRORS is False

    def test_env_override(self, monkeypatch):
        """CAUSALCHAIN_ variables override the defaults."""
        monkeypatch.setenv("CAUSALCHAIN_LOG_LEVEL", "debug")
        monkeypatch.setenv("CAUSALCHAIN_PROPAGATE_SUBSCRIBER_ERRORS", "true")
        config = ChainSettings(_env_file=None)
        assert config.LOG_LEVEL == "DEBUG"
        assert config.PROPAGATE_SUBSCRIBER_ERRORS is True

    def test_invalid_log_level(self):
        """An unknown log level fails validation."""
        with pytest.raises(ValidationError):
            ChainSettings(LOG_LEVEL="chatty", _env_file=None)

    def test_frozen(self):
        """Settings cannot be reassigned."""
        with pytest.raises(ValidationError):
            settings.LOG_LEVEL = "DEBUG"

    def test_package_logger_level(self):
        """The package logger takes its level from settings."""
        import causalchain

        assert causalchain.logger.level == logging.getLevelName(settings.LOG_LEVEL)

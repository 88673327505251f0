"""Tests for configuration defaults and logging setup."""

import logging

import pytest

from subtitle_aligner import config


class TestDefaults:

    def test_timing_constants(self):
        assert config.FALLBACK_SLOT_MS == 2000
        assert config.MIN_DURATION_MS == 500

    def test_caption_extension(self):
        assert config.CAPTION_EXTENSION == ".srt"

    def test_language_is_lowercase(self):
        assert config.DEFAULT_CAPTION_LANGUAGE
        assert config.DEFAULT_CAPTION_LANGUAGE == config.DEFAULT_CAPTION_LANGUAGE.lower()


class TestConfigureLogging:

    @pytest.fixture
    def basic_config_calls(self, monkeypatch):
        calls = []
        monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))
        return calls

    def test_explicit_level(self, basic_config_calls):
        config.configure_logging("debug")
        assert basic_config_calls == [{"level": logging.DEBUG, "format": config.LOG_FORMAT}]

    def test_unknown_level_falls_back_to_warning(self, basic_config_calls):
        config.configure_logging("chatty")
        assert basic_config_calls[0]["level"] == logging.WARNING

    def test_default_level_from_environment_setting(self, basic_config_calls, monkeypatch):
        monkeypatch.setattr(config, "LOG_LEVEL", "INFO")
        config.configure_logging()
        assert basic_config_calls[0]["level"] == logging.INFO

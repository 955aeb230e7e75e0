"""Tests for settings loaded from the environment."""

import pytest

from tube2tldr import config
from tube2tldr.config import Settings
from tube2tldr.errors import InvalidInputError

ENV_VARS = [
    "OPENAI_API_KEY",
    "OPENAI_MODEL",
    "OPENAI_TIMEOUT",
    "TUBE2TLDR_MAX_WORDS",
    "TUBE2TLDR_TOKEN_CEILING",
    "TUBE2TLDR_MAX_LEVELS",
    "TUBE2TLDR_SETTLE_SECONDS",
    "TUBE2TLDR_SETTLE_STRATEGY",
    "TUBE2TLDR_DEBOUNCE_SECONDS",
    "TUBE2TLDR_SUMMARY_TYPE",
    "TUBE2TLDR_SUMMARY_FORMAT",
    "TUBE2TLDR_SUMMARY_LENGTH",
    "TUBE2TLDR_HEADLESS",
]


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(config, "load_dotenv", lambda override=False: False)
    return monkeypatch


def test_defaults(clean_env):
    settings = Settings.from_env()
    assert settings.openai_api_key == ""
    assert settings.max_words_per_chunk == 700
    assert settings.settle_strategy == "fixed"
    assert settings.headless is True


def test_environment_values(clean_env):
    clean_env.setenv("OPENAI_API_KEY", "sk-test")
    clean_env.setenv("OPENAI_MODEL", "gpt-test")
    clean_env.setenv("TUBE2TLDR_MAX_WORDS", "350")
    clean_env.setenv("TUBE2TLDR_SETTLE_STRATEGY", "poll")
    clean_env.setenv("TUBE2TLDR_HEADLESS", "no")

    settings = Settings.from_env()

    assert settings.openai_api_key == "sk-test"
    assert settings.model == "gpt-test"
    assert settings.max_words_per_chunk == 350
    assert settings.settle_strategy == "poll"
    assert settings.headless is False


def test_overrides_win_and_none_is_ignored(clean_env):
    clean_env.setenv("TUBE2TLDR_MAX_WORDS", "350")
    settings = Settings.from_env(max_words_per_chunk=100, verbose=None)
    assert settings.max_words_per_chunk == 100
    assert settings.verbose is False


def test_bad_integer_is_rejected(clean_env):
    clean_env.setenv("TUBE2TLDR_MAX_WORDS", "lots")
    with pytest.raises(InvalidInputError, match="TUBE2TLDR_MAX_WORDS"):
        Settings.from_env()


@pytest.mark.parametrize(
    "kwargs",
    [
        {"max_words_per_chunk": 0},
        {"max_levels": 0},
        {"max_empty_lines": -1},
        {"settle_seconds": -1.0},
        {"settle_strategy": "forever"},
    ],
)
def test_invalid_settings(kwargs):
    with pytest.raises(InvalidInputError):
        Settings(**kwargs)


def test_require_api_key():
    assert Settings(openai_api_key="sk-test").require_api_key() == "sk-test"
    with pytest.raises(InvalidInputError, match="OPENAI_API_KEY"):
        Settings().require_api_key()

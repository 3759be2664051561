"""Tests for startup configuration."""

import pytest

from openrouter_mcp.config import (
    DEFAULT_MODEL_EXAMPLES,
    ConfigError,
    GatekeeperMode,
    load_config,
    parse_allowed_models,
)


def test_api_key_is_required():
    with pytest.raises(ConfigError, match="OPENROUTER_API_KEY"):
        load_config({})


def test_defaults():
    config = load_config({"OPENROUTER_API_KEY": "sk-test"})

    assert config.api_key == "sk-test"
    assert config.gatekeeper_mode is GatekeeperMode.PERMISSIVE
    assert config.allowed_models == ()
    assert config.default_system_prompt is None
    assert config.model_examples == DEFAULT_MODEL_EXAMPLES
    assert config.dispatch_timeout == 120.0
    assert config.max_files == 10
    assert config.max_file_size == 153600


def test_allow_list_switches_to_restrictive_mode():
    config = load_config(
        {"OPENROUTER_API_KEY": "k", "OPENROUTER_ALLOWED_MODELS": " a/one , b/two,,a/one "}
    )

    assert config.gatekeeper_mode is GatekeeperMode.RESTRICTIVE
    assert config.allowed_models == ("a/one", "b/two")


def test_required_allow_list_missing_is_fatal():
    with pytest.raises(ConfigError, match="OPENROUTER_ALLOWED_MODELS"):
        load_config({"OPENROUTER_API_KEY": "k", "OPENROUTER_REQUIRE_ALLOWED_MODELS": "true"})


def test_numeric_settings():
    config = load_config(
        {
            "OPENROUTER_API_KEY": "k",
            "OPENROUTER_DISPATCH_TIMEOUT": "0",
            "OPENROUTER_MAX_FILES": "3",
            "OPENROUTER_MAX_FILE_SIZE": "2048",
        }
    )

    assert config.dispatch_timeout is None
    assert config.max_files == 3
    assert config.max_file_size == 2048


@pytest.mark.parametrize(
    "name,value",
    [
        ("OPENROUTER_DISPATCH_TIMEOUT", "soon"),
        ("OPENROUTER_MAX_FILES", "ten"),
        ("OPENROUTER_MAX_FILE_SIZE", "0"),
    ],
)
def test_malformed_numbers_are_fatal(name, value):
    with pytest.raises(ConfigError, match=name):
        load_config({"OPENROUTER_API_KEY": "k", name: value})


def test_repr_hides_credential():
    config = load_config({"OPENROUTER_API_KEY": "sk-secret"})
    assert "sk-secret" not in repr(config)


def test_parse_allowed_models_empty():
    assert parse_allowed_models(None) == ()
    assert parse_allowed_models(" , ") == ()

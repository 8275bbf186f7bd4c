from types import SimpleNamespace

import pytest

import config


def test_api_base_url_resolution_order(monkeypatch):
    fake_secrets: dict[str, object] = {"QUOTE_API_BASE_URL": "https://secret.example/api/"}
    monkeypatch.setattr(config, "st", SimpleNamespace(secrets=fake_secrets), raising=False)
    monkeypatch.setenv("QUOTE_API_BASE_URL", "https://env.example/api")

    # Streamlit secret wins over the environment.
    assert config.get_api_base_url() == "https://secret.example/api"

    # Environment variable is used when no secret is configured.
    fake_secrets.clear()
    assert config.get_api_base_url() == "https://env.example/api"

    # Built-in default is the final fallback.
    monkeypatch.delenv("QUOTE_API_BASE_URL")
    assert config.get_api_base_url() == config.DEFAULT_API_BASE_URL


def test_nested_secret_sections_are_ignored(monkeypatch):
    fake_secrets = {"QUOTE_API_BASE_URL": {"url": "https://nested.example"}}
    monkeypatch.setattr(config, "st", SimpleNamespace(secrets=fake_secrets), raising=False)
    monkeypatch.delenv("QUOTE_API_BASE_URL", raising=False)

    assert config.get_api_base_url() == config.DEFAULT_API_BASE_URL


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (None, config.DEFAULT_API_TIMEOUT),
        ("", config.DEFAULT_API_TIMEOUT),
        ("  2.5 ", 2.5),
        (7, 7.0),
        ("soon", config.DEFAULT_API_TIMEOUT),
        ("-1", config.DEFAULT_API_TIMEOUT),
        (0, config.DEFAULT_API_TIMEOUT),
        (True, config.DEFAULT_API_TIMEOUT),
    ],
)
def test_normalise_timeout(raw, expected):
    assert config._normalise_timeout(raw) == expected


def test_normalise_log_level_and_flags():
    assert config._normalise_log_level("debug") == "DEBUG"
    assert config._normalise_log_level("verbose") == "INFO"
    assert config._normalise_log_level(None) == "INFO"
    assert config._is_truthy_flag(" Yes ")
    assert not config._is_truthy_flag("0")
    assert not config._is_truthy_flag(None)

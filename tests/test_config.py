"""Tests for settings loading."""

from __future__ import annotations

import pydantic
import pytest

from sns_client import config
from sns_client.config import DEFAULT_REGISTRAR, Settings, load_settings


@pytest.fixture
def project_root(tmp_path, monkeypatch):
    monkeypatch.setattr(config, "PROJECT_ROOT", tmp_path)
    monkeypatch.delenv("SNS_RPC_URL", raising=False)
    monkeypatch.delenv("SNS_ACCOUNT", raising=False)
    return tmp_path


def test_defaults():
    settings = Settings()
    assert settings.cache_enabled
    assert settings.cache_ttl == 300
    assert settings.availability_ttl == 30
    assert settings.pricing_ttl == 1800
    assert settings.retry_attempts == 3
    assert settings.contracts["registrar"] == DEFAULT_REGISTRAR


def test_strings_are_stripped():
    settings = Settings(rpc_url="  http://gateway.test \n", account=" 0xabc ")
    assert settings.rpc_url == "http://gateway.test"
    assert settings.account == "0xabc"


def test_bounds_are_enforced():
    with pytest.raises(pydantic.ValidationError):
        Settings(retry_attempts=0)
    with pytest.raises(pydantic.ValidationError):
        Settings(cache_ttl=0)


def test_yaml_values(project_root):
    (project_root / "settings.yaml").write_text(
        "rpc_url: http://yaml.test\ncache_ttl: 60\nresolver_address: '0xRES'\n"
    )
    settings = load_settings()
    assert settings.rpc_url == "http://yaml.test"
    assert settings.cache_ttl == 60
    assert settings.contracts["resolver"] == "0xRES"


def test_env_overrides_yaml(project_root, monkeypatch):
    (project_root / "settings.yaml").write_text("rpc_url: http://yaml.test\n")
    monkeypatch.setenv("SNS_RPC_URL", "http://env.test")
    monkeypatch.setenv("SNS_ACCOUNT", "0xme")
    settings = load_settings()
    assert settings.rpc_url == "http://env.test"
    assert settings.account == "0xme"


def test_broken_yaml_falls_back_to_defaults(project_root, caplog):
    (project_root / "settings.yaml").write_text("rpc_url: [unclosed\n")
    settings = load_settings()
    assert settings.rpc_url == ""
    assert "Failed to parse settings.yaml" in caplog.text


def test_missing_files(project_root):
    assert load_settings() == Settings()

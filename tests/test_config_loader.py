"""Tests for settings loading."""

from pathlib import Path

import pytest

from config_loader import (
    DEFAULT_IPFS_URL,
    DEFAULT_PUMPPORTAL_URL,
    Settings,
    load_settings,
)
from core.exceptions import ConfigurationError

ENV_VARS = (
    "HELIUS_RPC_URL",
    "SOLANA_NODE_RPC_ENDPOINT",
    "KEYS_FOLDER",
    "PUMPPORTAL_API_URL",
    "PUMPFUN_IPFS_URL",
    "SOLANA_COMMITMENT",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    # setenv first so values loaded from .env files are removed again afterwards
    for name in ENV_VARS:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)


def test_defaults():
    settings = load_settings()

    assert settings.rpc_endpoint is None
    assert settings.keys_folder == Path(".keys")
    assert settings.pumpportal_url == DEFAULT_PUMPPORTAL_URL
    assert settings.ipfs_url == DEFAULT_IPFS_URL
    assert settings.commitment == "confirmed"


def test_helius_url_wins_over_fallback(monkeypatch):
    monkeypatch.setenv("HELIUS_RPC_URL", "https://helius.example")
    monkeypatch.setenv("SOLANA_NODE_RPC_ENDPOINT", "https://node.example")

    assert load_settings().require_rpc() == "https://helius.example"


def test_fallback_rpc_variable(monkeypatch):
    monkeypatch.setenv("SOLANA_NODE_RPC_ENDPOINT", "https://node.example")
    assert load_settings().rpc_endpoint == "https://node.example"


def test_missing_rpc_is_a_configuration_error():
    with pytest.raises(ConfigurationError, match="HELIUS_RPC_URL environment variable is not set"):
        load_settings().require_rpc()


def test_env_file(tmp_path):
    env_file = tmp_path / "custom.env"
    env_file.write_text(
        "HELIUS_RPC_URL=https://from-file.example\n"
        f"KEYS_FOLDER={tmp_path / 'wallets'}\n"
        "SOLANA_COMMITMENT=finalized\n"
    )

    settings = load_settings(env_file)

    assert settings.rpc_endpoint == "https://from-file.example"
    assert settings.keys_folder == tmp_path / "wallets"
    assert settings.commitment == "finalized"


def test_process_environment_wins_over_env_file(monkeypatch, tmp_path):
    monkeypatch.setenv("HELIUS_RPC_URL", "https://process.example")
    env_file = tmp_path / "custom.env"
    env_file.write_text("HELIUS_RPC_URL=https://from-file.example\n")

    assert load_settings(env_file).rpc_endpoint == "https://process.example"


def test_missing_env_file(tmp_path):
    with pytest.raises(ConfigurationError, match="Env file not found"):
        load_settings(tmp_path / "nope.env")


def test_invalid_commitment(monkeypatch):
    monkeypatch.setenv("SOLANA_COMMITMENT", "eventually")
    with pytest.raises(ConfigurationError, match="SOLANA_COMMITMENT"):
        load_settings()


def test_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("KEYS_FOLDER", "/from/env")

    settings = load_settings(keys_folder=tmp_path / "cli", rpc_endpoint=None)

    assert settings.keys_folder == tmp_path / "cli"


def test_settings_are_frozen():
    settings = Settings(keys_folder=Path(".keys"))
    with pytest.raises(AttributeError):
        settings.rpc_endpoint = "x"

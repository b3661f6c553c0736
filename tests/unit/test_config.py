"""
Runtime Configuration Unit Tests
Tests for core/config/runtime.py
"""

import json

import pytest

from core.config.runtime import (
    ChainConfig,
    RuntimeConfig,
    ServerConfig,
    StorageConfig,
)


class TestDefaults:
    """Default values."""

    def test_defaults(self):
        config = RuntimeConfig()
        assert config.storage.data_dir == "./data"
        assert config.chain.name == "local"
        assert config.chain.chain_id == 31337
        assert config.chain.ledger_url is None
        assert config.server.port == 3000
        assert config.server.log_level == "INFO"

    def test_to_dict_roundtrip(self):
        config = RuntimeConfig(chain=ChainConfig(name="testnet", chain_id=5))
        assert RuntimeConfig.from_dict(config.to_dict()) == config


class TestFromDict:
    """Partial dictionaries."""

    def test_partial(self):
        config = RuntimeConfig.from_dict({"chain": {"name": "sepolia"}})
        assert config.chain.name == "sepolia"
        assert config.chain.chain_id == 31337
        assert config.storage == StorageConfig()
        assert config.server == ServerConfig()

    def test_extra_kept(self):
        assert RuntimeConfig.from_dict({"extra": {"k": "v"}}).extra == {"k": "v"}

    def test_unknown_key_rejected(self):
        with pytest.raises(TypeError):
            RuntimeConfig.from_dict({"chain": {"rpc": "x"}})


class TestFromEnv:
    """Environment variable overrides."""

    def test_env(self, monkeypatch):
        monkeypatch.setenv("PROOFTRACE_DATA_DIR", "/tmp/pt")
        monkeypatch.setenv("PROOFTRACE_CHAIN", "testnet")
        monkeypatch.setenv("PROOFTRACE_CHAIN_ID", "5")
        monkeypatch.setenv("PROOFTRACE_LEDGER_URL", "http://ledger:3000/ledger")
        monkeypatch.setenv("PROOFTRACE_PORT", "8080")
        monkeypatch.setenv("PROOFTRACE_LOG_LEVEL", "debug")

        config = RuntimeConfig.from_env()
        assert config.storage.data_dir == "/tmp/pt"
        assert config.chain.name == "testnet"
        assert config.chain.chain_id == 5
        assert config.chain.ledger_url == "http://ledger:3000/ledger"
        assert config.server.port == 8080
        assert config.server.log_level == "DEBUG"

    def test_overrides_leave_original_untouched(self, monkeypatch):
        base = RuntimeConfig()
        monkeypatch.setenv("PROOFTRACE_CHAIN", "testnet")
        overridden = base.with_env_overrides()
        assert overridden.chain.name == "testnet"
        assert base.chain.name == "local"

    def test_no_overrides_returns_self(self):
        config = RuntimeConfig()
        assert config.with_env_overrides() is config


class TestFromFile:
    """JSON and YAML files."""

    def test_json(self, tmp_path):
        path = tmp_path / "prooftrace.json"
        path.write_text(json.dumps({"storage": {"data_dir": "/var/pt"}}))
        assert RuntimeConfig.from_file(path).storage.data_dir == "/var/pt"

    def test_yaml(self, tmp_path):
        path = tmp_path / "prooftrace.yaml"
        path.write_text("chain:\n  name: testnet\n  chain_id: 5\n")
        config = RuntimeConfig.from_file(path)
        assert config.chain.name == "testnet"
        assert config.chain.chain_id == 5

    def test_empty_yaml(self, tmp_path):
        path = tmp_path / "empty.yml"
        path.write_text("")
        assert RuntimeConfig.from_file(path) == RuntimeConfig()

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            RuntimeConfig.from_file(tmp_path / "nope.json")


class TestDiscover:
    """Config file discovery."""

    def test_explicit_path_with_env(self, tmp_path, monkeypatch):
        path = tmp_path / "custom.json"
        path.write_text(json.dumps({"chain": {"name": "from-file"}}))
        monkeypatch.setenv("PROOFTRACE_DATA_DIR", "/from/env")

        config = RuntimeConfig.discover(path)
        assert config.chain.name == "from-file"
        assert config.storage.data_dir == "/from/env"

    def test_search_path_in_cwd(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "prooftrace.json").write_text(json.dumps({"server": {"port": 4000}}))
        assert RuntimeConfig.discover().server.port == 4000

    def test_explicit_missing_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            RuntimeConfig.discover(tmp_path / "missing.json")

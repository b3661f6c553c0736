"""
Runtime Configuration

Central configuration for storage, the anchoring chain and the API server.
"""

from __future__ import annotations

import copy
import json
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

load_dotenv()


# Searched in order when no explicit config file is given
CONFIG_SEARCH_PATHS = (
    Path("prooftrace.json"),
    Path(".prooftrace.json"),
    Path.home() / ".config" / "prooftrace" / "config.json",
)


@dataclass
class StorageConfig:
    """Where the JSON store keeps its files."""
    data_dir: str = "./data"


@dataclass
class ChainConfig:
    """
    Identity of the ledger roots are anchored to.

    ledger_url, when set, enables the live confirmation stage of verification
    against an HTTP ledger read endpoint.
    """
    name: str = "local"
    chain_id: int = 31337
    ledger_url: Optional[str] = None
    timeout: float = 10.0


@dataclass
class ServerConfig:
    """Configuration for the HTTP API server."""
    host: str = "127.0.0.1"
    port: int = 3000
    log_level: str = "INFO"


@dataclass
class RuntimeConfig:
    """
    Complete runtime configuration for ProofTrace.

    Can be loaded from:
    - Environment variables
    - JSON or YAML file
    - Programmatic construction
    """
    storage: StorageConfig = field(default_factory=StorageConfig)
    chain: ChainConfig = field(default_factory=ChainConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    extra: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        This is the SINGLE source of truth for all env var reading.

        Supported variables:
        - PROOFTRACE_DATA_DIR: Store directory
        - PROOFTRACE_CHAIN: Chain name
        - PROOFTRACE_CHAIN_ID: Numeric chain id
        - PROOFTRACE_LEDGER_URL: Ledger read endpoint for live confirmation
        - PROOFTRACE_HOST / PROOFTRACE_PORT: API bind address
        - PROOFTRACE_LOG_LEVEL: Logging level name
        """
        overrides: dict[str, Any] = {}

        if os.getenv("PROOFTRACE_DATA_DIR"):
            overrides.setdefault("storage", {})["data_dir"] = os.getenv("PROOFTRACE_DATA_DIR")

        if os.getenv("PROOFTRACE_CHAIN"):
            overrides.setdefault("chain", {})["name"] = os.getenv("PROOFTRACE_CHAIN")
        if os.getenv("PROOFTRACE_CHAIN_ID"):
            overrides.setdefault("chain", {})["chain_id"] = int(os.environ["PROOFTRACE_CHAIN_ID"])
        if os.getenv("PROOFTRACE_LEDGER_URL"):
            overrides.setdefault("chain", {})["ledger_url"] = os.getenv("PROOFTRACE_LEDGER_URL")

        if os.getenv("PROOFTRACE_HOST"):
            overrides.setdefault("server", {})["host"] = os.getenv("PROOFTRACE_HOST")
        if os.getenv("PROOFTRACE_PORT"):
            overrides.setdefault("server", {})["port"] = int(os.environ["PROOFTRACE_PORT"])
        if os.getenv("PROOFTRACE_LOG_LEVEL"):
            overrides.setdefault("server", {})["log_level"] = os.environ["PROOFTRACE_LOG_LEVEL"].upper()

        return overrides

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """
        Load configuration purely from environment variables.

        Uses defaults for any values not specified in env vars.
        """
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_file(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a JSON or YAML file (by extension)."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        if path.suffix in (".yaml", ".yml"):
            import yaml
            with open(path) as f:
                data = yaml.safe_load(f)
        else:
            with open(path) as f:
                data = json.load(f)

        return cls.from_dict(data or {})

    @classmethod
    def discover(cls, explicit: str | Path | None = None) -> "RuntimeConfig":
        """
        Load the first config file found, then overlay environment variables.

        An explicit path must exist; otherwise CONFIG_SEARCH_PATHS are tried
        and defaults used when none exists.
        """
        if explicit is not None:
            return cls.from_file(explicit).with_env_overrides()
        for candidate in CONFIG_SEARCH_PATHS:
            if candidate.exists():
                return cls.from_file(candidate).with_env_overrides()
        return cls.from_env()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        """Load configuration from a dictionary (supports partial data)."""
        storage_data = data.get("storage", {})
        chain_data = data.get("chain", {})
        server_data = data.get("server", {})

        return cls(
            storage=StorageConfig(**storage_data) if storage_data else StorageConfig(),
            chain=ChainConfig(**chain_data) if chain_data else ChainConfig(),
            server=ServerConfig(**server_data) if server_data else ServerConfig(),
            extra=data.get("extra", {}),
        )

    def with_env_overrides(self) -> "RuntimeConfig":
        """
        Return a new config with environment variable overrides applied.

        This allows loading from a config file first, then overlaying env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        new_config = copy.deepcopy(self)
        for section, values in overrides.items():
            target = getattr(new_config, section)
            for key, value in values.items():
                setattr(target, key, value)
        return new_config

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return {
            "storage": asdict(self.storage),
            "chain": asdict(self.chain),
            "server": asdict(self.server),
            "extra": self.extra,
        }

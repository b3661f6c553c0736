"""
Module 09C - CLI Configuration

Loads the runtime configuration for the CLI and opens the local workspace
(store, registry and optional ledger reader) that commands operate on.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from core.config.runtime import RuntimeConfig
from core.ledger.http_reader import HttpLedgerReader
from core.ledger.registry import LocalRegistry
from core.storage.json_files import JsonFileStore
from core.verifier.verifier import InferenceVerifier


logger = logging.getLogger(__name__)


def load_config(
    config_path: Path | None = None,
    data_dir: str | None = None,
) -> RuntimeConfig:
    """
    Load configuration from file and environment.

    Priority:
    1. --data-dir flag
    2. Environment variables (PROOFTRACE_* prefix)
    3. Config file (explicit path or the default search paths)
    4. Default values
    """
    config = RuntimeConfig.discover(config_path)
    if data_dir:
        config.storage.data_dir = data_dir
    return config


def get_default_config_template() -> str:
    """Get a template configuration file content."""
    return json.dumps(RuntimeConfig().to_dict(), indent=2) + "\n"


@dataclass
class Workspace:
    """Collaborators shared by the CLI commands."""

    config: RuntimeConfig
    store: JsonFileStore
    registry: LocalRegistry
    ledger: Optional[HttpLedgerReader] = None

    def verifier(self) -> InferenceVerifier:
        return InferenceVerifier(self.store, self.store, ledger=self.ledger)


def open_workspace(config: RuntimeConfig, ledger_url: str | None = None) -> Workspace:
    """
    Open the data directory named by config.

    The local registry is rebuilt from the anchors already on disk so block
    heights continue where the last run stopped.
    """
    store = JsonFileStore(config.storage.data_dir)
    registry = LocalRegistry.from_anchors(store.all_anchors(), chain_id=config.chain.chain_id)

    url = ledger_url or config.chain.ledger_url
    ledger = HttpLedgerReader(url, timeout=config.chain.timeout) if url else None

    logger.debug(f"Opened workspace at {config.storage.data_dir}")
    return Workspace(config=config, store=store, registry=registry, ledger=ledger)

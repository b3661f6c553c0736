"""
Runtime Configuration Module

Provides configuration loading and management for ProofTrace.
"""

from .runtime import (
    CONFIG_SEARCH_PATHS,
    ChainConfig,
    RuntimeConfig,
    ServerConfig,
    StorageConfig,
)

__all__ = [
    "CONFIG_SEARCH_PATHS",
    "RuntimeConfig",
    "StorageConfig",
    "ChainConfig",
    "ServerConfig",
]

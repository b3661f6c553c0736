"""
Module 09D - API Dependencies

Dependency injection for the API.

The store, registry, ledger reader and configuration are created once by
create_app and held on ``app.state``; routes receive them through these
functions with ``Depends``.
"""

from __future__ import annotations

from typing import Optional

from fastapi import Request

from core.config.runtime import RuntimeConfig
from core.ledger.registry import AnchorRegistry, LedgerReader
from core.storage.memory import InMemoryStore
from core.verifier.verifier import InferenceVerifier


def get_config(request: Request) -> RuntimeConfig:
    return request.app.state.config


def get_store(request: Request) -> InMemoryStore:
    return request.app.state.store


def get_registry(request: Request) -> AnchorRegistry:
    return request.app.state.registry


def get_ledger(request: Request) -> Optional[LedgerReader]:
    return request.app.state.ledger


def get_verifier(request: Request) -> InferenceVerifier:
    """Verifier over the app store, with live confirmation when a ledger is set."""
    store = get_store(request)
    return InferenceVerifier(store, store, ledger=get_ledger(request))

"""
Test fixtures package for ProofTrace tests.

This package provides factory functions for creating test objects:
- common.py: hashes, records, batches, registries and a scripted ledger

Usage:
    from fixtures.common import make_records, record_and_anchor

    def test_something(store, registry):
        batch, anchor = record_and_anchor(store, registry, make_records(3))
"""

from .common import (
    FIXED_CLOCK,
    FIXED_TIME,
    ScriptedLedger,
    make_batch,
    make_hash,
    make_hashes,
    make_record,
    make_records,
    make_registry,
    make_stored_inference,
    record_and_anchor,
)

__all__ = [
    "FIXED_CLOCK",
    "FIXED_TIME",
    "ScriptedLedger",
    "make_hash",
    "make_hashes",
    "make_record",
    "make_records",
    "make_stored_inference",
    "make_registry",
    "make_batch",
    "record_and_anchor",
]

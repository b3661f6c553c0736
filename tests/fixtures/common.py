"""
Common test fixtures shared by all modules.

Provides factory functions for core ProofTrace data structures:
- Content hashes
- InferenceRecord / StoredInference
- MerkleBatch / AnchorRecord (via the real builder and registry)
- A scripted LedgerReader

These are the foundational building blocks used by higher-level fixtures.
"""

from datetime import datetime, timezone
from typing import Any, Optional

from core.config.runtime import ChainConfig
from core.crypto.hashing import hash_bytes
from core.crypto.record_hasher import hash_record
from core.ledger.anchoring import anchor_batch
from core.ledger.registry import LocalRegistry
from core.merkle.merkle_tree import build_batch
from core.schemas.commitments import AnchorRecord, MerkleBatch
from core.schemas.records import InferenceRecord, StoredInference
from core.storage.memory import InMemoryStore


FIXED_CLOCK = 1_767_225_600  # 2026-01-01T00:00:00Z
FIXED_TIME = datetime(2026, 1, 1, tzinfo=timezone.utc)


# =============================================================================
# Hash Factories
# =============================================================================

def make_hash(seed: str) -> str:
    """Deterministic content hash derived from a seed string."""
    return hash_bytes(seed)


def make_hashes(count: int, prefix: str = "leaf") -> list[str]:
    """count distinct deterministic content hashes."""
    return [make_hash(f"{prefix}-{i}") for i in range(count)]


# =============================================================================
# Record Factories
# =============================================================================

def make_record(
    model: str = "gpt-4",
    prompt: str = "What is the capital of France?",
    output: str = "Paris.",
    parameters: Optional[dict[str, Any]] = None,
    context: Optional[dict[str, Any]] = None,
    timestamp: Optional[int] = 1_767_225_600_000,
    nonce: Optional[str] = None,
) -> InferenceRecord:
    """
    Create an InferenceRecord for testing.

    prompt and output are hashed, as a recording application would do.
    """
    return InferenceRecord(
        model=model,
        prompt_hash=make_hash(prompt),
        output_hash=make_hash(output),
        parameters=parameters,
        context=context,
        timestamp=timestamp,
        nonce=nonce,
    )


def make_records(count: int) -> list[InferenceRecord]:
    """count records that differ only by timestamp."""
    return [make_record(timestamp=1_767_225_600_000 + i) for i in range(count)]


def make_stored_inference(
    record: Optional[InferenceRecord] = None,
    stored_at: Optional[datetime] = None,
) -> StoredInference:
    record = record or make_record()
    return StoredInference(
        record=record,
        inference_hash=hash_record(record),
        stored_at=stored_at or FIXED_TIME,
    )


# =============================================================================
# Commitment Factories
# =============================================================================

def make_registry(chain_id: int = 31337) -> LocalRegistry:
    """LocalRegistry with a fixed clock."""
    return LocalRegistry(chain_id=chain_id, clock=lambda: FIXED_CLOCK)


def make_batch(hashes: Optional[list[str]] = None, batch_id: str = "batch_test") -> MerkleBatch:
    return build_batch(hashes or make_hashes(4), batch_id=batch_id, created_at=FIXED_TIME)


def record_and_anchor(
    store: InMemoryStore,
    registry: LocalRegistry,
    records: list[InferenceRecord],
    batch_id: str = "batch_test",
    chain: Optional[ChainConfig] = None,
) -> tuple[MerkleBatch, AnchorRecord]:
    """
    Run the producer side end to end: store the records, batch all of
    them, and anchor the batch root.
    """
    for record in records:
        store.put_inference(make_stored_inference(record))
    batch = make_batch([hash_record(r) for r in records], batch_id=batch_id)
    store.put_batch(batch)
    anchor = anchor_batch(batch, registry, store, chain or ChainConfig())
    return batch, anchor


# =============================================================================
# Ledger Readers
# =============================================================================

class ScriptedLedger:
    """LedgerReader returning preset anchoring times, or raising."""

    def __init__(self, times: Optional[dict[str, int]] = None, error: Optional[Exception] = None):
        self.times = {k.lower(): v for k, v in (times or {}).items()}
        self.error = error
        self.calls: list[str] = []

    def anchored_at(self, root: str) -> int:
        self.calls.append(root)
        if self.error is not None:
            raise self.error
        return self.times.get(root.lower(), 0)

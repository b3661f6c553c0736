"""
Storage Protocols

Defines the store interfaces consumed by the verifier, the API and the CLI.

Stores are handed to their users explicitly; there is no shared global
instance. Batches are immutable once stored and at most one anchor exists
per root.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from core.schemas.commitments import AnchorRecord, MerkleBatch
from core.schemas.records import StoredInference


@runtime_checkable
class BatchStore(Protocol):
    """Lookup and append of Merkle batches."""

    def put_batch(self, batch: MerkleBatch) -> None:
        """Store a batch. Re-storing an identical batch is a no-op."""
        ...

    def get_batch(self, batch_id: str) -> MerkleBatch | None:
        """Get a batch by id."""
        ...

    def find_batch_containing(self, inference_hash: str) -> MerkleBatch | None:
        """Get the first stored batch whose leaves include the hash."""
        ...

    def all_batches(self) -> list[MerkleBatch]:
        """All batches in insertion order."""
        ...


@runtime_checkable
class AnchorStore(Protocol):
    """Lookup and append of anchor records."""

    def put_anchor(self, anchor: AnchorRecord) -> None:
        """Store an anchor. A second anchor for the same root is rejected."""
        ...

    def get_by_root(self, root: str) -> AnchorRecord | None:
        """Get the anchor for a Merkle root."""
        ...

    def get_by_batch_id(self, batch_id: str) -> AnchorRecord | None:
        """Get the anchor for a batch."""
        ...

    def all_anchors(self) -> list[AnchorRecord]:
        """All anchors in insertion order."""
        ...


@runtime_checkable
class InferenceStore(Protocol):
    """Lookup and append of recorded inferences."""

    def put_inference(self, inference: StoredInference) -> None:
        """Store a recorded inference, keyed by its content hash."""
        ...

    def get_inference(self, inference_hash: str) -> StoredInference | None:
        """Get a recorded inference by content hash."""
        ...

    def all_inferences(self) -> list[StoredInference]:
        """All recorded inferences in insertion order."""
        ...

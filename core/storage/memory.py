"""
In-Memory Store

Holds inferences, batches and anchors in process memory. Implements the
BatchStore, AnchorStore and InferenceStore protocols and is the base class of
the JSON directory store.
"""

from __future__ import annotations

import logging
import threading
from typing import Any

from core.crypto.hashing import normalize_hash
from core.schemas.commitments import AnchorRecord, MerkleBatch
from core.schemas.errors import StorageException
from core.schemas.records import StoredInference

logger = logging.getLogger(__name__)


class InMemoryStore:
    """
    In-process store for inferences, batches and anchors.

    Hash and root lookups are case-insensitive and accept the hash with or
    without its 0x prefix.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._inferences: dict[str, StoredInference] = {}
        self._batches: dict[str, MerkleBatch] = {}
        self._anchors: dict[str, AnchorRecord] = {}
        # leaf hash -> ids of batches containing it, in insertion order
        self._leaf_index: dict[str, list[str]] = {}

    # ------------------------------------------------------------------
    # Inferences
    # ------------------------------------------------------------------

    def put_inference(self, inference: StoredInference) -> None:
        key = normalize_hash(inference.inference_hash)
        with self._lock:
            self._inferences[key] = inference

    def get_inference(self, inference_hash: str) -> StoredInference | None:
        return self._inferences.get(normalize_hash(inference_hash))

    def all_inferences(self) -> list[StoredInference]:
        with self._lock:
            return list(self._inferences.values())

    def unbatched_inferences(self) -> list[StoredInference]:
        """Recorded inferences that no stored batch contains, oldest first."""
        with self._lock:
            pending = [
                inf for key, inf in self._inferences.items()
                if key not in self._leaf_index
            ]
        return sorted(pending, key=lambda inf: inf.stored_at)

    # ------------------------------------------------------------------
    # Batches
    # ------------------------------------------------------------------

    def put_batch(self, batch: MerkleBatch) -> None:
        with self._lock:
            existing = self._batches.get(batch.batch_id)
            if existing is not None:
                if existing == batch:
                    return
                raise StorageException(
                    f"Batch {batch.batch_id} already exists with different content",
                    details={"batch_id": batch.batch_id},
                )
            self._batches[batch.batch_id] = batch
            for leaf in dict.fromkeys(normalize_hash(h) for h in batch.leaves):
                self._leaf_index.setdefault(leaf, []).append(batch.batch_id)
        logger.debug(f"Stored batch {batch.batch_id} ({batch.leaf_count} leaves)")

    def get_batch(self, batch_id: str) -> MerkleBatch | None:
        return self._batches.get(batch_id)

    def find_batch_containing(self, inference_hash: str) -> MerkleBatch | None:
        with self._lock:
            batch_ids = self._leaf_index.get(normalize_hash(inference_hash))
            if not batch_ids:
                return None
            return self._batches[batch_ids[0]]

    def all_batches(self) -> list[MerkleBatch]:
        with self._lock:
            return list(self._batches.values())

    def unanchored_batches(self) -> list[MerkleBatch]:
        """Stored batches whose root has no anchor, oldest first."""
        with self._lock:
            pending = [
                b for b in self._batches.values()
                if normalize_hash(b.root) not in self._anchors
            ]
        return sorted(pending, key=lambda b: b.created_at)

    # ------------------------------------------------------------------
    # Anchors
    # ------------------------------------------------------------------

    def put_anchor(self, anchor: AnchorRecord) -> None:
        key = normalize_hash(anchor.root)
        with self._lock:
            if key in self._anchors:
                raise StorageException(
                    f"Root {key} already has an anchor record",
                    details={"root": key, "batch_id": anchor.batch_id},
                )
            self._anchors[key] = anchor

    def get_by_root(self, root: str) -> AnchorRecord | None:
        return self._anchors.get(normalize_hash(root))

    def get_by_batch_id(self, batch_id: str) -> AnchorRecord | None:
        with self._lock:
            for anchor in self._anchors.values():
                if anchor.batch_id == batch_id:
                    return anchor
        return None

    def all_anchors(self) -> list[AnchorRecord]:
        with self._lock:
            return list(self._anchors.values())

    # ------------------------------------------------------------------
    # Utility
    # ------------------------------------------------------------------

    def stats(self) -> dict[str, Any]:
        """Counts of stored objects and of pending work."""
        with self._lock:
            return {
                "inferences": len(self._inferences),
                "batches": len(self._batches),
                "anchors": len(self._anchors),
                "unbatched_inferences": len(self.unbatched_inferences()),
                "unanchored_batches": len(self.unanchored_batches()),
            }

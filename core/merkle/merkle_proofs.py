"""
Module 03 - Merkle Proofs Convenience Wrappers
Thin wrappers around the Merkle batch functions for a class-based API.

Owner: Protocol/Crypto Engineer
Module ID: M03

This module provides:
- MerkleProver: Generate proofs for hashes or inference records
- MerkleVerifier: Verify proofs, or raw proof components, offline
"""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Sequence

from core.crypto.record_hasher import hash_record
from core.schemas.commitments import MerkleBatch, MerkleProof
from core.schemas.records import InferenceRecord
from core.merkle.merkle_tree import compute_root, generate_proof, verify_proof


class MerkleProver:
    """
    Convenience class for generating Merkle proofs.

    Example:
        >>> batch = build_batch(hashes)
        >>> proof = MerkleProver.prove(batch, hashes[1])
        >>> MerkleVerifier.verify(proof)
        True
    """

    @staticmethod
    def prove(batch: MerkleBatch, leaf_hash: str) -> MerkleProof | None:
        """Generate the proof for a content hash, or None if it is not a leaf."""
        return generate_proof(batch, leaf_hash)

    @staticmethod
    def prove_record(
        batch: MerkleBatch,
        record: InferenceRecord | Mapping[str, Any],
    ) -> MerkleProof | None:
        """
        Generate the proof for an inference record.

        The record is hashed with the record hasher first.
        """
        return generate_proof(batch, hash_record(record))

    @staticmethod
    def compute_root(hashes: Sequence[str]) -> str:
        """Compute the Merkle root for a set of content hashes."""
        return compute_root(hashes)


class MerkleVerifier:
    """Convenience class for verifying Merkle proofs."""

    @staticmethod
    def verify(proof: MerkleProof) -> bool:
        """Verify a Merkle proof."""
        return verify_proof(proof)

    @staticmethod
    def verify_leaf_in_root(
        leaf: str,
        sibling_path: list[str],
        root: str,
        leaf_index: int = 0,
    ) -> bool:
        """
        Verify a leaf is included in a Merkle root using raw components.

        leaf_index is informational only; commutative pairing makes the
        position irrelevant to the fold.
        """
        return verify_proof(
            MerkleProof(
                leaf=leaf,
                sibling_path=sibling_path,
                root=root,
                leaf_index=leaf_index,
            )
        )

    @staticmethod
    def verify_record_in_root(
        record: InferenceRecord | Mapping[str, Any],
        sibling_path: list[str],
        root: str,
    ) -> bool:
        """Verify an inference record is included in a Merkle root."""
        return MerkleVerifier.verify_leaf_in_root(hash_record(record), sibling_path, root)


__all__ = [
    "MerkleProver",
    "MerkleVerifier",
]

"""
Module 03 - Merkle Batch Implementation
Deterministic Merkle batch construction, proof generation, and verification.

Owner: Protocol/Crypto Engineer
Module ID: M03

This module provides:
- Commutative pair hashing
- Merkle batch construction over content hashes
- Inclusion proof generation for any leaf
- Inclusion proof verification

Canonical Commitment Rules (Hard Contracts):
1. Leaves: content hashes normalized to "0x" + 64 lowercase hex, then sorted
   ascending. The root depends only on the multiset of leaves, never on
   caller order or hex letter case. Duplicates are kept.
2. Parent hashing: parent = sha256(min(a, b) + max(a, b)) over the raw
   32-byte values, so hash_pair(a, b) == hash_pair(b, a).
3. Padding rule: if a level has an odd count, the last node is paired with
   itself. No node is dropped.
4. Single leaf: root = leaf (the leaf hash itself)
5. Empty input: rejected with EmptyBatchError

Determinism Notes:
- Apart from batch_id and created_at, build_batch is a pure function
- Proof generation and verification never raise on bad input; they
  report absence (None) or failure (False)
"""
from __future__ import annotations

import bisect
import logging
import secrets
import time
from datetime import datetime, timezone
from typing import Sequence

from core.crypto.hashing import from_hex, normalize_content_hash, sha256, to_hex
from core.schemas.commitments import MerkleBatch, MerkleProof
from core.schemas.errors import EmptyBatchError, InvalidHashError

logger = logging.getLogger(__name__)


def _combine(a: str, b: str) -> str:
    # Inputs are already normalized; equal-width lowercase hex sorts like bytes
    lo, hi = (a, b) if a <= b else (b, a)
    return to_hex(sha256(from_hex(lo) + from_hex(hi)))


def hash_pair(a: str, b: str) -> str:
    """
    Compute the parent of two nodes.

    The two 32-byte values are sorted before concatenation, making the
    combination commutative.

    Raises:
        InvalidHashError: If either input is not a content hash.

    Example:
        >>> x, y = "0x" + "11" * 32, "0x" + "22" * 32
        >>> hash_pair(x, y) == hash_pair(y, x)
        True
    """
    return _combine(normalize_content_hash(a), normalize_content_hash(b))


def _sorted_leaves(hashes: Sequence[str]) -> list[str]:
    if len(hashes) == 0:
        raise EmptyBatchError()
    return sorted(normalize_content_hash(h) for h in hashes)


def _build_levels(leaves: list[str]) -> list[list[str]]:
    tree: list[list[str]] = [leaves]
    level = leaves
    while len(level) > 1:
        next_level: list[str] = []
        for i in range(0, len(level), 2):
            left = level[i]
            right = level[i + 1] if i + 1 < len(level) else left
            next_level.append(_combine(left, right))
        tree.append(next_level)
        level = next_level
    return tree


def build_tree(hashes: Sequence[str]) -> list[list[str]]:
    """
    Build all levels of the tree for a set of hashes.

    Returns:
        Levels from the sorted leaves (index 0) up to the single-node root level.

    Raises:
        EmptyBatchError: If hashes is empty.
        InvalidHashError: If any hash is malformed.
    """
    return _build_levels(_sorted_leaves(hashes))


def compute_root(hashes: Sequence[str]) -> str:
    """
    Compute only the Merkle root for a set of hashes.

    Invariant under any permutation of ``hashes`` and any letter-case
    variation of individual hashes.
    """
    return build_tree(hashes)[-1][0]


def compute_tree_height(num_leaves: int) -> int:
    """
    Number of levels (leaves and root included) for a tree of num_leaves.

    Examples: 1 -> 1, 2 -> 2, 3 -> 3, 4 -> 3, 5 -> 4. Empty -> 0.
    """
    if num_leaves <= 0:
        return 0
    height = 1
    n = num_leaves
    while n > 1:
        n = (n + 1) // 2
        height += 1
    return height


def generate_batch_id() -> str:
    """Fresh batch id: ``batch_<hex millis>_<16 random hex digits>``."""
    millis = int(time.time() * 1000)
    return f"batch_{millis:x}_{secrets.token_hex(8)}"


def build_batch(
    hashes: Sequence[str],
    *,
    batch_id: str | None = None,
    created_at: datetime | None = None,
) -> MerkleBatch:
    """
    Build a Merkle batch over a non-empty sequence of content hashes.

    Args:
        hashes: Content hashes in any order and letter case.
        batch_id: Explicit id; a fresh one is generated when omitted.
        created_at: Explicit creation time; now (UTC) when omitted.

    Raises:
        EmptyBatchError: If hashes is empty.
        InvalidHashError: If any hash is malformed.
    """
    leaves = _sorted_leaves(hashes)
    tree = _build_levels(leaves)
    batch = MerkleBatch(
        batch_id=batch_id or generate_batch_id(),
        root=tree[-1][0],
        leaves=leaves,
        tree=tree,
        leaf_count=len(leaves),
        created_at=created_at or datetime.now(timezone.utc),
    )
    logger.debug(
        f"Built batch {batch.batch_id}: {batch.leaf_count} leaves, "
        f"height {batch.height}, root {batch.root}"
    )
    return batch


def generate_proof(batch: MerkleBatch, target_hash: str) -> MerkleProof | None:
    """
    Derive the inclusion proof for target_hash from a batch.

    At each level below the root the sibling is the node at ``index ^ 1``;
    when that slot is past the end of an odd-sized level the node is its own
    sibling, mirroring the builder's padding rule.

    Returns:
        The proof, or None if target_hash is malformed or not a leaf.
    """
    try:
        target = normalize_content_hash(target_hash)
    except InvalidHashError:
        return None

    leaf_index = bisect.bisect_left(batch.leaves, target)
    if leaf_index >= len(batch.leaves) or batch.leaves[leaf_index] != target:
        return None

    sibling_path: list[str] = []
    index = leaf_index
    for level in batch.tree[:-1]:
        sibling_index = index ^ 1
        if sibling_index < len(level):
            sibling_path.append(level[sibling_index])
        else:
            sibling_path.append(level[index])
        index //= 2

    return MerkleProof(
        leaf=target,
        sibling_path=sibling_path,
        root=batch.root,
        leaf_index=leaf_index,
    )


def verify_proof(proof: MerkleProof) -> bool:
    """
    Verify an inclusion proof on its own, without the batch.

    Folds the commutative pair hash over sibling_path starting from the leaf
    and compares the result with the root, case-insensitively.

    Returns:
        True if the proof folds to its root, False for any mismatch or
        malformed hash.
    """
    try:
        current = normalize_content_hash(proof.leaf)
        for sibling in proof.sibling_path:
            current = _combine(current, normalize_content_hash(sibling))
        return current == normalize_content_hash(proof.root)
    except InvalidHashError:
        return False


__all__ = [
    "hash_pair",
    "build_tree",
    "build_batch",
    "compute_root",
    "compute_tree_height",
    "generate_batch_id",
    "generate_proof",
    "verify_proof",
]

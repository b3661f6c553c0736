"""
Module 03 - Merkle Batches and Inclusion Proofs
Deterministic Merkle batch construction + proof generation/verification.

Owner: Protocol/Crypto Engineer
Module ID: M03

Canonical Commitment Rules:
1. Leaves: normalized content hashes, sorted ascending
2. Parent hashing: sha256(min(a, b) + max(a, b))
3. Padding: last node of an odd level pairs with itself
4. Single leaf: root = leaf

Usage:
    from core.merkle import build_batch, generate_proof, verify_proof
    from core.crypto import hash_record

    hashes = [hash_record(r) for r in records]
    batch = build_batch(hashes)

    proof = generate_proof(batch, hashes[2])
    assert proof is not None and verify_proof(proof)
"""
from .merkle_tree import (
    build_batch,
    build_tree,
    compute_root,
    compute_tree_height,
    generate_batch_id,
    generate_proof,
    hash_pair,
    verify_proof,
)

from .merkle_proofs import (
    MerkleProver,
    MerkleVerifier,
)


__all__ = [
    # Core functions
    "hash_pair",
    "build_tree",
    "build_batch",
    "compute_root",
    "compute_tree_height",
    "generate_batch_id",
    "generate_proof",
    "verify_proof",
    # Convenience classes
    "MerkleProver",
    "MerkleVerifier",
]

"""
Module 01 - Schemas & Canonicalization
File: commitments.py

Purpose: Commitment schemas - Merkle batches, inclusion proofs and anchors.

A MerkleBatch is immutable once built. A MerkleProof is a standalone,
self-verifying artifact that does not reference the batch it came from.
An AnchorRecord ties one root to a ledger transaction; exactly one may exist
per root.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator


class MerkleBatch(BaseModel):
    """
    Merkle commitment over a set of content hashes.

    Structural invariants (checked on construction):
        - tree[0] == leaves, and leaves are sorted ascending
        - the last level holds exactly one node, equal to root
        - each level has ceil(len(previous) / 2) nodes
        - leaf_count == len(leaves)
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    batch_id: str = Field(..., min_length=1, description="Unique batch identifier")
    root: str = Field(..., description="Merkle root (content hash)")
    leaves: list[str] = Field(..., min_length=1, description="Sorted leaf hashes")
    tree: list[list[str]] = Field(
        ...,
        min_length=1,
        description="Tree levels, leaf level first, root level last",
    )
    leaf_count: int = Field(..., ge=1, description="Number of leaves")
    created_at: datetime = Field(..., description="When the batch was built")

    @model_validator(mode="after")
    def _check_structure(self) -> "MerkleBatch":
        if self.tree[0] != self.leaves:
            raise ValueError("tree[0] must equal leaves")
        if self.leaves != sorted(self.leaves):
            raise ValueError("leaves must be sorted ascending")
        if self.leaf_count != len(self.leaves):
            raise ValueError(
                f"leaf_count {self.leaf_count} != len(leaves) {len(self.leaves)}"
            )
        for depth in range(1, len(self.tree)):
            expected = (len(self.tree[depth - 1]) + 1) // 2
            if len(self.tree[depth]) != expected:
                raise ValueError(
                    f"tree level {depth} has {len(self.tree[depth])} nodes, "
                    f"expected {expected}"
                )
        top = self.tree[-1]
        if len(top) != 1 or top[0] != self.root:
            raise ValueError("last tree level must hold exactly the root")
        return self

    @property
    def height(self) -> int:
        """Number of levels in the tree, leaves and root included."""
        return len(self.tree)

    def contains(self, leaf_hash: str) -> bool:
        """Check whether a (normalized) hash is one of the leaves."""
        return leaf_hash in self.leaves


class MerkleProof(BaseModel):
    """
    Inclusion proof of one leaf in a Merkle root.

    ``sibling_path`` is ordered bottom-to-top. Pairs are combined
    commutatively, so no left/right flags are needed.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    leaf: str = Field(..., description="The leaf being proven")
    sibling_path: list[str] = Field(
        default_factory=list,
        description="Sibling hashes from the leaf level up to just below the root",
    )
    root: str = Field(..., description="Expected Merkle root")
    leaf_index: int = Field(..., ge=0, description="Index of the leaf in the sorted leaves")


class AnchorRecord(BaseModel):
    """Association of a batch root with a ledger transaction."""

    model_config = ConfigDict(extra="forbid")

    batch_id: str = Field(..., description="Batch whose root was anchored")
    root: str = Field(..., description="Anchored Merkle root")
    tx_hash: str = Field(..., description="Ledger transaction identifier")
    block_number: int = Field(..., ge=0, description="Block height of the anchor")
    chain_id: int = Field(..., description="Numeric chain identifier")
    chain_name: str = Field(..., description="Human-readable chain name")
    anchored_at: datetime = Field(..., description="Wall-clock anchoring time")

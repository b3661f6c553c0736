"""
Module 03 - Merkle Prover/Verifier Unit Tests
Tests for core/merkle/merkle_proofs.py
"""

from core.crypto.record_hasher import hash_record
from core.merkle.merkle_proofs import MerkleProver, MerkleVerifier
from core.merkle.merkle_tree import build_batch, compute_root

from fixtures.common import make_hash, make_hashes, make_records


class TestMerkleProver:
    """Tests for the prover convenience class."""

    def test_prove_matches_verifier(self):
        hashes = make_hashes(5)
        batch = build_batch(hashes)
        proof = MerkleProver.prove(batch, hashes[3])
        assert proof is not None
        assert MerkleVerifier.verify(proof)

    def test_prove_absent(self):
        batch = build_batch(make_hashes(3))
        assert MerkleProver.prove(batch, make_hash("absent")) is None

    def test_prove_record(self):
        records = make_records(3)
        batch = build_batch([hash_record(r) for r in records])
        proof = MerkleProver.prove_record(batch, records[1])
        assert proof is not None
        assert proof.leaf == hash_record(records[1])

    def test_compute_root(self):
        hashes = make_hashes(4)
        assert MerkleProver.compute_root(hashes) == compute_root(hashes)


class TestMerkleVerifier:
    """Tests for verification from raw components."""

    def test_verify_leaf_in_root(self):
        hashes = make_hashes(4)
        batch = build_batch(hashes)
        proof = MerkleProver.prove(batch, hashes[0])
        assert MerkleVerifier.verify_leaf_in_root(hashes[0], proof.sibling_path, batch.root)

    def test_leaf_index_irrelevant_to_fold(self):
        hashes = make_hashes(4)
        batch = build_batch(hashes)
        proof = MerkleProver.prove(batch, hashes[0])
        assert MerkleVerifier.verify_leaf_in_root(hashes[0], proof.sibling_path, batch.root, leaf_index=3)

    def test_wrong_root(self):
        hashes = make_hashes(4)
        proof = MerkleProver.prove(build_batch(hashes), hashes[0])
        assert not MerkleVerifier.verify_leaf_in_root(hashes[0], proof.sibling_path, make_hash("other"))

    def test_verify_record_in_root(self):
        records = make_records(4)
        batch = build_batch([hash_record(r) for r in records])
        proof = MerkleProver.prove_record(batch, records[2])
        assert MerkleVerifier.verify_record_in_root(records[2], proof.sibling_path, batch.root)

    def test_modified_record_not_in_root(self):
        records = make_records(4)
        batch = build_batch([hash_record(r) for r in records])
        proof = MerkleProver.prove_record(batch, records[2])
        tampered = records[2].model_copy(update={"model": "other-model"})
        assert not MerkleVerifier.verify_record_in_root(tampered, proof.sibling_path, batch.root)

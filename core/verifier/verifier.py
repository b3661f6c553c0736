"""
Module 05 - Inference Verification
File: verifier.py

Purpose: End-to-end verification of a recorded inference.

Stages run in order and stop at the first failure:
    1. resolve_identity     record and/or hash -> content hash
    2. locate_batch         batch whose leaves contain the hash
    3. merkle_proof         derive the inclusion proof and check it
    4. locate_anchor        anchor record for the batch root
    5. ledger_confirmation  optional live read of the anchoring time

Each stage appends a CheckResult. A failing stage raises its specific
ProofTraceException internally; it is converted into the returned result's
``error`` and never reaches the caller. "Does not verify" is a normal
outcome, not an exception.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Optional

from core.crypto.hashing import normalize_content_hash
from core.crypto.record_hasher import hash_record, verify_record_hash
from core.ledger.registry import LedgerReader
from core.merkle.merkle_tree import generate_proof, verify_proof
from core.schemas.commitments import AnchorRecord, MerkleBatch, MerkleProof
from core.schemas.errors import (
    ChainUnreachableError,
    HashMismatchError,
    MissingInputError,
    NotAnchoredError,
    NotBatchedError,
    OnChainMismatchError,
    ProofGenerationError,
    ProofInvalidError,
    ProofTraceException,
)
from core.schemas.records import InferenceRecord
from core.schemas.verification import CheckResult, VerificationResult
from core.storage.base import AnchorStore, BatchStore

logger = logging.getLogger(__name__)

# Stage identifiers, used as CheckResult.check_id
STAGE_RESOLVE_IDENTITY = "resolve_identity"
STAGE_LOCATE_BATCH = "locate_batch"
STAGE_MERKLE_PROOF = "merkle_proof"
STAGE_LOCATE_ANCHOR = "locate_anchor"
STAGE_LEDGER_CONFIRMATION = "ledger_confirmation"

STAGES = (
    STAGE_RESOLVE_IDENTITY,
    STAGE_LOCATE_BATCH,
    STAGE_MERKLE_PROOF,
    STAGE_LOCATE_ANCHOR,
    STAGE_LEDGER_CONFIRMATION,
)


def _resolve_identity(
    record: InferenceRecord | Mapping[str, Any] | None,
    inference_hash: str | None,
) -> str:
    if record is None and inference_hash is None:
        raise MissingInputError()

    if record is None:
        return normalize_content_hash(inference_hash)

    computed = hash_record(record)
    if inference_hash is not None and not verify_record_hash(record, inference_hash):
        raise HashMismatchError(supplied=str(inference_hash), computed=computed)
    return computed


def _locate_batch(inference_hash: str, batches: BatchStore) -> MerkleBatch:
    batch = batches.find_batch_containing(inference_hash)
    if batch is None:
        raise NotBatchedError(inference_hash)
    return batch


def _prove(batch: MerkleBatch, inference_hash: str) -> MerkleProof:
    proof = generate_proof(batch, inference_hash)
    if proof is None:
        raise ProofGenerationError(batch.batch_id, inference_hash)
    if not verify_proof(proof):
        raise ProofInvalidError(batch.root, leaf_index=proof.leaf_index)
    return proof


def _locate_anchor(batch: MerkleBatch, anchors: AnchorStore) -> AnchorRecord:
    anchor = anchors.get_by_root(batch.root)
    if anchor is None:
        raise NotAnchoredError(batch.root)
    return anchor


def _confirm_on_ledger(root: str, ledger: LedgerReader) -> int:
    try:
        anchored_at = ledger.anchored_at(root)
    except ChainUnreachableError:
        raise
    except Exception as e:
        # Any reader failure is reported as a verification outcome
        raise ChainUnreachableError(
            f"On-chain check failed: {e}",
            details={"root": root, "cause": f"{type(e).__name__}: {e}"},
        ) from e
    if not anchored_at:
        raise OnChainMismatchError(root)
    return anchored_at


def verify_inference(
    *,
    record: InferenceRecord | Mapping[str, Any] | None = None,
    inference_hash: str | None = None,
    batches: BatchStore,
    anchors: AnchorStore,
    ledger: Optional[LedgerReader] = None,
) -> VerificationResult:
    """
    Verify that an inference was batched and anchored, unmodified.

    Args:
        record: The inference record, if available. Its hash is recomputed.
        inference_hash: The claimed content hash. When given together with a
            record the two must agree.
        batches: Store used to locate the batch containing the hash.
        anchors: Store used to locate the anchor record of the batch root.
        ledger: Optional live reader; when given, the root's anchoring time
            is confirmed against it.

    Returns:
        VerificationResult with ``verified`` and everything resolved along
        the way. On failure ``error.code`` names the cause.

    Raises:
        pydantic.ValidationError: If record is a mapping without the
            required fields.
    """
    result = VerificationResult(verified=False)
    stage = STAGE_RESOLVE_IDENTITY

    try:
        content_hash = _resolve_identity(record, inference_hash)
        result.inference_hash = content_hash
        result.add_check(CheckResult.passed(
            stage,
            "Recomputed hash from record" if record is not None else "Hash is well-formed",
            {"inference_hash": content_hash},
        ))

        stage = STAGE_LOCATE_BATCH
        batch = _locate_batch(content_hash, batches)
        result.batch_id = batch.batch_id
        result.merkle_root = batch.root
        result.add_check(CheckResult.passed(
            stage,
            f"Found in batch {batch.batch_id}",
            {"batch_id": batch.batch_id, "leaf_count": batch.leaf_count},
        ))

        stage = STAGE_MERKLE_PROOF
        proof = _prove(batch, content_hash)
        result.proof = proof
        result.add_check(CheckResult.passed(
            stage,
            "Merkle proof is valid",
            {"leaf_index": proof.leaf_index, "path_length": len(proof.sibling_path)},
        ))

        stage = STAGE_LOCATE_ANCHOR
        anchor = _locate_anchor(batch, anchors)
        result.anchor = anchor
        result.add_check(CheckResult.passed(
            stage,
            f"Anchored on {anchor.chain_name} at block {anchor.block_number}",
            {"tx_hash": anchor.tx_hash, "block_number": anchor.block_number},
        ))

        stage = STAGE_LEDGER_CONFIRMATION
        if ledger is None:
            result.add_check(CheckResult.skipped(stage, "No ledger reader; live confirmation skipped"))
        else:
            result.on_chain_timestamp = _confirm_on_ledger(batch.root, ledger)
            result.add_check(CheckResult.passed(
                stage,
                "Ledger confirms the root is anchored",
                {"anchored_at": result.on_chain_timestamp},
            ))

    except ProofTraceException as e:
        result.add_check(CheckResult.failed(stage, e.message, e.details))
        result.error = e.to_error_model()
        logger.info(f"Verification failed at {stage}: [{e.code}] {e.message}")
        return result

    result.verified = True
    logger.info(f"Verified inference {result.inference_hash} in root {result.merkle_root}")
    return result


class InferenceVerifier:
    """
    Bundles the verification collaborators for repeated use.

    Usage:
        verifier = InferenceVerifier(store, store, ledger=reader)
        result = verifier.verify_hash("0x...")
    """

    def __init__(
        self,
        batches: BatchStore,
        anchors: AnchorStore,
        ledger: Optional[LedgerReader] = None,
    ) -> None:
        self.batches = batches
        self.anchors = anchors
        self.ledger = ledger

    def verify(
        self,
        *,
        record: InferenceRecord | Mapping[str, Any] | None = None,
        inference_hash: str | None = None,
    ) -> VerificationResult:
        return verify_inference(
            record=record,
            inference_hash=inference_hash,
            batches=self.batches,
            anchors=self.anchors,
            ledger=self.ledger,
        )

    def verify_hash(self, inference_hash: str) -> VerificationResult:
        return self.verify(inference_hash=inference_hash)

    def verify_record(self, record: InferenceRecord | Mapping[str, Any]) -> VerificationResult:
        return self.verify(record=record)

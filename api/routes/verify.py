"""
Module 09D - Verify Routes

Verify recorded inferences, explain verdicts, and serve inclusion proofs.

Negative verdicts are returned with status 200 and ``verified: false``;
only malformed requests are errors.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import PlainTextResponse

from api.deps import get_store, get_verifier
from api.errors import InvalidRequestError
from api.models.requests import VerifyRequest
from api.models.responses import HashResponse, ProofResponse, VerifyResponse
from core.crypto.record_hasher import hash_record
from core.merkle.merkle_tree import generate_proof
from core.schemas.errors import NotBatchedError, ProofGenerationError
from core.schemas.records import InferenceRecord
from core.schemas.verification import Explanation, VerificationResult
from core.storage.memory import InMemoryStore
from core.verifier.explain import explain, format_verification_report
from core.verifier.verifier import InferenceVerifier


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/verify", tags=["verification"])


@router.post("", response_model=VerifyResponse)
def verify(
    request: VerifyRequest,
    verifier: InferenceVerifier = Depends(get_verifier),
) -> VerifyResponse:
    """Verify an inference by record, by hash, or both (which must agree)."""
    if request.inference_record is None and not request.inference_hash:
        raise InvalidRequestError(
            "Must provide either inference_record or inference_hash",
            code="MISSING_INPUT",
        )

    result = verifier.verify(
        record=request.inference_record,
        inference_hash=request.inference_hash,
    )
    return VerifyResponse.from_result(result)


@router.get("/explain", response_model=Explanation)
def explain_verification(
    hash: Optional[str] = Query(default=None, description="Inference hash to explain"),
    verifier: InferenceVerifier = Depends(get_verifier),
) -> Explanation:
    """
    Explain what verification proves.

    Without a hash the generic explanation (nothing proven) is returned.
    """
    if not hash:
        return explain(VerificationResult(verified=False))
    return explain(verifier.verify_hash(hash))


@router.get("/report", response_class=PlainTextResponse)
def verification_report(
    hash: str = Query(..., min_length=1, description="Inference hash to report on"),
    verifier: InferenceVerifier = Depends(get_verifier),
) -> PlainTextResponse:
    """Human-readable verification report."""
    return PlainTextResponse(format_verification_report(verifier.verify_hash(hash)))


@router.post("/hash", response_model=HashResponse)
def compute_hash(record: InferenceRecord) -> HashResponse:
    """Compute the content hash of a record without storing it."""
    return HashResponse(inference_hash=hash_record(record))


@router.get("/proof/{inference_hash}", response_model=ProofResponse)
def get_proof(
    inference_hash: str,
    store: InMemoryStore = Depends(get_store),
) -> ProofResponse:
    """Inclusion proof of an inference in its batch root."""
    batch = store.find_batch_containing(inference_hash)
    if batch is None:
        raise NotBatchedError(inference_hash)

    proof = generate_proof(batch, inference_hash)
    if proof is None:
        raise ProofGenerationError(batch.batch_id, inference_hash)

    return ProofResponse(
        leaf=proof.leaf,
        sibling_path=proof.sibling_path,
        root=proof.root,
        leaf_index=proof.leaf_index,
        batch_id=batch.batch_id,
    )

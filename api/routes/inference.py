"""
Module 09D - Inference Routes

Record inference metadata and look recorded inferences up.
"""

from __future__ import annotations

import logging
import time
from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from api.deps import get_store
from api.errors import NotFoundError
from api.models.requests import RecordInferenceRequest
from api.models.responses import (
    InferenceListResponse,
    InferenceSummary,
    RecordInferenceResponse,
)
from core.crypto.record_hasher import hash_record
from core.schemas.records import InferenceRecord, StoredInference
from core.storage.memory import InMemoryStore


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/inference", tags=["inference"])


@router.post("", response_model=RecordInferenceResponse, status_code=201)
def record_inference(
    request: RecordInferenceRequest,
    store: InMemoryStore = Depends(get_store),
) -> RecordInferenceResponse:
    """
    Record an inference.

    The server stamps the record with the current time in milliseconds so
    two otherwise identical inferences get distinct hashes.
    """
    record = InferenceRecord(
        model=request.model,
        prompt_hash=request.prompt_hash,
        output_hash=request.output_hash,
        parameters=request.parameters,
        context=request.context,
        timestamp=int(time.time() * 1000),
        nonce=request.nonce,
    )
    stored = StoredInference(
        record=record,
        inference_hash=hash_record(record),
        stored_at=datetime.now(timezone.utc),
    )
    store.put_inference(stored)
    logger.info(f"Recorded inference {stored.inference_hash} ({record.model})")

    return RecordInferenceResponse(
        inference_hash=stored.inference_hash,
        stored_at=stored.stored_at,
    )


@router.get("/{inference_hash}", response_model=StoredInference)
def get_inference(
    inference_hash: str,
    store: InMemoryStore = Depends(get_store),
) -> StoredInference:
    """Get a recorded inference by hash."""
    stored = store.get_inference(inference_hash)
    if stored is None:
        raise NotFoundError(
            "Inference not found",
            code="INFERENCE_NOT_FOUND",
            details={"inference_hash": inference_hash},
        )
    return stored


@router.get("", response_model=InferenceListResponse)
def list_inferences(store: InMemoryStore = Depends(get_store)) -> InferenceListResponse:
    """List recorded inferences."""
    inferences = store.all_inferences()
    return InferenceListResponse(
        count=len(inferences),
        inferences=[
            InferenceSummary(
                inference_hash=inf.inference_hash,
                model=inf.record.model,
                stored_at=inf.stored_at,
            )
            for inf in inferences
        ],
    )

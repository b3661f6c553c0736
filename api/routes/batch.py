"""
Module 09D - Batch Routes

Build Merkle batches over recorded inference hashes.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from api.deps import get_store
from api.errors import InvalidRequestError, NotFoundError
from api.models.requests import CreateBatchRequest
from api.models.responses import BatchDetail, BatchListResponse, BatchSummary
from core.merkle.merkle_tree import build_batch
from core.storage.memory import InMemoryStore


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/batch", tags=["batch"])


@router.post("", response_model=BatchSummary, status_code=201)
def create_batch(
    request: CreateBatchRequest,
    store: InMemoryStore = Depends(get_store),
) -> BatchSummary:
    """
    Create a batch.

    Uses ``inference_hashes`` when given, otherwise the oldest unbatched
    inferences (at most ``batch_size`` of them).
    """
    if request.inference_hashes:
        hashes = request.inference_hashes
    else:
        unbatched = store.unbatched_inferences()
        if not unbatched:
            raise InvalidRequestError("No unbatched inferences available", code="NO_INFERENCES")
        limit = request.batch_size or len(unbatched)
        hashes = [inf.inference_hash for inf in unbatched[:limit]]

    batch = build_batch(hashes)
    store.put_batch(batch)
    logger.info(f"Created batch {batch.batch_id} with {batch.leaf_count} leaves")
    return BatchSummary.from_batch(batch)


@router.get("/{batch_id}", response_model=BatchDetail)
def get_batch(
    batch_id: str,
    store: InMemoryStore = Depends(get_store),
) -> BatchDetail:
    """Get a batch by id, including its leaves."""
    batch = store.get_batch(batch_id)
    if batch is None:
        raise NotFoundError("Batch not found", code="BATCH_NOT_FOUND", details={"batch_id": batch_id})
    return BatchDetail.from_batch(batch)


@router.get("", response_model=BatchListResponse)
def list_batches(store: InMemoryStore = Depends(get_store)) -> BatchListResponse:
    """List batches."""
    batches = store.all_batches()
    return BatchListResponse(
        count=len(batches),
        batches=[BatchSummary.from_batch(b) for b in batches],
    )

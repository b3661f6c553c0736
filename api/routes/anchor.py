"""
Module 09D - Anchor Routes

Anchor batch roots in the registry, and the registry's read endpoint.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from api.deps import get_config, get_registry, get_store
from api.errors import InvalidRequestError, NotFoundError
from api.models.requests import AnchorRequest
from api.models.responses import (
    AnchorListResponse,
    AnchorResponse,
    LedgerAnchorResponse,
)
from core.config.runtime import RuntimeConfig
from core.crypto.hashing import normalize_hash
from core.ledger.anchoring import anchor_batch
from core.ledger.registry import AnchorRegistry
from core.merkle.merkle_tree import build_batch
from core.schemas.commitments import MerkleBatch
from core.schemas.errors import AlreadyAnchoredError
from core.storage.memory import InMemoryStore


logger = logging.getLogger(__name__)

router = APIRouter(tags=["anchor"])


def _select_batch(request: AnchorRequest, store: InMemoryStore) -> MerkleBatch:
    if request.batch_id:
        batch = store.get_batch(request.batch_id)
        if batch is None:
            raise NotFoundError(
                "Batch not found",
                code="BATCH_NOT_FOUND",
                details={"batch_id": request.batch_id},
            )
        return batch

    if request.hashes:
        batch = build_batch(request.hashes)
        # A rejected request must not leave its batch behind
        if store.get_by_root(batch.root) is not None:
            raise AlreadyAnchoredError(batch.root)
        store.put_batch(batch)
        return batch

    unanchored = store.unanchored_batches()
    if not unanchored:
        raise InvalidRequestError("No unanchored batches available", code="NO_BATCHES")
    return unanchored[0]


@router.post("/anchor", response_model=AnchorResponse, status_code=201)
def anchor(
    request: AnchorRequest,
    store: InMemoryStore = Depends(get_store),
    registry: AnchorRegistry = Depends(get_registry),
    config: RuntimeConfig = Depends(get_config),
) -> AnchorResponse:
    """
    Anchor a batch root.

    Anchors the batch named by ``batch_id``, else a new batch built from
    ``hashes``, else the oldest unanchored batch. A root that already has an
    anchor yields 409.
    """
    if request.chain and request.chain != config.chain.name:
        raise InvalidRequestError(
            f"Unknown chain: {request.chain}",
            code="INVALID_CHAIN",
            details={"available_chains": [config.chain.name]},
        )

    batch = _select_batch(request, store)
    existing = store.get_by_root(batch.root)
    if existing is not None:
        raise AlreadyAnchoredError(batch.root)

    record = anchor_batch(batch, registry, store, config.chain)
    return AnchorResponse.from_anchor(record)


@router.get("/anchor", response_model=AnchorListResponse)
def list_anchors(store: InMemoryStore = Depends(get_store)) -> AnchorListResponse:
    """List anchor records."""
    anchors = store.all_anchors()
    return AnchorListResponse(
        count=len(anchors),
        anchors=[AnchorResponse.from_anchor(a) for a in anchors],
    )


@router.get("/ledger/anchors/{root}", response_model=LedgerAnchorResponse)
def ledger_anchored_at(
    root: str,
    registry: AnchorRegistry = Depends(get_registry),
) -> LedgerAnchorResponse:
    """
    Registry read endpoint: anchoring time of a root.

    Other deployments point their ledger_url here for live confirmation.
    """
    anchored_at = registry.anchored_at(root)
    if not anchored_at:
        raise NotFoundError("Root not anchored", details={"root": root})
    return LedgerAnchorResponse(root=normalize_hash(root), anchored_at=anchored_at)

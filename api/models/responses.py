"""
Module 09D - API Response Models

Pydantic models for API response serialization.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from core.schemas.commitments import AnchorRecord, MerkleBatch
from core.schemas.verification import VerificationResult


class HealthResponse(BaseModel):
    """Response for GET /health endpoint."""

    ok: bool = True
    service: str = "prooftrace-api"
    version: str = "v1"


class ErrorDetail(BaseModel):
    """Detailed error information."""

    code: str = Field(..., description="Error code")
    message: str = Field(..., description="Human-readable error message")
    details: dict[str, Any] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    """Standard error response."""

    ok: bool = False
    error: ErrorDetail = Field(..., description="Error details")


class RecordInferenceResponse(BaseModel):
    """Response for POST /inference."""

    inference_hash: str
    stored_at: datetime


class InferenceSummary(BaseModel):
    inference_hash: str
    model: str
    stored_at: datetime


class InferenceListResponse(BaseModel):
    count: int
    inferences: list[InferenceSummary] = Field(default_factory=list)


class BatchSummary(BaseModel):
    """Batch without its tree."""

    batch_id: str
    merkle_root: str
    leaf_count: int
    created_at: datetime

    @classmethod
    def from_batch(cls, batch: MerkleBatch) -> "BatchSummary":
        return cls(
            batch_id=batch.batch_id,
            merkle_root=batch.root,
            leaf_count=batch.leaf_count,
            created_at=batch.created_at,
        )


class BatchDetail(BatchSummary):
    """Batch with its sorted leaves."""

    leaves: list[str] = Field(default_factory=list)

    @classmethod
    def from_batch(cls, batch: MerkleBatch) -> "BatchDetail":
        return cls(
            batch_id=batch.batch_id,
            merkle_root=batch.root,
            leaf_count=batch.leaf_count,
            created_at=batch.created_at,
            leaves=list(batch.leaves),
        )


class BatchListResponse(BaseModel):
    count: int
    batches: list[BatchSummary] = Field(default_factory=list)


class AnchorResponse(BaseModel):
    """Response for POST /anchor and items of GET /anchor."""

    batch_id: str
    merkle_root: str
    tx_hash: str
    block_number: int
    chain_id: int
    chain_name: str
    anchored_at: datetime

    @classmethod
    def from_anchor(cls, anchor: AnchorRecord) -> "AnchorResponse":
        return cls(
            batch_id=anchor.batch_id,
            merkle_root=anchor.root,
            tx_hash=anchor.tx_hash,
            block_number=anchor.block_number,
            chain_id=anchor.chain_id,
            chain_name=anchor.chain_name,
            anchored_at=anchor.anchored_at,
        )


class AnchorListResponse(BaseModel):
    count: int
    anchors: list[AnchorResponse] = Field(default_factory=list)


class VerifyResponse(BaseModel):
    """Response for POST /verify."""

    verified: bool = Field(..., description="Overall verification verdict")
    inference_hash: str | None = None
    batch_id: str | None = None
    merkle_root: str | None = None
    anchored_at: datetime | None = None
    block_number: int | None = None
    chain_id: int | None = None
    chain_name: str | None = None
    tx_hash: str | None = None
    error: ErrorDetail | None = Field(default=None, description="Cause when not verified")
    checks: list[dict[str, Any]] = Field(default_factory=list)

    @classmethod
    def from_result(cls, result: VerificationResult) -> "VerifyResponse":
        anchor = result.anchor
        return cls(
            verified=result.verified,
            inference_hash=result.inference_hash,
            batch_id=result.batch_id,
            merkle_root=result.merkle_root,
            anchored_at=anchor.anchored_at if anchor else None,
            block_number=anchor.block_number if anchor else None,
            chain_id=anchor.chain_id if anchor else None,
            chain_name=anchor.chain_name if anchor else None,
            tx_hash=anchor.tx_hash if anchor else None,
            error=(
                ErrorDetail(
                    code=result.error.code,
                    message=result.error.message,
                    details=result.error.details,
                )
                if result.error else None
            ),
            checks=[
                {"check_id": c.check_id, "ok": c.ok, "message": c.message}
                for c in result.checks
            ],
        )


class HashResponse(BaseModel):
    """Response for POST /verify/hash."""

    inference_hash: str


class ProofResponse(BaseModel):
    """Response for GET /verify/proof/{hash}."""

    leaf: str
    sibling_path: list[str]
    root: str
    leaf_index: int
    batch_id: str


class StatsResponse(BaseModel):
    """Response for GET /stats."""

    inferences: int
    batches: int
    anchors: int
    unbatched_inferences: int
    unanchored_batches: int
    chain_name: str
    chain_id: int


class LedgerAnchorResponse(BaseModel):
    """Response for GET /ledger/anchors/{root}."""

    root: str
    anchored_at: int

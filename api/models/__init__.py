"""API request and response models."""

from api.models.requests import (
    AnchorRequest,
    CreateBatchRequest,
    RecordInferenceRequest,
    VerifyRequest,
)
from api.models.responses import (
    AnchorListResponse,
    AnchorResponse,
    BatchDetail,
    BatchListResponse,
    BatchSummary,
    ErrorDetail,
    ErrorResponse,
    HashResponse,
    HealthResponse,
    InferenceListResponse,
    InferenceSummary,
    LedgerAnchorResponse,
    ProofResponse,
    RecordInferenceResponse,
    StatsResponse,
    VerifyResponse,
)

__all__ = [
    "RecordInferenceRequest",
    "CreateBatchRequest",
    "AnchorRequest",
    "VerifyRequest",
    "HealthResponse",
    "ErrorDetail",
    "ErrorResponse",
    "RecordInferenceResponse",
    "InferenceSummary",
    "InferenceListResponse",
    "BatchSummary",
    "BatchDetail",
    "BatchListResponse",
    "AnchorResponse",
    "AnchorListResponse",
    "VerifyResponse",
    "HashResponse",
    "ProofResponse",
    "StatsResponse",
    "LedgerAnchorResponse",
]

"""
Module 09D - API Request Models

Pydantic models for API request validation.
"""

from typing import Any

from pydantic import BaseModel, Field, field_validator

from core.schemas.records import InferenceRecord, check_hex_hash


class RecordInferenceRequest(BaseModel):
    """Request body for POST /inference. The server adds the timestamp."""

    model: str = Field(..., min_length=1, description="Model identifier")
    prompt_hash: str = Field(..., description="Hex hash of the prompt")
    output_hash: str = Field(..., description="Hex hash of the output")
    parameters: dict[str, Any] | None = Field(
        default=None,
        description="Inference parameters (temperature, max_tokens, ...)",
    )
    context: dict[str, Any] | None = Field(
        default=None,
        description="Application context (feature, user_id, ...)",
    )
    nonce: str | None = Field(default=None, description="Optional nonce")

    @field_validator("prompt_hash", "output_hash")
    @classmethod
    def _check_hex(cls, value: str) -> str:
        return check_hex_hash(value)


class CreateBatchRequest(BaseModel):
    """Request body for POST /batch."""

    inference_hashes: list[str] | None = Field(
        default=None,
        description="Hashes to batch; defaults to the unbatched inferences",
    )
    batch_size: int | None = Field(
        default=None,
        ge=1,
        description="Maximum number of unbatched inferences to include",
    )


class AnchorRequest(BaseModel):
    """
    Request body for POST /anchor.

    Exactly what gets anchored: the batch named by batch_id, else a new batch
    over hashes, else the oldest unanchored batch.
    """

    batch_id: str | None = Field(default=None, description="Existing batch to anchor")
    hashes: list[str] | None = Field(default=None, description="Hashes to batch and anchor")
    chain: str | None = Field(default=None, description="Chain name; must match the server's")


class VerifyRequest(BaseModel):
    """Request body for POST /verify."""

    inference_record: InferenceRecord | None = Field(
        default=None,
        description="Full record; its hash is recomputed",
    )
    inference_hash: str | None = Field(
        default=None,
        description="Claimed content hash",
    )

"""
Module 01 - Schemas & Canonicalization
File: records.py

Purpose: Inference record schemas.

An InferenceRecord holds metadata about one AI inference: the model id and
content hashes of the prompt and output. Raw prompt/output text never enters
a record. ``parameters`` and ``context`` are open string-keyed mappings so
callers can attach arbitrary JSON-like values.
"""

import re
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


_HEX_HASH = re.compile(r"(0[xX])?[0-9a-fA-F]+")


def check_hex_hash(value: str) -> str:
    """Validate a hex hash field (0x prefix optional, any case); returns it unchanged."""
    if not _HEX_HASH.fullmatch(value.strip()):
        raise ValueError("must be a hex string (0x prefix optional)")
    return value


class InferenceRecord(BaseModel):
    """
    Metadata for a single inference.

    Unknown top-level keys are ignored: only the recognized fields take part
    in hashing.
    """

    model_config = ConfigDict(extra="ignore")

    model: str = Field(
        ...,
        min_length=1,
        description="Model identifier (e.g. gpt-4.1)",
    )
    prompt_hash: str = Field(
        ...,
        description="Hex hash of the prompt, case-insensitive, 0x optional",
    )
    output_hash: str = Field(
        ...,
        description="Hex hash of the output, case-insensitive, 0x optional",
    )
    parameters: dict[str, Any] | None = Field(
        default=None,
        description="Inference parameters (temperature, max_tokens, ...)",
    )
    context: dict[str, Any] | None = Field(
        default=None,
        description="Application context (feature, user_id, session_id, ...)",
    )
    timestamp: int | None = Field(
        default=None,
        description="Caller-supplied timestamp (milliseconds since epoch)",
    )
    nonce: str | None = Field(
        default=None,
        description="Optional nonce to distinguish otherwise identical records",
    )

    @field_validator("prompt_hash", "output_hash")
    @classmethod
    def _check_hex(cls, value: str) -> str:
        return check_hex_hash(value)


class StoredInference(BaseModel):
    """An inference record together with its content hash."""

    model_config = ConfigDict(extra="forbid")

    record: InferenceRecord
    inference_hash: str = Field(..., description="Content hash of the record")
    stored_at: datetime = Field(..., description="When the record was stored")

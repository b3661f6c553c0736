"""
Module 02 - Hashing Utilities
File: record_hasher.py

Purpose: Content hashing of inference records.

A record is first reduced to its normalized projection:
    - model unchanged
    - prompt_hash / output_hash lower-cased with a single 0x prefix
    - parameters / context only when present and non-empty
    - timestamp / nonce only when present
The projection is canonicalized and its UTF-8 bytes hashed with SHA-256.

Two records that differ only in key order, hex letter case of the hash
fields, or the presence of an empty optional mapping hash identically.
"""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from core.schemas.errors import InvalidHashError
from core.schemas.records import InferenceRecord

from .hashing import hash_canonical, normalize_content_hash, normalize_hash


_OPTIONAL_MAPPINGS = ("parameters", "context")
_OPTIONAL_SCALARS = ("timestamp", "nonce")


def _as_record(record: InferenceRecord | Mapping[str, Any]) -> InferenceRecord:
    if isinstance(record, InferenceRecord):
        return record
    if isinstance(record, Mapping):
        return InferenceRecord.model_validate(dict(record))
    raise TypeError(
        f"Expected InferenceRecord or mapping, got {type(record).__name__}"
    )


def prepare_for_hashing(record: InferenceRecord | Mapping[str, Any]) -> dict[str, Any]:
    """
    Build the normalized projection of a record.

    Raises:
        pydantic.ValidationError: If a mapping lacks the required fields.
    """
    rec = _as_record(record)

    projection: dict[str, Any] = {
        "model": rec.model,
        "prompt_hash": normalize_hash(rec.prompt_hash),
        "output_hash": normalize_hash(rec.output_hash),
    }

    for name in _OPTIONAL_MAPPINGS:
        value = getattr(rec, name)
        if value:
            projection[name] = value

    for name in _OPTIONAL_SCALARS:
        value = getattr(rec, name)
        if value is not None:
            projection[name] = value

    return projection


def hash_record(record: InferenceRecord | Mapping[str, Any]) -> str:
    """
    Compute the content hash of an inference record.

    Example:
        >>> a = {"model": "gpt-4", "prompt_hash": "0xAAAA", "output_hash": "0xbbbb"}
        >>> b = {"output_hash": "0xBBBB", "prompt_hash": "0xaaaa", "model": "gpt-4"}
        >>> hash_record(a) == hash_record(b)
        True
    """
    return hash_canonical(prepare_for_hashing(record))


def verify_record_hash(
    record: InferenceRecord | Mapping[str, Any],
    claimed_hash: str,
) -> bool:
    """
    Check a claimed content hash against the record.

    The claim is compared case-insensitively with or without its 0x prefix.
    A malformed claim simply does not match.
    """
    try:
        claimed = normalize_content_hash(claimed_hash)
    except InvalidHashError:
        return False
    return hash_record(record) == claimed


__all__ = [
    "prepare_for_hashing",
    "hash_record",
    "verify_record_hash",
]

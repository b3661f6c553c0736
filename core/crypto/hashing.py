"""
Module 02 - Hashing Utilities
Basic hashing and canonical hashing utilities for Merkle commitments.

Owner: Protocol/Crypto Engineer
Module ID: M02

This module provides:
- SHA-256 hashing for raw bytes
- Content hashes: 32-byte digests rendered as "0x" + 64 lowercase hex
- Canonical hashing for objects (via canonicalize)
- Hex encoding/decoding and hash normalization

Security/Determinism Notes:
- Always hash raw bytes exactly as specified
- No auto-stripping of whitespace beyond canonical JSON
- All operations are deterministic
"""
from __future__ import annotations

import hashlib
import re
from typing import Any

from core.schemas.canonical import canonicalize
from core.schemas.errors import InvalidHashError


HEX_PREFIX = "0x"
DIGEST_SIZE = 32

_HEX_BODY = re.compile(r"[0-9a-f]*")


def sha256(data: bytes) -> bytes:
    """
    Compute SHA-256 hash of raw bytes.

    Example:
        >>> sha256(b"hello").hex()
        '2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824'
    """
    return hashlib.sha256(data).digest()


def to_hex(data: bytes) -> str:
    """
    Convert bytes to hexadecimal string with 0x prefix.

    Example:
        >>> to_hex(bytes.fromhex("deadbeef"))
        '0xdeadbeef'
    """
    return HEX_PREFIX + data.hex()


def from_hex(hex_string: str) -> bytes:
    """
    Convert hexadecimal string (with 0x prefix) to bytes.

    Raises:
        ValueError: If string doesn't start with 0x, has odd length,
                   or contains invalid hex characters
    """
    if not hex_string.startswith(HEX_PREFIX):
        raise ValueError(
            f"Hex string must start with '0x' prefix, got: {hex_string[:10]}..."
        )

    hex_content = hex_string[2:]

    if len(hex_content) % 2 != 0:
        raise ValueError(
            f"Hex string must have even length after 0x prefix, "
            f"got length {len(hex_content)}"
        )

    try:
        return bytes.fromhex(hex_content)
    except ValueError as e:
        raise ValueError(f"Invalid hex characters in string: {e}") from e


def normalize_hash(value: str) -> str:
    """
    Normalize a hex hash string to lowercase with a single 0x prefix.

    Accepts "0x", "0X" or no prefix. No length or alphabet check is made;
    see normalize_content_hash for the strict form.

    Example:
        >>> normalize_hash("0xABC123")
        '0xabc123'
        >>> normalize_hash("abc123")
        '0xabc123'
    """
    cleaned = value.strip().lower()
    if cleaned.startswith(HEX_PREFIX):
        cleaned = cleaned[2:]
    return HEX_PREFIX + cleaned


def normalize_content_hash(value: Any) -> str:
    """
    Normalize and validate a 32-byte content hash.

    Raises:
        InvalidHashError: If value is not a string of 64 hex digits
            (optionally 0x-prefixed, any letter case).
    """
    if not isinstance(value, str):
        raise InvalidHashError(value, f"expected str, got {type(value).__name__}")
    normalized = normalize_hash(value)
    body = normalized[2:]
    if not _HEX_BODY.fullmatch(body):
        raise InvalidHashError(value, "contains non-hex characters")
    if len(body) != DIGEST_SIZE * 2:
        raise InvalidHashError(
            value, f"expected {DIGEST_SIZE * 2} hex digits, got {len(body)}"
        )
    return normalized


def is_content_hash(value: Any) -> bool:
    """Check whether value is a well-formed content hash (any case/prefix)."""
    try:
        normalize_content_hash(value)
    except InvalidHashError:
        return False
    return True


def hash_bytes(data: bytes | str) -> str:
    """
    Hash arbitrary opaque data into a content hash.

    Used to hash raw prompt/output text before it enters a record, so the
    raw content never needs to be stored. Strings are hashed as UTF-8.

    Returns:
        Content hash ("0x" + 64 lowercase hex)
    """
    if isinstance(data, str):
        data = data.encode("utf-8")
    return to_hex(sha256(data))


def hash_canonical(obj: Any) -> str:
    """
    Hash an object using its canonical JSON serialization.

    Rule: hash = sha256(canonicalize(obj).encode("utf-8"))

    Raises:
        NotAnObjectError: If obj is not a mapping or Pydantic model.
        CanonicalizationException: If obj cannot be canonically serialized.

    Example:
        >>> hash_canonical({"b": 2, "a": 1}) == hash_canonical({"a": 1, "b": 2})
        True
    """
    return hash_bytes(canonicalize(obj))


def hash_concat(left: bytes, right: bytes) -> bytes:
    """
    Hash the concatenation of two byte sequences: sha256(left + right).
    """
    return sha256(left + right)


__all__ = [
    "HEX_PREFIX",
    "DIGEST_SIZE",
    "sha256",
    "to_hex",
    "from_hex",
    "normalize_hash",
    "normalize_content_hash",
    "is_content_hash",
    "hash_bytes",
    "hash_canonical",
    "hash_concat",
]

"""
Module 01 - Schemas & Canonicalization
File: canonical.py

Purpose: Deterministic serialization of structured records for hashing,
Merkle leaves, and offline re-verification.

CRITICAL: All outputs from this module MUST be deterministic across runs.
For a fixed logical record the canonical form is unique:
    - object keys sorted by code point at every depth
    - no insignificant whitespace
    - array order preserved (never sorted)
    - no member holding the ABSENT marker
"""

import json
import math
from collections.abc import Mapping
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel

from .errors import CanonicalizationException, NotAnObjectError

# Canonical JSON separators - no whitespace
CANONICAL_JSON_SEPARATORS: tuple[str, str] = (",", ":")

# Floats with an integral value inside this range are emitted as integers
_MAX_SAFE_INTEGER = 2**53 - 1


class _Absent:
    """Marker for a field that is not present (distinct from JSON null)."""

    _instance: "_Absent | None" = None

    def __new__(cls) -> "_Absent":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "ABSENT"

    def __bool__(self) -> bool:
        return False


ABSENT = _Absent()


def ensure_utc(dt: datetime) -> datetime:
    """
    Ensure a datetime is timezone-aware and in UTC.

    Rules:
        - If naive (no tzinfo): treat as UTC
        - If aware: convert to UTC
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def format_datetime_canonical(dt: datetime) -> str:
    """
    Format a datetime as ISO-8601 with Z suffix for UTC.

    Returns:
        ISO-8601 formatted string with Z suffix (e.g., "2026-01-27T21:35:00Z").
    """
    utc_dt = ensure_utc(dt)
    if utc_dt.microsecond == 0:
        return utc_dt.strftime("%Y-%m-%dT%H:%M:%SZ")
    return utc_dt.strftime("%Y-%m-%dT%H:%M:%S.%fZ")


def _canonicalize_float(value: float, path: str) -> int | float:
    if not math.isfinite(value):
        raise CanonicalizationException(
            message=f"Non-finite float value encountered: {value}",
            details={"path": path, "value": str(value)},
        )
    if value.is_integer() and abs(value) <= _MAX_SAFE_INTEGER:
        return int(value)
    return value


def _canonicalize_str(value: str, path: str) -> str:
    try:
        value.encode("utf-8")
    except UnicodeEncodeError as e:
        raise CanonicalizationException(
            message=f"String is not encodable as UTF-8: {e.reason}",
            details={"path": path, "position": e.start},
        ) from e
    return value


def canonicalize_value(value: Any, path: str = "") -> Any:
    """
    Recursively canonicalize a value for deterministic JSON serialization.

    Mapping members and array elements equal to ABSENT are dropped. ``None``
    is a real value and serializes as ``null``.

    Args:
        value: Any JSON-like Python value.
        path: Current path for error reporting.

    Returns:
        A JSON-serializable canonical representation.

    Raises:
        CanonicalizationException: If the value cannot be canonicalized
            (non-finite floats, non-string keys, strings that are not
            valid UTF-8, unsupported types).
    """
    if value is None:
        return None

    if isinstance(value, bool):
        # Must check bool before int since bool is subclass of int
        return value

    if isinstance(value, int):
        return value

    if isinstance(value, float):
        return _canonicalize_float(value, path)

    if isinstance(value, str):
        return _canonicalize_str(value, path)

    if isinstance(value, datetime):
        return format_datetime_canonical(value)

    if isinstance(value, Enum):
        return canonicalize_value(value.value, path)

    if isinstance(value, BaseModel):
        # Unset optional model fields are treated as absent
        dumped = value.model_dump(
            mode="json",
            by_alias=True,
            exclude_none=True,
        )
        return canonicalize_value(dumped, path)

    if isinstance(value, Mapping):
        result: dict[str, Any] = {}
        for key, item in value.items():
            if not isinstance(key, str):
                raise CanonicalizationException(
                    message=f"Object keys must be strings, got {type(key).__name__}",
                    details={"path": path, "key": repr(key)},
                )
            _canonicalize_str(key, path)
            if item is ABSENT:
                continue
            result[key] = canonicalize_value(item, f"{path}.{key}" if path else key)
        return result

    if isinstance(value, (list, tuple)):
        return [
            canonicalize_value(item, f"{path}[{i}]")
            for i, item in enumerate(value)
            if item is not ABSENT
        ]

    if isinstance(value, bytes):
        return "0x" + value.hex()

    raise CanonicalizationException(
        message=f"Cannot canonicalize value of type {type(value).__name__}",
        details={"path": path, "type": type(value).__name__},
    )


def to_canonical_json_dict(obj: Any) -> dict[str, Any]:
    """
    Convert a mapping or Pydantic model to its canonical dictionary.

    Raises:
        NotAnObjectError: If the top-level value is not a mapping.
    """
    if isinstance(obj, BaseModel):
        return canonicalize_value(obj)
    if not isinstance(obj, Mapping):
        raise NotAnObjectError(type(obj).__name__)
    return canonicalize_value(obj)


def canonicalize(obj: Any) -> str:
    """
    Serialize a structured record to its canonical JSON string.

    Only mappings (or Pydantic models) are accepted at the top level; arrays
    and scalars are canonicalized only when nested inside one.

    Raises:
        NotAnObjectError: If the top-level value is not a mapping.
        CanonicalizationException: If a nested value cannot be canonicalized.

    Example:
        >>> canonicalize({"b": {"d": 1, "c": 2}, "a": 3})
        '{"a":3,"b":{"c":2,"d":1}}'
    """
    canonicalized = to_canonical_json_dict(obj)
    try:
        return json.dumps(
            canonicalized,
            sort_keys=True,
            separators=CANONICAL_JSON_SEPARATORS,
            ensure_ascii=False,
            allow_nan=False,
        )
    except (TypeError, ValueError) as e:
        raise CanonicalizationException(
            message=f"Failed to serialize to canonical JSON: {e}",
            details={"type": type(obj).__name__, "error": str(e)},
        ) from e


# The historical name used by hashing helpers
dumps_canonical = canonicalize


def loads_canonical(json_str: str) -> Any:
    """
    Parse a canonical JSON string.

    Datetimes are not restored - they remain as strings.
    """
    return json.loads(json_str)


def parse_and_canonicalize(json_str: str) -> str:
    """
    Parse a JSON string and re-emit it in canonical form.

    Raises:
        json.JSONDecodeError: If the text is not JSON.
        NotAnObjectError: If the parsed top-level value is not an object.
    """
    return canonicalize(loads_canonical(json_str))


def is_canonical(json_str: str) -> bool:
    """
    Check whether a JSON string is already in canonical form.

    Parses, re-canonicalizes and compares byte-for-byte. Anything that fails
    to parse or canonicalize is simply not canonical.
    """
    try:
        return parse_and_canonicalize(json_str) == json_str
    except (ValueError, CanonicalizationException):
        return False


def canonical_equals(obj1: Any, obj2: Any) -> bool:
    """Check if two objects have identical canonical representations."""
    try:
        return canonicalize(obj1) == canonicalize(obj2)
    except CanonicalizationException:
        return False

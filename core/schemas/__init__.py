"""
Module 01 - Schemas & Canonicalization
File: __init__.py

Purpose: Export the public API for the schemas module.
This is the main entry point for other modules to import schema definitions.
"""

# Canonical serialization API
from .canonical import (
    ABSENT,
    CANONICAL_JSON_SEPARATORS,
    canonical_equals,
    canonicalize,
    canonicalize_value,
    dumps_canonical,
    ensure_utc,
    format_datetime_canonical,
    is_canonical,
    loads_canonical,
    parse_and_canonicalize,
    to_canonical_json_dict,
)

# Error models and exceptions
from .errors import (
    AlreadyAnchoredError,
    CanonicalizationException,
    ChainUnreachableError,
    EmptyBatchError,
    ErrorCodes,
    HashMismatchError,
    InvalidHashError,
    InvalidRootError,
    MissingInputError,
    NotAnchoredError,
    NotAnObjectError,
    NotBatchedError,
    OnChainMismatchError,
    ProofGenerationError,
    ProofInvalidError,
    ProofTraceError,
    ProofTraceException,
    StorageException,
)

# Record schemas
from .records import InferenceRecord, StoredInference

# Commitment schemas
from .commitments import AnchorRecord, MerkleBatch, MerkleProof

# Verification schemas
from .verification import (
    CheckResult,
    CheckSeverity,
    Explanation,
    VerificationResult,
)


__all__ = [
    # Canonical serialization
    "ABSENT",
    "canonicalize",
    "dumps_canonical",
    "parse_and_canonicalize",
    "is_canonical",
    "to_canonical_json_dict",
    "canonicalize_value",
    "ensure_utc",
    "format_datetime_canonical",
    "loads_canonical",
    "canonical_equals",
    "CANONICAL_JSON_SEPARATORS",
    # Errors
    "ProofTraceError",
    "ProofTraceException",
    "ErrorCodes",
    "CanonicalizationException",
    "NotAnObjectError",
    "InvalidHashError",
    "MissingInputError",
    "EmptyBatchError",
    "HashMismatchError",
    "NotBatchedError",
    "ProofGenerationError",
    "ProofInvalidError",
    "NotAnchoredError",
    "OnChainMismatchError",
    "ChainUnreachableError",
    "InvalidRootError",
    "AlreadyAnchoredError",
    "StorageException",
    # Records
    "InferenceRecord",
    "StoredInference",
    # Commitments
    "MerkleBatch",
    "MerkleProof",
    "AnchorRecord",
    # Verification
    "VerificationResult",
    "CheckResult",
    "CheckSeverity",
    "Explanation",
]

"""
Module 01 - Schemas & Canonicalization
File: errors.py

Purpose: Standard error taxonomy across the ProofTrace core.
Defines both a Pydantic model for structured error communication
and Python exceptions for control flow.

Structural misuse (empty batch, non-object canonicalization input, malformed
hashes) is raised. Negative verification outcomes are carried back to the
caller as a ProofTraceError inside a VerificationResult.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes used across the core."""

    # Canonicalization & Input Errors
    CANONICALIZATION_ERROR = "CANONICALIZATION_ERROR"
    NOT_AN_OBJECT = "NOT_AN_OBJECT"
    INVALID_HASH = "INVALID_HASH"
    MISSING_INPUT = "MISSING_INPUT"

    # Batch & Merkle Errors
    EMPTY_BATCH = "EMPTY_BATCH"
    PROOF_GENERATION_FAILED = "PROOF_GENERATION_FAILED"
    PROOF_INVALID = "PROOF_INVALID"

    # Verification Outcome Errors
    HASH_MISMATCH = "HASH_MISMATCH"
    NOT_BATCHED = "NOT_BATCHED"
    NOT_ANCHORED = "NOT_ANCHORED"
    ON_CHAIN_MISMATCH = "ON_CHAIN_MISMATCH"
    CHAIN_UNREACHABLE = "CHAIN_UNREACHABLE"

    # Registry Errors
    INVALID_ROOT = "INVALID_ROOT"
    ALREADY_ANCHORED = "ALREADY_ANCHORED"

    # Storage Errors
    STORAGE_ERROR = "STORAGE_ERROR"


# =============================================================================
# Pydantic Error Model (Structured Communication)
# =============================================================================

class ProofTraceError(BaseModel):
    """
    Error model for structured error communication.

    This model is used for passing verification failures back to callers
    without exceptions, enabling structured handling and serialization.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.NOT_BATCHED],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )
    retryable: bool = Field(
        default=False,
        description="Whether the operation can be retried",
    )

    def to_exception(self) -> "ProofTraceException":
        """Convert this error model to a raised exception."""
        return ProofTraceException(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class ProofTraceException(Exception):
    """
    Base exception for all ProofTrace errors.

    This exception carries structured error information and can be
    converted to/from ProofTraceError models.
    """

    code_default = "PROOFTRACE_ERROR"

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code or self.code_default
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    def to_error_model(self) -> ProofTraceError:
        """Convert this exception to a ProofTraceError model."""
        return ProofTraceError(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class CanonicalizationException(ProofTraceException):
    """Exception raised when canonical serialization fails."""

    code_default = ErrorCodes.CANONICALIZATION_ERROR

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, details=details)


class NotAnObjectError(CanonicalizationException):
    """Top-level value handed to the canonicalizer is not a mapping."""

    code_default = ErrorCodes.NOT_AN_OBJECT

    def __init__(self, type_name: str) -> None:
        super().__init__(
            message=f"Can only canonicalize objects, got {type_name}",
            details={"type": type_name},
        )


class InvalidHashError(ProofTraceException):
    """A hash string is not valid prefixed hex of the expected width."""

    code_default = ErrorCodes.INVALID_HASH

    def __init__(self, value: Any, reason: str) -> None:
        preview = str(value)[:20]
        super().__init__(
            message=f"Invalid hash {preview!r}: {reason}",
            details={"value": preview, "reason": reason},
        )


class MissingInputError(ProofTraceException):
    """Neither a record nor a hash was supplied for verification."""

    code_default = ErrorCodes.MISSING_INPUT

    def __init__(self, message: str = "Must provide either record or hash") -> None:
        super().__init__(message=message)


class EmptyBatchError(ProofTraceException):
    """A batch was requested from zero hashes."""

    code_default = ErrorCodes.EMPTY_BATCH

    def __init__(self, message: str = "Cannot create batch with no hashes") -> None:
        super().__init__(message=message)


class HashMismatchError(ProofTraceException):
    """Supplied hash disagrees with the hash recomputed from the record."""

    code_default = ErrorCodes.HASH_MISMATCH

    def __init__(self, supplied: str, computed: str) -> None:
        super().__init__(
            message="Provided hash does not match computed hash from record",
            details={"supplied": supplied, "computed": computed},
        )


class NotBatchedError(ProofTraceException):
    """The content hash is not a leaf of any known batch."""

    code_default = ErrorCodes.NOT_BATCHED

    def __init__(self, inference_hash: str) -> None:
        super().__init__(
            message="Inference not found in any batch",
            details={"inference_hash": inference_hash},
        )


class ProofGenerationError(ProofTraceException):
    """The batch claims the leaf but no proof could be derived from it."""

    code_default = ErrorCodes.PROOF_GENERATION_FAILED

    def __init__(self, batch_id: str, inference_hash: str) -> None:
        super().__init__(
            message="Failed to generate Merkle proof",
            details={"batch_id": batch_id, "inference_hash": inference_hash},
        )


class ProofInvalidError(ProofTraceException):
    """A generated proof does not fold up to the batch root."""

    code_default = ErrorCodes.PROOF_INVALID

    def __init__(self, root: str, leaf_index: int | None = None) -> None:
        details: dict[str, Any] = {"root": root}
        if leaf_index is not None:
            details["leaf_index"] = leaf_index
        super().__init__(
            message="Merkle proof verification failed",
            details=details,
        )


class NotAnchoredError(ProofTraceException):
    """No anchor record exists for the batch root."""

    code_default = ErrorCodes.NOT_ANCHORED

    def __init__(self, root: str) -> None:
        super().__init__(
            message="Batch not anchored on-chain",
            details={"root": root},
        )


class OnChainMismatchError(ProofTraceException):
    """The live ledger reports no anchoring time for the root."""

    code_default = ErrorCodes.ON_CHAIN_MISMATCH

    def __init__(self, root: str) -> None:
        super().__init__(
            message="On-chain verification failed: root not found on-chain",
            details={"root": root},
        )


class ChainUnreachableError(ProofTraceException):
    """The ledger read endpoint could not be queried."""

    code_default = ErrorCodes.CHAIN_UNREACHABLE

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message=message, details=details, retryable=True)


class InvalidRootError(ProofTraceException):
    """The registry refuses to anchor an all-zero root."""

    code_default = ErrorCodes.INVALID_ROOT

    def __init__(self, root: str) -> None:
        super().__init__(
            message="Cannot anchor the zero root",
            details={"root": root},
        )


class AlreadyAnchoredError(ProofTraceException):
    """The registry already holds an anchor for this root."""

    code_default = ErrorCodes.ALREADY_ANCHORED

    def __init__(self, root: str, anchored_at: int | None = None) -> None:
        details: dict[str, Any] = {"root": root}
        if anchored_at is not None:
            details["anchored_at"] = anchored_at
        super().__init__(
            message="Root already anchored",
            details=details,
        )


class StorageException(ProofTraceException):
    """Exception raised when a store cannot read or write an object."""

    code_default = ErrorCodes.STORAGE_ERROR

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, details=details)

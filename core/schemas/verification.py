"""
Module 01 - Schemas & Canonicalization
File: verification.py

Purpose: Standard result format for inference verification.

A VerificationResult is ephemeral: computed per request and never persisted.
Negative outcomes are carried in ``error`` rather than raised.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from .commitments import AnchorRecord, MerkleProof
from .errors import ProofTraceError


# Severity levels for checks
CheckSeverity = Literal["info", "warn", "error"]


class CheckResult(BaseModel):
    """
    Result of a single verification stage.

    Checks are atomic verification steps that can pass or fail.
    """

    model_config = ConfigDict(extra="forbid")

    check_id: str = Field(
        ...,
        description="Identifier of the stage that produced this check",
        min_length=1,
    )
    ok: bool = Field(
        ...,
        description="Whether the check passed",
    )
    severity: CheckSeverity = Field(
        ...,
        description="Severity level of this check",
    )
    message: str = Field(
        ...,
        description="Human-readable message describing the result",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional details about the check",
    )

    @property
    def is_error(self) -> bool:
        """Check if this is an error-level failure."""
        return not self.ok and self.severity == "error"

    @classmethod
    def passed(
        cls,
        check_id: str,
        message: str = "Check passed",
        details: dict[str, Any] | None = None,
    ) -> "CheckResult":
        """Create a passed check result."""
        return cls(
            check_id=check_id,
            ok=True,
            severity="info",
            message=message,
            details=details or {},
        )

    @classmethod
    def skipped(
        cls,
        check_id: str,
        message: str,
    ) -> "CheckResult":
        """Create an informational result for a stage that did not run."""
        return cls(check_id=check_id, ok=True, severity="warn", message=message)

    @classmethod
    def failed(
        cls,
        check_id: str,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> "CheckResult":
        """Create a failed check result."""
        return cls(
            check_id=check_id,
            ok=False,
            severity="error",
            message=message,
            details=details or {},
        )


class VerificationResult(BaseModel):
    """
    Verdict for one inference plus whatever was resolved on the way.

    ``inference_hash``, ``merkle_root``, ``proof`` and ``anchor`` are filled in
    as the corresponding stage succeeds, so a failed result still reports how
    far verification got.
    """

    model_config = ConfigDict(extra="forbid")

    verified: bool = Field(
        ...,
        description="Overall verification success",
    )
    inference_hash: str | None = Field(
        default=None,
        description="Resolved content hash of the inference",
    )
    batch_id: str | None = Field(
        default=None,
        description="Batch containing the inference",
    )
    merkle_root: str | None = Field(
        default=None,
        description="Root of the batch containing the inference",
    )
    proof: MerkleProof | None = Field(
        default=None,
        description="Inclusion proof of the inference in the root",
    )
    anchor: AnchorRecord | None = Field(
        default=None,
        description="Anchor record for the root",
    )
    on_chain_timestamp: int | None = Field(
        default=None,
        description="Anchoring time reported by a live ledger read, if performed",
    )
    checks: list[CheckResult] = Field(
        default_factory=list,
        description="Per-stage check results in execution order",
    )
    error: ProofTraceError | None = Field(
        default=None,
        description="Cause of failure when verified is false",
    )

    @property
    def error_code(self) -> str | None:
        """Machine-readable cause of failure, if any."""
        return self.error.code if self.error else None

    @property
    def passed_count(self) -> int:
        """Count of passed checks."""
        return sum(1 for check in self.checks if check.ok)

    def get_failed_checks(self) -> list[CheckResult]:
        """Get all failed checks."""
        return [check for check in self.checks if not check.ok]

    def add_check(self, check: CheckResult) -> None:
        """Add a check result."""
        self.checks.append(check)
        if not check.ok:
            self.verified = False

    @classmethod
    def from_error(cls, error: ProofTraceError) -> "VerificationResult":
        """Create a failed verification result from an error."""
        return cls(verified=False, error=error)


class Explanation(BaseModel):
    """
    What a verification result does and does not establish.

    ``not_proven`` and ``assumptions`` are the same for every result; they
    describe the limits of the proof system itself.
    """

    model_config = ConfigDict(extra="forbid")

    proven: list[str] = Field(default_factory=list)
    not_proven: list[str] = Field(default_factory=list)
    assumptions: list[str] = Field(default_factory=list)
    details: dict[str, Any] | None = Field(
        default=None,
        description="Resolved identifiers, present only when verified",
    )

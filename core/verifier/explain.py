"""
Module 05 - Inference Verification
File: explain.py

Purpose: Plain-language account of what a verification result establishes.

Both functions are pure: they read the result and nothing else.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from core.schemas.verification import Explanation, VerificationResult


# Limits of the proof system itself; the same for every result
NOT_PROVEN: tuple[str, ...] = (
    "The correctness or accuracy of the AI output",
    "The truthfulness of any claims in the output",
    "That the AI model actually produced this output",
    "That the prompt was not manipulated before hashing",
    "The identity of the party who recorded the inference",
    "That all inferences were recorded (completeness)",
    "That the model parameters were actually used",
)

ASSUMPTIONS: tuple[str, ...] = (
    "The recording party hashed the data correctly",
    "The local storage has not been tampered with",
    "The blockchain has not experienced a reorg past the anchor block",
    "The smart contract code is correct and uncompromised",
    "The RPC endpoint returns accurate blockchain state",
)

UNABLE_TO_VERIFY = "Unable to verify inference"


def _proven_claims(result: VerificationResult) -> list[str]:
    if not result.verified or result.anchor is None:
        return [UNABLE_TO_VERIFY]

    claims = [
        "The inference metadata existed at the time of anchoring",
        "The inference has not been modified since it was batched",
        f"The batch was anchored before block {result.anchor.block_number}",
        "The Merkle proof is mathematically valid",
    ]
    if result.anchor.chain_name:
        claims.append(f"The root is stored on {result.anchor.chain_name}")
    if result.on_chain_timestamp:
        claims.append("A live ledger read confirmed the root is anchored")
    return claims


def _details(result: VerificationResult) -> dict[str, Any] | None:
    if not result.verified or result.anchor is None:
        return None
    return {
        "inference_hash": result.inference_hash,
        "merkle_root": result.merkle_root,
        "batch_id": result.batch_id,
        "tx_hash": result.anchor.tx_hash,
        "block_number": result.anchor.block_number,
        "chain_id": result.anchor.chain_id,
        "chain_name": result.anchor.chain_name,
        "anchored_at": result.anchor.anchored_at.isoformat(),
    }


def explain(result: VerificationResult) -> Explanation:
    """
    Map a verification result to what it proves, what it does not, and what
    it assumes.

    ``proven`` lists only the claims actually established, or a single
    "unable to verify" entry when the result is negative.
    """
    return Explanation(
        proven=_proven_claims(result),
        not_proven=list(NOT_PROVEN),
        assumptions=list(ASSUMPTIONS),
        details=_details(result),
    )


def format_verification_report(result: VerificationResult) -> str:
    """
    Render a verification result as human-readable lines.

    Example (verified):
        [VERIFIED] Inference verified successfully

        [VERIFIED] Existed before block 42
        [VERIFIED] Not modified since anchoring
        [VERIFIED] Merkle proof valid
        [VERIFIED] Anchored on local

        [NOT PROVEN] Does NOT prove correctness or truthfulness
        ...
    """
    lines: list[str] = []

    if result.verified and result.anchor is not None:
        lines.append("[VERIFIED] Inference verified successfully")
        lines.append("")
        lines.append(f"[VERIFIED] Existed before block {result.anchor.block_number}")
        lines.append("[VERIFIED] Not modified since anchoring")
        lines.append("[VERIFIED] Merkle proof valid")
        if result.anchor.chain_name:
            lines.append(f"[VERIFIED] Anchored on {result.anchor.chain_name}")
        if result.on_chain_timestamp:
            confirmed = datetime.fromtimestamp(result.on_chain_timestamp, tz=timezone.utc)
            lines.append(f"[VERIFIED] Ledger confirms anchoring at {confirmed.isoformat()}")
    else:
        lines.append("[FAILED] Verification failed")
        lines.append("")
        if result.error is not None:
            lines.append(f"Reason: {result.error.message}")
            lines.append(f"Code: {result.error.code}")
        else:
            lines.append("Reason: Unknown error")

    lines.append("")
    lines.append("[NOT PROVEN] Does NOT prove correctness or truthfulness")
    lines.append("[NOT PROVEN] Does NOT prove the AI actually produced this")
    lines.append("[NOT PROVEN] Does NOT prove completeness of records")

    return "\n".join(lines)

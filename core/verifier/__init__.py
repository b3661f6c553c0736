"""
Module 05 - Inference Verification

Usage:
    from core.verifier import verify_inference, explain

    result = verify_inference(inference_hash=h, batches=store, anchors=store)
    if not result.verified:
        print(result.error.code, result.error.message)
    print(explain(result).proven)
"""

from .explain import (
    ASSUMPTIONS,
    NOT_PROVEN,
    explain,
    format_verification_report,
)
from .verifier import (
    STAGES,
    InferenceVerifier,
    verify_inference,
)

__all__ = [
    "verify_inference",
    "InferenceVerifier",
    "STAGES",
    "explain",
    "format_verification_report",
    "NOT_PROVEN",
    "ASSUMPTIONS",
]

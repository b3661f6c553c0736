"""
Module 09C - CLI Verify Commands

Verify an inference against the local store, explain a verdict, or print
an inclusion proof.

Usage:
    prooftrace verify --hash 0x... [--json] [--debug]
    prooftrace verify --record record.json [--hash 0x...]
    prooftrace explain --hash 0x...
    prooftrace proof --hash 0x...
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from typing import Any

from core.merkle.merkle_tree import generate_proof
from core.schemas.verification import VerificationResult
from core.verifier.explain import explain, format_verification_report
from prooftrace_cli.commands import (
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    EXIT_VERIFICATION_FAILED,
)
from prooftrace_cli.commands.record import read_record
from prooftrace_cli.config import open_workspace


logger = logging.getLogger(__name__)


def summarize(result: VerificationResult, debug: bool = False) -> dict[str, Any]:
    """Machine-readable summary of a verification result."""
    summary: dict[str, Any] = {
        "verified": result.verified,
        "inference_hash": result.inference_hash,
        "batch_id": result.batch_id,
        "merkle_root": result.merkle_root,
    }
    if result.anchor is not None:
        summary["tx_hash"] = result.anchor.tx_hash
        summary["block_number"] = result.anchor.block_number
        summary["chain_name"] = result.anchor.chain_name
        summary["anchored_at"] = result.anchor.anchored_at.isoformat()
    if result.error is not None:
        summary["error"] = {"code": result.error.code, "message": result.error.message}
    if debug:
        summary["checks"] = [
            {"check_id": c.check_id, "ok": c.ok, "severity": c.severity, "message": c.message}
            for c in result.checks
        ]
    return summary


def _run_verification(args: Namespace) -> VerificationResult | None:
    if not args.hash and not args.record:
        print("Error: Provide --hash, --record, or both", file=sys.stderr)
        return None

    record = read_record(args.record) if args.record else None
    workspace = open_workspace(args.cli_config, ledger_url=getattr(args, "ledger_url", None))
    return workspace.verifier().verify(record=record, inference_hash=args.hash)


def verify_cmd(args: Namespace) -> int:
    """
    Execute the verify command.

    Returns:
        Exit code (0 verified, 2 not verified)
    """
    result = _run_verification(args)
    if result is None:
        return EXIT_RUNTIME_ERROR

    if args.json:
        print(json.dumps(summarize(result, debug=args.debug), indent=2))
    else:
        print(format_verification_report(result))
        if args.debug:
            print(f"\nchecks: {result.passed_count} passed, {len(result.get_failed_checks())} failed")
            for check in result.checks:
                status = "✓" if check.ok else "✗"
                print(f"  {status} {check.check_id}: {check.message}")

    if result.verified:
        logger.info("Verification passed")
        return EXIT_SUCCESS
    logger.warning(f"Verification failed: {result.error_code}")
    return EXIT_VERIFICATION_FAILED


def explain_cmd(args: Namespace) -> int:
    """Execute the explain command."""
    result = _run_verification(args)
    if result is None:
        return EXIT_RUNTIME_ERROR

    explanation = explain(result)
    if args.json:
        print(json.dumps(explanation.model_dump(mode="json"), indent=2))
        return EXIT_SUCCESS

    print("Proven:")
    for item in explanation.proven or ["(nothing)"]:
        print(f"  - {item}")
    print("\nNot proven:")
    for item in explanation.not_proven:
        print(f"  - {item}")
    print("\nAssumptions:")
    for item in explanation.assumptions:
        print(f"  - {item}")
    return EXIT_SUCCESS


def proof_cmd(args: Namespace) -> int:
    """Execute the proof command."""
    workspace = open_workspace(args.cli_config)
    batch = workspace.store.find_batch_containing(args.hash)
    if batch is None:
        print(f"Error: Inference not found in any batch: {args.hash}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    proof = generate_proof(batch, args.hash)
    if proof is None:
        print(f"Error: Failed to generate Merkle proof in batch {batch.batch_id}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    data = proof.model_dump(mode="json")
    data["batch_id"] = batch.batch_id
    if args.json:
        print(json.dumps(data, indent=2))
    else:
        print(f"batch_id: {batch.batch_id}")
        print(f"leaf: {proof.leaf}")
        print(f"leaf_index: {proof.leaf_index}")
        print(f"root: {proof.root}")
        print(f"sibling_path ({len(proof.sibling_path)}):")
        for sibling in proof.sibling_path:
            print(f"  {sibling}")
    return EXIT_SUCCESS

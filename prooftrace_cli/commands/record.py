"""
Module 09C - CLI Record and Hash Commands

Record an inference into the local store, or compute the content hash of a
record file without storing anything.

Usage:
    prooftrace record --model gpt-4 --prompt "..." --output "..." [--temperature 0.7]
    prooftrace record --model gpt-4 --prompt-hash 0x... --output-hash 0x...
    prooftrace hash record.json
"""

from __future__ import annotations

import json
import logging
import sys
import time
from argparse import Namespace
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from core.crypto.hashing import hash_bytes
from core.crypto.record_hasher import hash_record
from core.schemas.records import InferenceRecord, StoredInference
from prooftrace_cli.commands import EXIT_RUNTIME_ERROR, EXIT_SUCCESS
from prooftrace_cli.config import open_workspace


logger = logging.getLogger(__name__)


def read_record(source: str) -> InferenceRecord:
    """Load a record from a JSON file, or from stdin when source is '-'."""
    if source == "-":
        data = json.load(sys.stdin)
    else:
        with open(Path(source), encoding="utf-8") as f:
            data = json.load(f)
    return InferenceRecord.model_validate(data)


def _resolve_hash(raw_hash: str | None, text: str | None) -> str | None:
    if raw_hash:
        return raw_hash
    if text is not None:
        return hash_bytes(text)
    return None


def build_record(args: Namespace) -> InferenceRecord:
    """Build a timestamped record from command-line arguments."""
    prompt_hash = _resolve_hash(args.prompt_hash, args.prompt)
    output_hash = _resolve_hash(args.output_hash, args.output)
    if prompt_hash is None or output_hash is None:
        raise ValueError("Both a prompt (--prompt or --prompt-hash) and an output (--output or --output-hash) are required")

    parameters: dict[str, Any] = {}
    if args.temperature is not None:
        parameters["temperature"] = args.temperature
    if args.max_tokens is not None:
        parameters["max_tokens"] = args.max_tokens

    context: dict[str, Any] = {}
    if args.feature:
        context["feature"] = args.feature
    if args.user_id:
        context["user_id"] = args.user_id

    return InferenceRecord(
        model=args.model,
        prompt_hash=prompt_hash,
        output_hash=output_hash,
        parameters=parameters or None,
        context=context or None,
        timestamp=int(time.time() * 1000),
        nonce=args.nonce,
    )


def record_cmd(args: Namespace) -> int:
    """Execute the record command."""
    try:
        record = build_record(args)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    workspace = open_workspace(args.cli_config)
    stored = StoredInference(
        record=record,
        inference_hash=hash_record(record),
        stored_at=datetime.now(timezone.utc),
    )
    workspace.store.put_inference(stored)
    logger.info(f"Recorded inference {stored.inference_hash}")

    if args.json:
        print(json.dumps(stored.model_dump(mode="json"), indent=2))
    else:
        print(f"inference_hash: {stored.inference_hash}")
        print(f"stored_at: {stored.stored_at.isoformat()}")
    return EXIT_SUCCESS


def hash_cmd(args: Namespace) -> int:
    """Execute the hash command."""
    record = read_record(args.record)
    inference_hash = hash_record(record)

    if args.json:
        print(json.dumps({"inference_hash": inference_hash}))
    else:
        print(inference_hash)
    return EXIT_SUCCESS

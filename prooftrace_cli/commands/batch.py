"""
Module 09C - CLI Batch and Anchor Commands

Usage:
    prooftrace batch [--hashes 0x.. 0x..] [--size N]
    prooftrace anchor [--batch-id ID | --hashes 0x.. 0x..]
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace

from core.ledger.anchoring import anchor_batch
from core.merkle.merkle_tree import build_batch
from core.schemas.commitments import MerkleBatch
from core.schemas.errors import AlreadyAnchoredError
from prooftrace_cli.commands import EXIT_RUNTIME_ERROR, EXIT_SUCCESS
from prooftrace_cli.config import Workspace, open_workspace


logger = logging.getLogger(__name__)


def _print_batch(batch: MerkleBatch, output_json: bool) -> None:
    if output_json:
        print(json.dumps({
            "batch_id": batch.batch_id,
            "merkle_root": batch.root,
            "leaf_count": batch.leaf_count,
            "height": batch.height,
            "created_at": batch.created_at.isoformat(),
        }, indent=2))
    else:
        print(f"batch_id: {batch.batch_id}")
        print(f"merkle_root: {batch.root}")
        print(f"leaf_count: {batch.leaf_count}")


def batch_cmd(args: Namespace) -> int:
    """Execute the batch command."""
    workspace = open_workspace(args.cli_config)

    if args.hashes:
        hashes = list(args.hashes)
    else:
        unbatched = workspace.store.unbatched_inferences()
        if not unbatched:
            print("Error: No unbatched inferences available", file=sys.stderr)
            return EXIT_RUNTIME_ERROR
        if args.size:
            unbatched = unbatched[: args.size]
        hashes = [inf.inference_hash for inf in unbatched]

    batch = build_batch(hashes)
    workspace.store.put_batch(batch)
    logger.info(f"Created batch {batch.batch_id} with {batch.leaf_count} leaves")

    _print_batch(batch, args.json)
    return EXIT_SUCCESS


def _select_batch(args: Namespace, workspace: Workspace) -> MerkleBatch | None:
    if args.batch_id:
        batch = workspace.store.get_batch(args.batch_id)
        if batch is None:
            print(f"Error: Batch not found: {args.batch_id}", file=sys.stderr)
        return batch

    if args.hashes:
        batch = build_batch(args.hashes)
        if workspace.store.get_by_root(batch.root) is not None:
            raise AlreadyAnchoredError(batch.root)
        workspace.store.put_batch(batch)
        return batch

    unanchored = workspace.store.unanchored_batches()
    if not unanchored:
        print("Error: No unanchored batches available", file=sys.stderr)
        return None
    return unanchored[0]


def anchor_cmd(args: Namespace) -> int:
    """Execute the anchor command."""
    workspace = open_workspace(args.cli_config)

    batch = _select_batch(args, workspace)
    if batch is None:
        return EXIT_RUNTIME_ERROR

    anchor = anchor_batch(batch, workspace.registry, workspace.store, workspace.config.chain)

    if args.json:
        print(json.dumps(anchor.model_dump(mode="json"), indent=2))
    else:
        print(f"batch_id: {anchor.batch_id}")
        print(f"merkle_root: {anchor.root}")
        print(f"tx_hash: {anchor.tx_hash}")
        print(f"block_number: {anchor.block_number}")
        print(f"chain: {anchor.chain_name} ({anchor.chain_id})")
        print(f"anchored_at: {anchor.anchored_at.isoformat()}")
    return EXIT_SUCCESS

"""
Anchoring

Submits a batch root to a registry and records the resulting anchor.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from core.config.runtime import ChainConfig
from core.schemas.commitments import AnchorRecord, MerkleBatch
from core.schemas.errors import StorageException
from core.storage.base import AnchorStore

from .registry import AnchorRegistry

logger = logging.getLogger(__name__)


def anchor_batch(
    batch: MerkleBatch,
    registry: AnchorRegistry,
    anchors: AnchorStore,
    chain: ChainConfig,
) -> AnchorRecord:
    """
    Anchor a batch root and store the anchor record.

    Raises:
        InvalidRootError: If the root is all zeros.
        AlreadyAnchoredError: If the registry already holds the root.
        StorageException: If the anchor record cannot be stored.
    """
    receipt = registry.anchor_root(batch.root)
    record = AnchorRecord(
        batch_id=batch.batch_id,
        root=receipt.root,
        tx_hash=receipt.tx_hash,
        block_number=receipt.block_number,
        chain_id=chain.chain_id,
        chain_name=chain.name,
        anchored_at=datetime.fromtimestamp(receipt.timestamp, tz=timezone.utc),
    )
    try:
        anchors.put_anchor(record)
    except StorageException as e:
        # The registry already holds the root; the receipt below is the only
        # trace of it until the anchor record is stored again.
        logger.error(
            f"Root {record.root} of batch {batch.batch_id} was anchored but its record "
            f"was not stored: tx_hash={record.tx_hash} block_number={record.block_number} "
            f"anchored_at={record.anchored_at.isoformat()}: {e.message}"
        )
        raise
    logger.info(
        f"Batch {batch.batch_id} anchored on {chain.name} "
        f"at block {record.block_number}"
    )
    return record

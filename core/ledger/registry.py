"""
Anchor Registry

Interfaces to the append-only commitment registry and an in-process
implementation of it.

The registry accepts each root at most once and never accepts the all-zero
root. A root that was never anchored reads back as timestamp 0.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Iterable, Protocol, runtime_checkable

from core.crypto.hashing import normalize_content_hash, normalize_hash, sha256, to_hex
from core.schemas.commitments import AnchorRecord
from core.schemas.errors import AlreadyAnchoredError, InvalidRootError

logger = logging.getLogger(__name__)

ZERO_ROOT = "0x" + "00" * 32


@dataclass(frozen=True)
class AnchorReceipt:
    """What the registry reports back after anchoring a root."""
    root: str
    tx_hash: str
    block_number: int
    timestamp: int


@runtime_checkable
class LedgerReader(Protocol):
    """Read side of the registry, used for live confirmation."""

    def anchored_at(self, root: str) -> int:
        """Anchoring timestamp (seconds) of root, or 0 if never anchored."""
        ...


@runtime_checkable
class AnchorRegistry(LedgerReader, Protocol):
    """Write side of the registry: one logical operation, anchor a root."""

    def anchor_root(self, root: str) -> AnchorReceipt:
        """
        Anchor a root.

        Raises:
            InvalidRootError: If root is all zeros.
            AlreadyAnchoredError: If root was anchored before.
        """
        ...

    def is_anchored(self, root: str) -> bool:
        """Whether root has been anchored."""
        ...


class LocalRegistry:
    """
    In-process append-only registry.

    Transaction ids are derived from chain id, root and block height, so a
    replay of the same anchoring sequence yields the same ids. Each anchor
    advances the block height by one.
    """

    def __init__(
        self,
        *,
        chain_id: int = 31337,
        start_block: int = 1,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.chain_id = chain_id
        self._clock = clock
        self._next_block = start_block
        self._receipts: dict[str, AnchorReceipt] = {}
        self._lock = threading.Lock()

    @classmethod
    def from_anchors(
        cls,
        anchors: Iterable[AnchorRecord],
        *,
        chain_id: int = 31337,
        clock: Callable[[], float] = time.time,
    ) -> "LocalRegistry":
        """Rebuild registry state from previously stored anchor records."""
        registry = cls(chain_id=chain_id, clock=clock)
        for anchor in sorted(anchors, key=lambda a: a.block_number):
            root = normalize_hash(anchor.root)
            registry._receipts[root] = AnchorReceipt(
                root=root,
                tx_hash=anchor.tx_hash,
                block_number=anchor.block_number,
                timestamp=int(anchor.anchored_at.timestamp()),
            )
            registry._next_block = max(registry._next_block, anchor.block_number + 1)
        return registry

    def anchor_root(self, root: str) -> AnchorReceipt:
        normalized = normalize_content_hash(root)
        if normalized == ZERO_ROOT:
            raise InvalidRootError(normalized)

        with self._lock:
            existing = self._receipts.get(normalized)
            if existing is not None:
                raise AlreadyAnchoredError(normalized, anchored_at=existing.timestamp)

            block_number = self._next_block
            self._next_block += 1
            tx_hash = to_hex(sha256(f"{self.chain_id}:{block_number}:{normalized}".encode("utf-8")))
            receipt = AnchorReceipt(
                root=normalized,
                tx_hash=tx_hash,
                block_number=block_number,
                timestamp=int(self._clock()),
            )
            self._receipts[normalized] = receipt

        logger.info(f"Anchored root {normalized} in block {block_number} (tx {tx_hash})")
        return receipt

    def anchored_at(self, root: str) -> int:
        receipt = self._receipts.get(normalize_hash(root))
        return receipt.timestamp if receipt else 0

    def is_anchored(self, root: str) -> bool:
        return normalize_hash(root) in self._receipts

    def receipt_for(self, root: str) -> AnchorReceipt | None:
        """Full receipt for an anchored root."""
        return self._receipts.get(normalize_hash(root))

"""
Ledger collaborators: the anchor registry, live ledger reads and anchoring.
"""

from .anchoring import anchor_batch
from .http_reader import HttpLedgerReader
from .registry import (
    ZERO_ROOT,
    AnchorReceipt,
    AnchorRegistry,
    LedgerReader,
    LocalRegistry,
)

__all__ = [
    "ZERO_ROOT",
    "AnchorReceipt",
    "AnchorRegistry",
    "LedgerReader",
    "LocalRegistry",
    "HttpLedgerReader",
    "anchor_batch",
]

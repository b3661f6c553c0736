"""
Storage for recorded inferences, Merkle batches and anchor records.

Usage:
    from core.storage import JsonFileStore

    store = JsonFileStore("./data")
    store.put_batch(batch)
    store.find_batch_containing(inference_hash)
"""

from .base import AnchorStore, BatchStore, InferenceStore
from .json_files import JsonFileStore
from .memory import InMemoryStore

__all__ = [
    "BatchStore",
    "AnchorStore",
    "InferenceStore",
    "InMemoryStore",
    "JsonFileStore",
]

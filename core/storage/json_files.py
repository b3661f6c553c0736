"""
JSON Directory Store

Persists inferences, batches and anchors as one JSON file per object:

    <data_dir>/
        inferences/<hash body>.json
        batches/<batch_id>.json
        anchors/<batch_id>.json

Existing files are loaded on construction. Files that cannot be read or
parsed are logged and skipped so one corrupt file does not take the whole
store down.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import TypeVar

from pydantic import BaseModel, ValidationError

from core.crypto.hashing import normalize_hash
from core.schemas.commitments import AnchorRecord, MerkleBatch
from core.schemas.errors import StorageException
from core.schemas.records import StoredInference

from .memory import InMemoryStore

logger = logging.getLogger(__name__)

INFERENCES_DIR = "inferences"
BATCHES_DIR = "batches"
ANCHORS_DIR = "anchors"

ModelT = TypeVar("ModelT", bound=BaseModel)


def _atomic_write(path: Path, content: str) -> None:
    """Write a file via a temp file in the same directory and rename it."""
    fd, tmp = tempfile.mkstemp(dir=path.parent, suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        os.replace(tmp, path)
    except OSError:
        if os.path.exists(tmp):
            os.unlink(tmp)
        raise


class JsonFileStore(InMemoryStore):
    """InMemoryStore mirrored to a directory of JSON files."""

    def __init__(self, data_dir: str | Path) -> None:
        super().__init__()
        self.data_dir = Path(data_dir)
        try:
            for sub in (INFERENCES_DIR, BATCHES_DIR, ANCHORS_DIR):
                (self.data_dir / sub).mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageException(
                f"Cannot create data directory {self.data_dir}: {e}",
                details={"data_dir": str(self.data_dir)},
            ) from e
        self._load()

    def __repr__(self) -> str:
        return f"JsonFileStore({str(self.data_dir)!r})"

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def _load(self) -> None:
        for inference in self._read_dir(INFERENCES_DIR, StoredInference):
            super().put_inference(inference)

        # Oldest first so find_batch_containing prefers the earliest batch
        batches = sorted(self._read_dir(BATCHES_DIR, MerkleBatch), key=lambda b: b.created_at)
        for batch in batches:
            super().put_batch(batch)

        for anchor in self._read_dir(ANCHORS_DIR, AnchorRecord):
            try:
                super().put_anchor(anchor)
            except StorageException as e:
                logger.warning(f"Skipping duplicate anchor for root {anchor.root}: {e.message}")

        logger.info(
            f"Loaded store from {self.data_dir}: "
            f"{len(self._inferences)} inferences, {len(self._batches)} batches, "
            f"{len(self._anchors)} anchors"
        )

    def _read_dir(self, sub: str, model: type[ModelT]) -> list[ModelT]:
        items: list[ModelT] = []
        for path in sorted((self.data_dir / sub).glob("*.json")):
            try:
                items.append(model.model_validate_json(path.read_text(encoding="utf-8")))
            except (OSError, ValidationError) as e:
                logger.error(f"Failed to load {model.__name__} from {path}: {e}")
        return items

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def _path_for(self, sub: str, name: str) -> Path:
        if not name or name.startswith(".") or "/" in name or "\\" in name:
            raise StorageException(
                f"Unsafe file name for stored object: {name!r}",
                details={"name": name},
            )
        return self.data_dir / sub / f"{name}.json"

    def _write(self, path: Path, obj: BaseModel) -> None:
        try:
            _atomic_write(path, obj.model_dump_json(indent=2))
        except OSError as e:
            raise StorageException(
                f"Failed to write {path}: {e}",
                details={"path": str(path)},
            ) from e

    # Memory is updated before disk: it enforces uniqueness. A failed write
    # undoes the memory update so the two never disagree.

    def put_inference(self, inference: StoredInference) -> None:
        key = normalize_hash(inference.inference_hash)
        path = self._path_for(INFERENCES_DIR, key[2:])
        with self._lock:
            previous = self._inferences.get(key)
            super().put_inference(inference)
            try:
                self._write(path, inference)
            except StorageException:
                if previous is None:
                    del self._inferences[key]
                else:
                    self._inferences[key] = previous
                raise

    def put_batch(self, batch: MerkleBatch) -> None:
        path = self._path_for(BATCHES_DIR, batch.batch_id)
        with self._lock:
            if self.get_batch(batch.batch_id) == batch:
                return
            super().put_batch(batch)
            try:
                self._write(path, batch)
            except StorageException:
                self._forget_batch(batch.batch_id)
                raise

    def put_anchor(self, anchor: AnchorRecord) -> None:
        path = self._path_for(ANCHORS_DIR, anchor.batch_id)
        with self._lock:
            super().put_anchor(anchor)
            try:
                self._write(path, anchor)
            except StorageException:
                del self._anchors[normalize_hash(anchor.root)]
                raise

    def _forget_batch(self, batch_id: str) -> None:
        batch = self._batches.pop(batch_id)
        for leaf in dict.fromkeys(normalize_hash(h) for h in batch.leaves):
            ids = self._leaf_index[leaf]
            ids.remove(batch_id)
            if not ids:
                del self._leaf_index[leaf]

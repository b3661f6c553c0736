"""
Module 06 - Ledger Unit Tests
Tests for core/ledger (registry, HTTP reader, anchoring) and core/http
"""

import logging
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest
import requests

from core.config.runtime import ChainConfig
from core.http.client import HttpClient, HttpError, HttpResponse
from core.ledger import HttpLedgerReader, LocalRegistry, anchor_batch
from core.ledger.registry import ZERO_ROOT, AnchorRegistry, LedgerReader
from core.schemas.errors import (
    AlreadyAnchoredError,
    ChainUnreachableError,
    InvalidHashError,
    InvalidRootError,
    StorageException,
)
from core.storage.memory import InMemoryStore

from fixtures.common import FIXED_CLOCK, make_batch, make_hash, make_hashes, make_registry


# =============================================================================
# Fakes
# =============================================================================

class FakeClient:
    """Stands in for HttpClient; replays one response or error."""

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.paths: list[str] = []

    def get(self, path, **kwargs):
        self.paths.append(path)
        if self.error is not None:
            raise self.error
        return self.response

    def close(self):
        pass


def _response(status_code: int, body: bytes = b"") -> HttpResponse:
    return HttpResponse(status_code=status_code, content=body)


class FakeSession:
    """Stands in for requests.Session."""

    def __init__(self, status_code=200, content=b"{}", error=None):
        self.status_code = status_code
        self.content = content
        self.error = error
        self.calls: list[dict] = []
        self.closed = False

    def request(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return SimpleNamespace(
            status_code=self.status_code,
            content=self.content,
            headers={"content-type": "application/json"},
            url=kwargs["url"],
            elapsed=timedelta(milliseconds=5),
        )

    def close(self):
        self.closed = True


# =============================================================================
# LocalRegistry
# =============================================================================

class TestLocalRegistry:
    """Tests for the in-process registry."""

    def test_satisfies_protocols(self):
        registry = make_registry()
        assert isinstance(registry, AnchorRegistry)
        assert isinstance(registry, LedgerReader)

    def test_anchor_then_read(self):
        registry = make_registry()
        root = make_hash("root")
        receipt = registry.anchor_root(root)
        assert receipt.root == root
        assert receipt.timestamp == FIXED_CLOCK
        assert registry.anchored_at(root) == FIXED_CLOCK
        assert registry.is_anchored(root)

    def test_unknown_root_reads_zero(self):
        registry = make_registry()
        assert registry.anchored_at(make_hash("never")) == 0
        assert not registry.is_anchored(make_hash("never"))

    def test_case_insensitive(self):
        registry = make_registry()
        root = make_hash("root")
        registry.anchor_root(root.upper().replace("0X", "0x"))
        assert registry.anchored_at(root) == FIXED_CLOCK

    def test_block_numbers_increase(self):
        registry = make_registry()
        blocks = [registry.anchor_root(h).block_number for h in make_hashes(3)]
        assert blocks == [1, 2, 3]

    def test_tx_hash_deterministic(self):
        a, b = make_registry(), make_registry()
        root = make_hash("root")
        assert a.anchor_root(root).tx_hash == b.anchor_root(root).tx_hash

    def test_duplicate_rejected(self):
        registry = make_registry()
        root = make_hash("root")
        registry.anchor_root(root)
        with pytest.raises(AlreadyAnchoredError) as exc_info:
            registry.anchor_root(root)
        assert exc_info.value.code == "ALREADY_ANCHORED"

    def test_zero_root_rejected(self):
        with pytest.raises(InvalidRootError):
            make_registry().anchor_root(ZERO_ROOT)

    def test_malformed_root_rejected(self):
        with pytest.raises(InvalidHashError):
            make_registry().anchor_root("0x1234")

    def test_zero_clock_still_anchored(self):
        registry = LocalRegistry(clock=lambda: 0)
        root = make_hash("root")
        registry.anchor_root(root)
        assert registry.is_anchored(root)

    def test_receipt_for(self):
        registry = make_registry()
        root = make_hash("root")
        receipt = registry.anchor_root(root)
        assert registry.receipt_for(root) == receipt
        assert registry.receipt_for(make_hash("other")) is None


# =============================================================================
# Anchoring
# =============================================================================

class TestAnchorBatch:
    """Tests for anchor_batch."""

    def test_creates_and_stores_record(self):
        store = InMemoryStore()
        registry = make_registry()
        batch = make_batch()
        chain = ChainConfig(name="testnet", chain_id=5)

        anchor = anchor_batch(batch, registry, store, chain)
        assert anchor.batch_id == batch.batch_id
        assert anchor.root == batch.root
        assert anchor.chain_name == "testnet"
        assert anchor.chain_id == 5
        assert anchor.block_number == 1
        assert anchor.anchored_at == datetime.fromtimestamp(FIXED_CLOCK, tz=timezone.utc)
        assert store.get_by_root(batch.root) == anchor

    def test_second_anchor_of_same_root_fails(self):
        store = InMemoryStore()
        registry = make_registry()
        batch = make_batch()
        anchor_batch(batch, registry, store, ChainConfig())
        with pytest.raises(AlreadyAnchoredError):
            anchor_batch(batch, registry, store, ChainConfig())
        assert len(store.all_anchors()) == 1

    def test_from_anchors_restores_state(self):
        store = InMemoryStore()
        registry = make_registry()
        batches = [make_batch(make_hashes(2, p), batch_id=f"batch_{p}") for p in ("a", "b")]
        for batch in batches:
            anchor_batch(batch, registry, store, ChainConfig())

        restored = LocalRegistry.from_anchors(store.all_anchors())
        assert restored.anchored_at(batches[0].root) == FIXED_CLOCK
        with pytest.raises(AlreadyAnchoredError):
            restored.anchor_root(batches[1].root)
        assert restored.anchor_root(make_hash("fresh")).block_number == 3

    def test_store_failure_logs_receipt(self, caplog):
        class FailingAnchorStore(InMemoryStore):
            def put_anchor(self, anchor):
                raise StorageException("Failed to write anchor: disk full")

        registry = make_registry()
        batch = make_batch()
        with caplog.at_level(logging.ERROR, logger="core.ledger.anchoring"):
            with pytest.raises(StorageException):
                anchor_batch(batch, registry, FailingAnchorStore(), ChainConfig())

        receipt = registry.receipt_for(batch.root)
        assert receipt is not None
        errors = [r for r in caplog.records if r.levelno == logging.ERROR]
        assert len(errors) == 1
        message = errors[0].getMessage()
        assert batch.root in message
        assert batch.batch_id in message
        assert receipt.tx_hash in message
        assert f"block_number={receipt.block_number}" in message


# =============================================================================
# HttpLedgerReader
# =============================================================================

class TestHttpLedgerReader:
    """Tests for the HTTP ledger reader."""

    def test_anchored(self):
        client = FakeClient(_response(200, b'{"root": "0x", "anchored_at": 1700000000}'))
        reader = HttpLedgerReader("https://ledger.example", client=client)
        root = make_hash("root")
        assert reader.anchored_at(root.upper().replace("0X", "0x")) == 1700000000
        assert client.paths == [f"/anchors/{root}"]

    def test_not_found_reads_zero(self):
        reader = HttpLedgerReader("https://ledger.example", client=FakeClient(_response(404)))
        assert reader.anchored_at(make_hash("root")) == 0

    def test_server_error(self):
        reader = HttpLedgerReader("https://ledger.example", client=FakeClient(_response(502)))
        with pytest.raises(ChainUnreachableError, match="HTTP 502") as exc_info:
            reader.anchored_at(make_hash("root"))
        assert exc_info.value.retryable

    def test_transport_error(self):
        reader = HttpLedgerReader(
            "https://ledger.example",
            client=FakeClient(error=HttpError("connection refused")),
        )
        with pytest.raises(ChainUnreachableError, match="connection refused"):
            reader.anchored_at(make_hash("root"))

    def test_malformed_body(self):
        reader = HttpLedgerReader("https://ledger.example", client=FakeClient(_response(200, b"not json")))
        with pytest.raises(ChainUnreachableError, match="malformed"):
            reader.anchored_at(make_hash("root"))

    def test_base_url_trailing_slash(self):
        reader = HttpLedgerReader("https://ledger.example/", client=FakeClient(_response(404)))
        assert reader.base_url == "https://ledger.example"


# =============================================================================
# HttpClient
# =============================================================================

class TestHttpClient:
    """Tests for the requests-backed client."""

    def test_url_joined_to_base(self):
        session = FakeSession()
        client = HttpClient(base_url="https://ledger.example/v1/", session=session)
        client.get("/anchors/0xab")
        assert session.calls[0]["url"] == "https://ledger.example/v1/anchors/0xab"
        assert session.calls[0]["method"] == "GET"

    def test_default_timeout(self):
        session = FakeSession()
        HttpClient(timeout=3.5, session=session).get("https://x.example/")
        assert session.calls[0]["timeout"] == 3.5

    def test_response_wrapped(self):
        client = HttpClient(session=FakeSession(status_code=201, content=b'{"a": 1}'))
        response = client.get("https://x.example/")
        assert response.ok
        assert response.json() == {"a": 1}
        assert response.elapsed_ms == 5.0

    def test_non_2xx_returned(self):
        response = HttpClient(session=FakeSession(status_code=500)).get("https://x.example/")
        assert not response.ok
        with pytest.raises(HttpError) as exc_info:
            response.raise_for_status()
        assert exc_info.value.status_code == 500

    def test_transport_error_wrapped(self):
        client = HttpClient(session=FakeSession(error=requests.ConnectionError("down")))
        with pytest.raises(HttpError, match="down"):
            client.get("https://x.example/")

    def test_context_manager_closes(self):
        session = FakeSession()
        with HttpClient(session=session) as client:
            client.get("https://x.example/")
        assert session.closed

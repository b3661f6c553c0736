"""
Module 09D - FastAPI Application

Main application setup and configuration.

Usage:
    uvicorn api.app:create_app --factory --reload

    # Or run directly
    python -m api.app
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.errors import (
    APIError,
    api_error_handler,
    generic_error_handler,
    prooftrace_error_handler,
)
from api.routes import anchor, batch, health, inference, verify
from core.config.runtime import RuntimeConfig
from core.ledger.http_reader import HttpLedgerReader
from core.ledger.registry import AnchorRegistry, LedgerReader, LocalRegistry
from core.schemas.errors import ProofTraceException
from core.storage.json_files import JsonFileStore
from core.storage.memory import InMemoryStore


logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def create_app(
    store: Optional[InMemoryStore] = None,
    registry: Optional[AnchorRegistry] = None,
    config: Optional[RuntimeConfig] = None,
    ledger: Optional[LedgerReader] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Collaborators not passed in are built from configuration: a JSON file
    store under ``storage.data_dir``, a local registry rebuilt from the stored
    anchors, and an HTTP ledger reader when ``chain.ledger_url`` is set.
    """
    config = config or RuntimeConfig.discover()
    configure_logging(config.server.log_level)

    if store is None:
        store = JsonFileStore(config.storage.data_dir)
    if registry is None:
        registry = LocalRegistry.from_anchors(store.all_anchors(), chain_id=config.chain.chain_id)
    if ledger is None and config.chain.ledger_url:
        ledger = HttpLedgerReader(config.chain.ledger_url, timeout=config.chain.timeout)

    app = FastAPI(
        title="ProofTrace API",
        description="""
HTTP API for recording AI inferences and proving them after the fact.

## Endpoints

- **POST /inference** - Record inference metadata, returns its content hash
- **POST /batch** - Commit inference hashes to a Merkle root
- **POST /anchor** - Anchor a batch root in the registry
- **POST /verify** - Verify an inference by record or hash
- **GET /verify/explain** - What a verification does and does not prove
- **GET /stats** - Store statistics
- **GET /health** - Health check
        """,
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.state.config = config
    app.state.store = store
    app.state.registry = registry
    app.state.ledger = ledger

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(ProofTraceException, prooftrace_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)

    app.include_router(health.router)
    app.include_router(inference.router)
    app.include_router(batch.router)
    app.include_router(anchor.router)
    app.include_router(verify.router)

    logger.info(
        f"ProofTrace API ready (chain={config.chain.name}, "
        f"ledger={'live' if ledger else 'off'})"
    )
    return app


def main() -> None:
    import uvicorn

    config = RuntimeConfig.discover()
    uvicorn.run(create_app(config=config), host=config.server.host, port=config.server.port)


if __name__ == "__main__":
    main()

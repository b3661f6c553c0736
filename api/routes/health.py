"""
Module 09D - Health and Stats Routes

Liveness probe and store statistics.
"""

from fastapi import APIRouter, Depends

from api.deps import get_config, get_store
from api.models.responses import HealthResponse, StatsResponse
from core.config.runtime import RuntimeConfig
from core.storage.memory import InMemoryStore


router = APIRouter(tags=["health"])


@router.get("/", response_model=HealthResponse)
@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Health check endpoint.

    Returns service status for liveness probes.
    """
    return HealthResponse()


@router.get("/stats", response_model=StatsResponse)
def stats(
    store: InMemoryStore = Depends(get_store),
    config: RuntimeConfig = Depends(get_config),
) -> StatsResponse:
    """Counts of recorded inferences, batches and anchors, and pending work."""
    return StatsResponse(
        **store.stats(),
        chain_name=config.chain.name,
        chain_id=config.chain.chain_id,
    )

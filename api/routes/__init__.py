"""API route handlers."""

from api.routes import anchor, batch, health, inference, verify

__all__ = ["anchor", "batch", "health", "inference", "verify"]

"""
Module 09D - Minimal API (FastAPI)

HTTP API for ProofTrace:
- POST /inference - Record an inference
- POST /batch - Build a Merkle batch
- POST /anchor - Anchor a batch root
- POST /verify - Verify an inference
- GET /health - Health check

Usage:
    uvicorn api.app:create_app --factory --reload
"""

__version__ = "0.1.0"

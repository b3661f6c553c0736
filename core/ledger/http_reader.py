"""
HTTP Ledger Reader

Reads anchoring times from a remote ledger endpoint:

    GET {base_url}/anchors/{root}
        200 -> {"root": "0x...", "anchored_at": <seconds>}
        404 -> root never anchored

The API server exposes the same endpoint under /ledger, so one deployment
can act as the ledger oracle for another.
"""

from __future__ import annotations

import logging
from typing import Optional

from core.crypto.hashing import normalize_hash
from core.http.client import HttpClient, HttpError
from core.schemas.errors import ChainUnreachableError

logger = logging.getLogger(__name__)


class HttpLedgerReader:
    """LedgerReader backed by an HTTP endpoint."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 10.0,
        client: Optional[HttpClient] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = client or HttpClient(base_url=self.base_url, timeout=timeout)

    def anchored_at(self, root: str) -> int:
        """
        Query the anchoring time of a root.

        Returns:
            Seconds since epoch, or 0 if the ledger has no anchor for root.

        Raises:
            ChainUnreachableError: On transport failure, an unexpected status,
                or a malformed response body.
        """
        normalized = normalize_hash(root)
        try:
            response = self._client.get(f"/anchors/{normalized}")
        except HttpError as e:
            raise ChainUnreachableError(
                f"On-chain check failed: {e}",
                details={"base_url": self.base_url, "root": normalized},
            ) from e

        if response.status_code == 404:
            return 0
        if not response.ok:
            raise ChainUnreachableError(
                f"On-chain check failed: ledger returned HTTP {response.status_code}",
                details={
                    "base_url": self.base_url,
                    "root": normalized,
                    "status_code": response.status_code,
                },
            )

        try:
            return int(response.json().get("anchored_at") or 0)
        except (ValueError, TypeError, AttributeError) as e:
            raise ChainUnreachableError(
                f"On-chain check failed: malformed ledger response: {e}",
                details={"base_url": self.base_url, "root": normalized},
            ) from e

    def close(self) -> None:
        self._client.close()

"""
IPFS access for metadata documents.

Documents are fetched through an HTTP gateway. A failed fetch is never an
error for the caller: the resolver treats it as "no document".
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

import httpx

logger = logging.getLogger(__name__)


class ContentFetcher(ABC):
    """Fetches content-addressed documents."""

    @abstractmethod
    def fetch(self, content_id: str) -> Optional[bytes]:
        """Return the raw document bytes, or None if they are unavailable."""
        pass


class IpfsClient(ContentFetcher):
    """
    Gateway client for IPFS documents.
    """

    def __init__(
        self,
        gateway_url: str,
        timeout: float = 30.0,
        client: Optional[httpx.Client] = None,
    ):
        self.gateway_url = gateway_url.rstrip("/")
        self.client = client or httpx.Client(timeout=timeout, follow_redirects=True)

    def close(self) -> None:
        """Close the HTTP client."""
        self.client.close()

    def __enter__(self) -> "IpfsClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def fetch(self, content_id: str) -> Optional[bytes]:
        """GET ``{gateway}/{content_id}``."""
        url = f"{self.gateway_url}/{content_id}"
        try:
            response = self.client.get(url)
        except httpx.HTTPError as e:
            logger.warning(f"Failed to fetch {content_id} from IPFS gateway: {e}")
            return None

        if response.status_code == 404:
            logger.warning(f"IPFS document {content_id} not found")
            return None
        if response.is_error:
            logger.warning(
                f"IPFS gateway returned {response.status_code} for {content_id}"
            )
            return None

        return response.content or None

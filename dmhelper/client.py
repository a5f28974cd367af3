# dmhelper/client.py
import logging
from typing import Any, Optional

import httpx
import requests

from .errors import TransportError

logger = logging.getLogger(__name__)


class CatalogClient:
    """Blocking catalog client. One GET per fetch, no retries."""

    def __init__(self, timeout: float = 10, session: Optional[requests.Session] = None):
        self.timeout = timeout
        self.session = session or requests.Session()

    def fetch(self, url: str) -> Any:
        logger.info("GET %s", url)
        try:
            r = self.session.get(url, headers={"Accept": "application/json"}, timeout=self.timeout)
            r.raise_for_status()
        except requests.exceptions.HTTPError as e:
            status_code = e.response.status_code if e.response is not None else None
            raise TransportError(url, f"HTTP {status_code} from catalog", status_code=status_code) from e
        except requests.exceptions.RequestException as e:
            raise TransportError(url, f"Catalog request failed: {e}") from e

        try:
            return r.json()
        except ValueError as e:
            raise TransportError(url, "Catalog returned a non-JSON body", status_code=r.status_code) from e

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "CatalogClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class AsyncCatalogClient:
    """Async variant of CatalogClient backed by httpx."""

    def __init__(self, timeout: float = 10, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.timeout = timeout
        self._client = httpx.AsyncClient(
            timeout=timeout,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    async def fetch(self, url: str) -> Any:
        logger.info("GET %s", url)
        try:
            r = await self._client.get(url)
            r.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise TransportError(url, f"HTTP {e.response.status_code} from catalog", status_code=e.response.status_code) from e
        except httpx.HTTPError as e:
            raise TransportError(url, f"Catalog request failed: {e}") from e

        try:
            return r.json()
        except ValueError as e:
            raise TransportError(url, "Catalog returned a non-JSON body", status_code=r.status_code) from e

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "AsyncCatalogClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

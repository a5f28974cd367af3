# dmhelper/lookup.py
import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from .cache import ProductCache
from .config import Settings, build_product_url
from .errors import InvalidResponseError, ParseError, TransportError
from .models import ProductRecord
from .parser import ResponseParser

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def normalize_identifier(identifier: str) -> str:
    key = identifier.strip().lower()
    if not key:
        raise ValueError("identifier must not be empty")
    return key


class LookupService:
    """
    Answers "which product has this barcode?".

    Fresh cache entries are served without touching the network. A miss
    fetches from the catalog, parses the payload and caches the result.
    Failed fetches are never cached, so the next lookup tries again.
    """

    def __init__(
        self,
        client: Any,
        cache: Optional[ProductCache] = None,
        parser: Optional[ResponseParser] = None,
        settings: Optional[Settings] = None,
        clock: Clock = utc_now,
    ) -> None:
        self.settings = settings or Settings()
        self.client = client
        self.cache = cache if cache is not None else ProductCache(self.settings.cache_ttl)
        self.parser = parser or ResponseParser()
        self.clock = clock

    def _from_cache(self, key: str, now: datetime) -> Optional[ProductRecord]:
        record = self.cache.get(key, now)
        if record is not None:
            logger.debug("Cache hit for %s", key)
        else:
            logger.debug("Cache miss for %s", key)
        return record

    def _parse_and_store(self, key: str, payload: Any, now: datetime) -> ProductRecord:
        try:
            record = self.parser.parse(payload)
        except ParseError as e:
            logger.warning("Invalid catalog response for %s: %s", key, e)
            raise InvalidResponseError(e) from e
        self.cache.put(key, record, now)
        return record

    def lookup(self, identifier: str) -> ProductRecord:
        key = normalize_identifier(identifier)
        now = self.clock()
        record = self._from_cache(key, now)
        if record is not None:
            return record

        url = build_product_url(key, self.settings)
        try:
            payload = self.client.fetch(url)
        except TransportError as e:
            logger.warning("Lookup of %s failed: %s", key, e)
            raise
        return self._parse_and_store(key, payload, now)


class AsyncLookupService(LookupService):
    """LookupService for an AsyncCatalogClient.

    The read-check-fetch-write sequence runs under one lock, so concurrent
    misses for the same identifier result in a single catalog request.
    """

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._lock = asyncio.Lock()

    async def lookup(self, identifier: str) -> ProductRecord:  # type: ignore[override]
        key = normalize_identifier(identifier)
        async with self._lock:
            now = self.clock()
            record = self._from_cache(key, now)
            if record is not None:
                return record

            url = build_product_url(key, self.settings)
            try:
                payload = await self.client.fetch(url)
            except TransportError as e:
                logger.warning("Lookup of %s failed: %s", key, e)
                raise
            return self._parse_and_store(key, payload, now)

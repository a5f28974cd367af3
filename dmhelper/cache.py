"""In-memory TTL cache for looked-up products.

Entries are never evicted; a stale entry is simply ignored by ``get`` and
replaced by the next ``put`` for the same identifier. The map grows with the
number of distinct identifiers seen in a session.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Dict, Optional

from .models import ProductRecord

DEFAULT_TTL = timedelta(minutes=30)


@dataclass(frozen=True)
class CacheEntry:
    record: ProductRecord
    expires_at: datetime

    def is_fresh(self, now: datetime) -> bool:
        return now <= self.expires_at


class ProductCache:
    def __init__(self, ttl: timedelta = DEFAULT_TTL) -> None:
        self.ttl = ttl
        self._entries: Dict[str, CacheEntry] = {}

    def get(self, identifier: str, now: datetime) -> Optional[ProductRecord]:
        entry = self._entries.get(identifier)
        if entry is None or not entry.is_fresh(now):
            return None
        return entry.record

    def put(self, identifier: str, record: ProductRecord, now: datetime) -> CacheEntry:
        entry = CacheEntry(record=record, expires_at=now + self.ttl)
        self._entries[identifier] = entry
        return entry

    def entry(self, identifier: str) -> Optional[CacheEntry]:
        return self._entries.get(identifier)

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._entries

    def __len__(self) -> int:
        return len(self._entries)

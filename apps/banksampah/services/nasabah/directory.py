"""
Member Directory
================

Full-snapshot cache of all members plus client-side search.

The member set of a single bank sampah branch is small and read far more
often than written, so the directory fetches everything once and serves
lookups from memory. Every write in this process that changes membership or
balances calls invalidate(); the next load_all() refetches.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from apps.banksampah.services.models import Member
from apps.banksampah.services.store.base import DocumentStore

log = logging.getLogger("banksampah.nasabah.directory")

MEMBERS = "nasabah"


class MemberCache:
    def __init__(self) -> None:
        self._members: Optional[List[Member]] = None

    def get(self) -> Optional[List[Member]]:
        return self._members

    def set(self, members: List[Member]) -> None:
        self._members = list(members)

    def invalidate(self) -> None:
        self._members = None


class MemberDirectory:
    def __init__(self, store: DocumentStore, cache: Optional[MemberCache] = None) -> None:
        self.store = store
        self.cache = cache or MemberCache()

    async def load_all(self) -> List[Member]:
        cached = self.cache.get()
        if cached is not None:
            return list(cached)

        # StoreUnavailable propagates; the cache stays cold
        rows = await self.store.fetch_all(MEMBERS, order_by="nama")
        members = [Member.from_record(r) for r in rows]
        self.cache.set(members)
        log.info("Loaded %d members into cache", len(members))
        return list(members)

    def invalidate(self) -> None:
        self.cache.invalidate()

    async def search(self, text: str) -> List[Member]:
        needle = (text or "").casefold()
        if not needle:
            return []

        members = await self.load_all()
        return [m for m in members if needle in m.name.casefold() or text in m.member_code]

    async def with_positive_balance(self) -> List[Member]:
        return [m for m in await self.load_all() if m.balance > 0]

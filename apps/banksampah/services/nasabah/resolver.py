from __future__ import annotations

from typing import Optional

from apps.banksampah.services.models import Member
from apps.banksampah.services.store.base import DocumentStore

MEMBERS = "nasabah"


class MemberResolver:
    """
    Exact lookups that always go to the store, never the directory cache.

    Used wherever a balance is about to matter: confirming a typed or scanned
    member code, and re-reading the member right before a posting.
    A miss returns None; only transport failures raise (StoreUnavailable).
    """

    def __init__(self, store: DocumentStore) -> None:
        self.store = store

    async def resolve_by_code(self, code: Optional[str]) -> Optional[Member]:
        code = (code or "").strip()
        if not code:
            return None

        rows = await self.store.query_equals(MEMBERS, "id_nasabah", code)
        if not rows:
            return None
        return Member.from_record(rows[0])

    async def resolve_by_id(self, key: Optional[str]) -> Optional[Member]:
        key = (key or "").strip()
        if not key:
            return None

        row = await self.store.fetch_one(MEMBERS, key)
        return Member.from_record(row) if row else None

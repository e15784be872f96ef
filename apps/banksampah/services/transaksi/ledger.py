from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional

from apps.banksampah.services.models import LedgerEntry
from apps.banksampah.services.store.base import DocumentStore, Filter

LEDGER = "transaksi"


def _aware(value: datetime) -> datetime:
    # stored timestamps are UTC; bounds without an offset are read as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class LedgerReader:
    def __init__(self, store: DocumentStore) -> None:
        self.store = store

    async def list_entries(
        self,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        member_code: Optional[str] = None,
    ) -> List[LedgerEntry]:
        """
        Raw ledger, oldest first.
        The date range applies only when both bounds are given.
        """
        filters: List[Filter] = []
        if start is not None and end is not None:
            filters.append(Filter("timestamp", ">=", _aware(start)))
            filters.append(Filter("timestamp", "<=", _aware(end)))
        if member_code:
            filters.append(Filter("id_nasabah", "==", member_code))

        rows = await self.store.query(LEDGER, filters, order_by="timestamp")
        return [LedgerEntry.from_record(r) for r in rows]

"""
Document Store Contract
=======================

Every persistence call of the application goes through this boundary.

Records are plain dicts carrying the store key under "id". Timestamp columns
(created_at, updated_at, timestamp) come back as timezone-aware datetimes;
adapters translate them at the boundary.

Write contract:
- atomic_batch() applies all operations or none. Readers never observe a
  partial batch.
- A "create" op returns its new key; keys are returned in op order.

Failure contract:
- Reads raise StoreUnavailable on transport/query failure.
- atomic_batch raises PersistenceError when the batch is not applied.
"""

from __future__ import annotations

import abc
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Literal, Optional, Sequence

FilterOp = Literal["==", ">=", "<="]
BatchKind = Literal["create", "update", "delete"]

TIMESTAMP_FIELDS = ("created_at", "updated_at", "timestamp")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Filter:
    field: str
    op: FilterOp
    value: Any


@dataclass(frozen=True)
class BatchOp:
    kind: BatchKind
    collection: str
    key: Optional[str] = None
    data: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def create(cls, collection: str, data: Dict[str, Any]) -> "BatchOp":
        return cls(kind="create", collection=collection, data=dict(data))

    @classmethod
    def update(cls, collection: str, key: str, data: Dict[str, Any]) -> "BatchOp":
        return cls(kind="update", collection=collection, key=key, data=dict(data))

    @classmethod
    def delete(cls, collection: str, key: str) -> "BatchOp":
        return cls(kind="delete", collection=collection, key=key)


class DocumentStore(abc.ABC):
    @abc.abstractmethod
    async def fetch_all(self, collection: str, order_by: str, descending: bool = False) -> List[Dict[str, Any]]:
        ...

    @abc.abstractmethod
    async def fetch_one(self, collection: str, key: str) -> Optional[Dict[str, Any]]:
        ...

    @abc.abstractmethod
    async def query(
        self,
        collection: str,
        filters: Sequence[Filter],
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> List[Dict[str, Any]]:
        ...

    @abc.abstractmethod
    async def atomic_batch(self, ops: Sequence[BatchOp]) -> List[str]:
        ...

    async def query_equals(self, collection: str, field_name: str, value: Any) -> List[Dict[str, Any]]:
        return await self.query(collection, [Filter(field_name, "==", value)])

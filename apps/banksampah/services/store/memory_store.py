from __future__ import annotations

import copy
import logging
import uuid
from typing import Any, Dict, List, Optional, Sequence

from apps.banksampah.services.errors import PersistenceError
from apps.banksampah.services.store.base import BatchOp, DocumentStore, Filter, utcnow

log = logging.getLogger("banksampah.store.memory")

_OPS = {
    "==": lambda a, b: a == b,
    ">=": lambda a, b: a is not None and a >= b,
    "<=": lambda a, b: a is not None and a <= b,
}


class InMemoryDocumentStore(DocumentStore):
    """
    Dict-backed store for local runs and tests.

    atomic_batch stages every op on a deep copy of the data and swaps it in
    only when all ops succeeded.
    """

    def __init__(self, seed: Optional[Dict[str, List[Dict[str, Any]]]] = None) -> None:
        self._data: Dict[str, Dict[str, Dict[str, Any]]] = {}
        for collection, rows in (seed or {}).items():
            bucket = self._data.setdefault(collection, {})
            for row in rows:
                row = dict(row)
                key = str(row.pop("id", None) or uuid.uuid4())
                now = utcnow()
                row.setdefault("created_at", now)
                row.setdefault("updated_at", now)
                bucket[key] = row

    # -----------------------------
    # Reads
    # -----------------------------
    async def fetch_all(self, collection: str, order_by: str, descending: bool = False) -> List[Dict[str, Any]]:
        rows = self._rows(collection)
        return self._sorted(rows, order_by, descending)

    async def fetch_one(self, collection: str, key: str) -> Optional[Dict[str, Any]]:
        row = self._data.get(collection, {}).get(key)
        if row is None:
            return None
        return self._out(key, row)

    async def query(
        self,
        collection: str,
        filters: Sequence[Filter],
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> List[Dict[str, Any]]:
        rows = [r for r in self._rows(collection) if all(_OPS[f.op](r.get(f.field), f.value) for f in filters)]
        if order_by:
            rows = self._sorted(rows, order_by, descending)
        return rows

    # -----------------------------
    # Writes
    # -----------------------------
    async def atomic_batch(self, ops: Sequence[BatchOp]) -> List[str]:
        staged = copy.deepcopy(self._data)
        created: List[str] = []
        try:
            for op in ops:
                key = self.apply_op(staged, op)
                if op.kind == "create":
                    created.append(key)
        except Exception as e:
            log.warning("Batch of %d ops rejected: %s", len(ops), e)
            raise PersistenceError() from e

        self._data = staged
        return created

    def apply_op(self, data: Dict[str, Dict[str, Dict[str, Any]]], op: BatchOp) -> str:
        bucket = data.setdefault(op.collection, {})
        now = utcnow()

        if op.kind == "create":
            key = op.key or uuid.uuid4().hex
            if key in bucket:
                raise KeyError(f"{op.collection}/{key} already exists")
            row = dict(op.data)
            row.setdefault("created_at", now)
            row.setdefault("updated_at", now)
            bucket[key] = row
            return key

        if op.key not in bucket:
            raise KeyError(f"{op.collection}/{op.key} does not exist")

        if op.kind == "update":
            bucket[op.key].update(op.data)
            if "updated_at" not in op.data:
                bucket[op.key]["updated_at"] = now
        elif op.kind == "delete":
            del bucket[op.key]
        else:
            raise ValueError(f"Unknown batch op kind: {op.kind}")
        return op.key

    # -----------------------------
    # Helpers
    # -----------------------------
    def _rows(self, collection: str) -> List[Dict[str, Any]]:
        return [self._out(k, v) for k, v in self._data.get(collection, {}).items()]

    @staticmethod
    def _out(key: str, row: Dict[str, Any]) -> Dict[str, Any]:
        out = copy.deepcopy(row)
        out["id"] = key
        return out

    @staticmethod
    def _sorted(rows: List[Dict[str, Any]], order_by: str, descending: bool) -> List[Dict[str, Any]]:
        # missing values sort first ascending
        return sorted(rows, key=lambda r: (r.get(order_by) is not None, r.get(order_by)), reverse=descending)

"""
Supabase Document Store (PostgREST Adapter)
===========================================

Purpose:
- Store-facing adapter for members, waste types and the transaction ledger.
- Uses the supabase-py client; the blocking query builders run in a worker
  thread so only the awaiting coroutine suspends.

Expected tables (created by supabase_schema.sql next to this module):
1) public.nasabah
   - id uuid primary key default gen_random_uuid()
   - id_nasabah text unique not null
   - nama text not null
   - alamat text
   - saldo bigint not null default 0 check (saldo >= 0)
   - created_at timestamptz default now()
   - updated_at timestamptz default now()

2) public.jenis_sampah
   - id uuid primary key default gen_random_uuid()
   - nama text not null
   - harga_kg numeric not null check (harga_kg >= 0)
   - foto_url text
   - is_active boolean not null default true
   - created_at / updated_at timestamptz default now()

3) public.transaksi
   - id uuid primary key default gen_random_uuid()
   - id_nasabah text not null
   - nama_nasabah text not null
   - timestamp timestamptz not null
   - tipe text not null check (tipe in ('setor', 'tarik'))
   - total_harga bigint not null
   - total_berat_kg numeric not null default 0
   - items jsonb not null default '[]'::jsonb
   - processed_by text
   - created_at timestamptz default now()

4) public.admins
   - id uuid primary key default gen_random_uuid()
   - email text unique not null
   - created_at timestamptz default now()

Atomic batches:
- public.apply_batch(ops jsonb) returns setof text
  Each op is {"kind": "create"|"update"|"delete", "collection": <table>,
  "key": <uuid|null>, "data": <jsonb>}. The function runs in the single
  transaction PostgREST opens for an RPC call, so either every op is applied
  or the call errors and none is. It returns the keys of created rows, in op
  order.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence

from apps.banksampah.services.errors import PersistenceError, StoreUnavailable
from apps.banksampah.services.store.base import TIMESTAMP_FIELDS, BatchOp, DocumentStore, Filter

log = logging.getLogger("banksampah.store.supabase")

_BUILDER_OPS = {"==": "eq", ">=": "gte", "<=": "lte"}


def _to_wire(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, dict):
        return {k: _to_wire(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_wire(v) for v in value]
    return value


def _is_uuid(value: Any) -> bool:
    try:
        uuid.UUID(str(value))
    except ValueError:
        return False
    return True


def _from_wire(row: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(row)
    for name in TIMESTAMP_FIELDS:
        raw = out.get(name)
        if isinstance(raw, str) and raw:
            out[name] = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    if out.get("id") is not None:
        out["id"] = str(out["id"])
    return out


class SupabaseDocumentStore(DocumentStore):
    RPC_APPLY_BATCH = "apply_batch"

    def __init__(self, supabase_client: Any) -> None:
        self.sb = supabase_client

    # -----------------------------
    # Reads
    # -----------------------------
    async def fetch_all(self, collection: str, order_by: str, descending: bool = False) -> List[Dict[str, Any]]:
        q = self.sb.table(collection).select("*").order(order_by, desc=descending)
        return await self._read(collection, q)

    async def fetch_one(self, collection: str, key: str) -> Optional[Dict[str, Any]]:
        # keys are uuid columns; anything else cannot exist and would fail the cast
        if not _is_uuid(key):
            return None
        q = self.sb.table(collection).select("*").eq("id", key).limit(1)
        rows = await self._read(collection, q)
        return rows[0] if rows else None

    async def query(
        self,
        collection: str,
        filters: Sequence[Filter],
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> List[Dict[str, Any]]:
        q = self.sb.table(collection).select("*")
        for f in filters:
            q = getattr(q, _BUILDER_OPS[f.op])(f.field, _to_wire(f.value))
        if order_by:
            q = q.order(order_by, desc=descending)
        return await self._read(collection, q)

    # -----------------------------
    # Writes
    # -----------------------------
    async def atomic_batch(self, ops: Sequence[BatchOp]) -> List[str]:
        payload = [
            {
                "kind": op.kind,
                "collection": op.collection,
                "key": op.key,
                "data": _to_wire(op.data),
            }
            for op in ops
        ]
        try:
            r = await asyncio.to_thread(self.sb.rpc(self.RPC_APPLY_BATCH, {"ops": payload}).execute)
        except Exception as e:
            log.exception("Atomic batch of %d ops failed", len(payload))
            raise PersistenceError() from e

        data = getattr(r, "data", None) or []
        keys: List[str] = []
        for item in data:
            # setof text comes back either as scalars or as {"apply_batch": key}
            if isinstance(item, dict):
                item = item.get(self.RPC_APPLY_BATCH)
            if item is not None:
                keys.append(str(item))
        return keys

    # -----------------------------
    # Helpers
    # -----------------------------
    async def _read(self, collection: str, builder: Any) -> List[Dict[str, Any]]:
        try:
            r = await asyncio.to_thread(builder.execute)
        except Exception as e:
            log.exception("Supabase read failed (%s)", collection)
            raise StoreUnavailable() from e
        rows = getattr(r, "data", None) or []
        return [_from_wire(x) for x in rows if isinstance(x, dict)]

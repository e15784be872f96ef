from datetime import datetime, timezone
from decimal import Decimal

import pytest

from apps.banksampah.services.errors import StoreUnavailable
from apps.banksampah.services.identity import StaticOperatorIdentity
from apps.banksampah.services.models import Member, WasteType
from apps.banksampah.services.store.memory_store import InMemoryDocumentStore
from apps.banksampah.wiring import build_services

OPERATOR = "kasir@banksampah.id"


def _ts(day: int) -> datetime:
    return datetime(2026, 10, day, 8, 0, tzinfo=timezone.utc)


SEED = {
    "admins": [
        {"id": "adm-1", "email": OPERATOR},
    ],
    "nasabah": [
        {"id": "m-budi", "id_nasabah": "NSB001", "nama": "Budi Santoso", "alamat": "RT 02", "saldo": 10000},
        {"id": "m-siti", "id_nasabah": "NSB002", "nama": "siti aminah", "alamat": "RT 03", "saldo": 0},
        {"id": "m-agus", "id_nasabah": "ab-77", "nama": "Agus", "alamat": "RT 01", "saldo": 2500},
    ],
    "jenis_sampah": [
        {"id": "w-plastik", "nama": "Plastik A", "harga_kg": 1500, "foto_url": "", "is_active": True, "created_at": _ts(1)},
        {"id": "w-kardus", "nama": "Kardus", "harga_kg": 2000, "foto_url": "", "is_active": True, "created_at": _ts(2)},
        {"id": "w-kaca", "nama": "Kaca", "harga_kg": 500, "foto_url": "", "is_active": False, "created_at": _ts(3)},
    ],
}


class RecordingStore(InMemoryDocumentStore):
    """In-memory store with a fetch counter and switchable failures."""

    def __init__(self, seed=None):
        super().__init__(seed)
        self.fetch_all_calls = 0
        self.query_calls = 0
        self.fail_reads = False
        self.fail_updates_on = None

    async def fetch_all(self, collection, order_by, descending=False):
        self.fetch_all_calls += 1
        if self.fail_reads:
            raise StoreUnavailable()
        return await super().fetch_all(collection, order_by, descending)

    async def query(self, collection, filters, order_by=None, descending=False):
        self.query_calls += 1
        if self.fail_reads:
            raise StoreUnavailable()
        return await super().query(collection, filters, order_by, descending)

    def apply_op(self, data, op):
        if op.kind == "update" and op.collection == self.fail_updates_on:
            raise RuntimeError("simulated write failure")
        return super().apply_op(data, op)

    def rows(self, collection):
        return self._rows(collection)


@pytest.fixture
def store():
    return RecordingStore(SEED)


@pytest.fixture
def services(store):
    return build_services(store, StaticOperatorIdentity(OPERATOR))


@pytest.fixture
def budi():
    return Member(id="m-budi", member_code="NSB001", name="Budi Santoso", address="RT 02", balance=10000)


@pytest.fixture
def plastik():
    return WasteType(id="w-plastik", name="Plastik A", price_per_kg=Decimal("1500"))


@pytest.fixture
def kardus():
    return WasteType(id="w-kardus", name="Kardus", price_per_kg=Decimal("2000"))

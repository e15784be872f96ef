from decimal import Decimal

import pytest

from apps.banksampah.services.errors import ValidationError


async def test_list_active_newest_first(services):
    names = [w.name for w in await services.catalog.list_active()]
    assert names == ["Kardus", "Plastik A"]


async def test_add_and_get(services):
    key = await services.catalog.add(" Besi ", "3500.5", "https://img/besi.png")

    waste = await services.catalog.get(key)
    assert waste.name == "Besi"
    assert waste.price_per_kg == Decimal("3500.5")
    assert waste.is_active
    assert [w.name for w in await services.catalog.list_active()][0] == "Besi"


@pytest.mark.parametrize("name,price", [("", 1000), ("Besi", -1), ("Besi", "mahal"), ("Besi", float("inf"))])
async def test_add_validation(services, name, price):
    with pytest.raises(ValidationError):
        await services.catalog.add(name, price)


async def test_update_keeps_unlisted_fields(services, store):
    await services.catalog.update("w-kardus", {"harga_kg": "2200", "is_active": False})

    row = await store.fetch_one("jenis_sampah", "w-kardus")
    assert row["harga_kg"] == 2200
    assert row["is_active"] is True


async def test_deactivate_hides_from_active_list(services):
    await services.catalog.deactivate("w-plastik")

    assert [w.name for w in await services.catalog.list_active()] == ["Kardus"]
    assert (await services.catalog.get("w-plastik")).is_active is False


async def test_get_unknown(services):
    assert await services.catalog.get("missing") is None


async def test_add_rejects_oversized_price(services):
    with pytest.raises(ValidationError):
        await services.catalog.add("Emas", "1e20")

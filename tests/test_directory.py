import pytest

from apps.banksampah.services.errors import StoreUnavailable
from apps.banksampah.services.nasabah.directory import MemberCache, MemberDirectory


async def test_load_all_is_ordered_by_name_and_cached(store):
    directory = MemberDirectory(store)

    first = await directory.load_all()
    second = await directory.load_all()

    assert [m.name for m in first] == ["Agus", "Budi Santoso", "siti aminah"]
    assert second == first
    assert store.fetch_all_calls == 1


async def test_invalidate_forces_refetch(store):
    directory = MemberDirectory(store)
    await directory.load_all()

    directory.invalidate()
    await directory.load_all()

    assert store.fetch_all_calls == 2


async def test_failed_fetch_leaves_cache_cold(store):
    cache = MemberCache()
    directory = MemberDirectory(store, cache)
    store.fail_reads = True

    with pytest.raises(StoreUnavailable):
        await directory.load_all()
    assert cache.get() is None

    store.fail_reads = False
    members = await directory.load_all()
    assert len(members) == 3
    assert store.fetch_all_calls == 2


async def test_empty_search_returns_nothing_without_fetching(store):
    directory = MemberDirectory(store)

    assert await directory.search("") == []
    assert store.fetch_all_calls == 0


async def test_search_name_is_case_insensitive(store):
    directory = MemberDirectory(store)

    assert [m.member_code for m in await directory.search("SITI")] == ["NSB002"]
    assert [m.member_code for m in await directory.search("santoso")] == ["NSB001"]


async def test_search_code_is_case_sensitive_substring(store):
    directory = MemberDirectory(store)

    assert [m.member_code for m in await directory.search("NSB")] == ["NSB001", "NSB002"]
    assert await directory.search("nsb") == []
    assert [m.member_code for m in await directory.search("ab")] == ["ab-77"]
    assert await directory.search("AB") == []


async def test_search_uses_one_fetch_for_many_queries(store):
    directory = MemberDirectory(store)

    for text in ("b", "bu", "bud", "budi"):
        await directory.search(text)

    assert store.fetch_all_calls == 1


async def test_with_positive_balance(store):
    directory = MemberDirectory(store)

    codes = [m.member_code for m in await directory.with_positive_balance()]
    assert codes == ["ab-77", "NSB001"]


async def test_caches_are_isolated_per_directory(store):
    a = MemberDirectory(store)
    b = MemberDirectory(store)

    await a.load_all()
    await b.load_all()

    assert store.fetch_all_calls == 2

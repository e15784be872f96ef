import pytest

from apps.banksampah.services.errors import StoreUnavailable
from apps.banksampah.services.nasabah.resolver import MemberResolver


async def test_resolve_by_code_exact_match(store):
    member = await MemberResolver(store).resolve_by_code("NSB001")

    assert member.id == "m-budi"
    assert member.name == "Budi Santoso"
    assert member.balance == 10000


async def test_resolve_by_code_trims_input(store):
    member = await MemberResolver(store).resolve_by_code("  NSB002 \n")
    assert member.member_code == "NSB002"


async def test_resolve_by_code_is_not_a_substring_search(store):
    assert await MemberResolver(store).resolve_by_code("NSB") is None


@pytest.mark.parametrize("code", ["", "   ", None])
async def test_blank_code_skips_the_store(store, code):
    assert await MemberResolver(store).resolve_by_code(code) is None
    assert store.query_calls == 0


async def test_resolver_bypasses_the_cache(store, services):
    await services.directory.load_all()
    await services.resolver.resolve_by_code("NSB001")
    await services.resolver.resolve_by_code("NSB001")

    assert store.query_calls == 2
    assert store.fetch_all_calls == 1


async def test_transport_failure_raises(store):
    store.fail_reads = True
    with pytest.raises(StoreUnavailable):
        await MemberResolver(store).resolve_by_code("NSB001")


async def test_resolve_by_id(store):
    resolver = MemberResolver(store)

    assert (await resolver.resolve_by_id("m-siti")).member_code == "NSB002"
    assert await resolver.resolve_by_id("missing") is None

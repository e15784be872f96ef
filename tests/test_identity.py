from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from apps.banksampah.services.errors import AccessDenied, NotAuthenticated
from apps.banksampah.services.identity import (
    OperatorRegistry,
    StaticOperatorIdentity,
    SupabaseOperatorIdentity,
    bearer_token,
)


@pytest.mark.parametrize(
    "header,expected",
    [
        ("Bearer abc", "abc"),
        ("bearer  abc ", "abc"),
        ("Basic abc", None),
        ("Bearer ", None),
        (None, None),
    ],
)
def test_bearer_token(header, expected):
    assert bearer_token(header) == expected


async def test_static_identity():
    assert await StaticOperatorIdentity("kasir@x.id").current_operator("ignored") == "kasir@x.id"
    assert await StaticOperatorIdentity().current_operator() is None


async def test_supabase_identity_returns_lowercased_email():
    sb = MagicMock()
    sb.auth.get_user.return_value = SimpleNamespace(user=SimpleNamespace(email="Kasir@BankSampah.id"))

    assert await SupabaseOperatorIdentity(sb).current_operator("tok") == "kasir@banksampah.id"
    sb.auth.get_user.assert_called_once_with("tok")


async def test_supabase_identity_never_blocks():
    sb = MagicMock()
    sb.auth.get_user.side_effect = RuntimeError("invalid JWT")
    identity = SupabaseOperatorIdentity(sb)

    assert await identity.current_operator("bad") is None
    assert await identity.current_operator(None) is None
    assert sb.auth.get_user.call_count == 1


async def test_registry_matches_lowercased_email(store):
    registry = OperatorRegistry(store)

    assert await registry.is_registered("Kasir@BankSampah.id")
    assert not await registry.is_registered("tamu@mail.id")
    assert not await registry.is_registered(None)


async def test_registry_require(store):
    registry = OperatorRegistry(store)

    assert await registry.require("kasir@banksampah.id") == "kasir@banksampah.id"
    with pytest.raises(NotAuthenticated):
        await registry.require(None)
    with pytest.raises(AccessDenied):
        await registry.require("tamu@mail.id")

from __future__ import annotations

import abc
import asyncio
import logging
from typing import Any, Optional

from apps.banksampah.services.errors import AccessDenied, NotAuthenticated
from apps.banksampah.services.store.base import DocumentStore

log = logging.getLogger("banksampah.identity")


class OperatorIdentity(abc.ABC):
    """
    Who is operating the cashier. Used only to stamp ledger entries;
    an unknown operator never blocks a transaction.
    """

    @abc.abstractmethod
    async def current_operator(self, token: Optional[str] = None) -> Optional[str]:
        ...


class StaticOperatorIdentity(OperatorIdentity):
    def __init__(self, operator_id: Optional[str] = None) -> None:
        self.operator_id = operator_id

    async def current_operator(self, token: Optional[str] = None) -> Optional[str]:
        return self.operator_id


class SupabaseOperatorIdentity(OperatorIdentity):
    """Resolves a Supabase Auth access token to the operator's email."""

    def __init__(self, supabase_client: Any) -> None:
        self.sb = supabase_client

    async def current_operator(self, token: Optional[str] = None) -> Optional[str]:
        if not token:
            return None
        try:
            res = await asyncio.to_thread(self.sb.auth.get_user, token)
        except Exception as e:
            log.warning("Unable to resolve operator from token: %s", e)
            return None

        user = getattr(res, "user", None)
        if not user or not getattr(user, "email", None):
            return None
        return str(user.email).lower()


def bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization or not authorization.lower().startswith("bearer "):
        return None
    return authorization.split(" ", 1)[1].strip() or None


class OperatorRegistry:
    """
    Registered operators live in the admins table, keyed by lowercased email.
    Signing in with the identity provider alone does not make a user an operator.
    """

    ADMINS = "admins"

    def __init__(self, store: DocumentStore) -> None:
        self.store = store

    async def is_registered(self, email: Optional[str]) -> bool:
        email = (email or "").strip().lower()
        if not email:
            return False
        rows = await self.store.query_equals(self.ADMINS, "email", email)
        return bool(rows)

    async def require(self, email: Optional[str]) -> str:
        if not email:
            raise NotAuthenticated()
        if not await self.is_registered(email):
            log.warning("Rejected unregistered operator %s", email)
            raise AccessDenied()
        return email

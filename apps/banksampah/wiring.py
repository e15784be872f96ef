from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from apps.banksampah.db import get_supabase
from apps.banksampah.services.catalog import WasteCatalog
from apps.banksampah.services.identity import (
    OperatorIdentity,
    OperatorRegistry,
    StaticOperatorIdentity,
    SupabaseOperatorIdentity,
)
from apps.banksampah.services.nasabah.admin import MemberAdmin
from apps.banksampah.services.nasabah.directory import MemberCache, MemberDirectory
from apps.banksampah.services.nasabah.resolver import MemberResolver
from apps.banksampah.services.store.base import DocumentStore
from apps.banksampah.services.store.memory_store import InMemoryDocumentStore
from apps.banksampah.services.store.supabase_store import SupabaseDocumentStore
from apps.banksampah.services.transaksi.ledger import LedgerReader
from apps.banksampah.services.transaksi.poster import TransactionPoster
from apps.banksampah.utils.settings import settings

log = logging.getLogger("banksampah.wiring")


@dataclass
class Services:
    store: DocumentStore
    identity: OperatorIdentity
    operators: OperatorRegistry
    directory: MemberDirectory
    resolver: MemberResolver
    poster: TransactionPoster
    admin: MemberAdmin
    catalog: WasteCatalog
    ledger: LedgerReader


def build_services(store: DocumentStore, identity: Optional[OperatorIdentity] = None) -> Services:
    directory = MemberDirectory(store, MemberCache())
    resolver = MemberResolver(store)
    return Services(
        store=store,
        identity=identity or StaticOperatorIdentity(),
        operators=OperatorRegistry(store),
        directory=directory,
        resolver=resolver,
        poster=TransactionPoster(store, directory, resolver),
        admin=MemberAdmin(store, directory, resolver),
        catalog=WasteCatalog(store),
        ledger=LedgerReader(store),
    )


@lru_cache(maxsize=1)
def get_services() -> Services:
    if settings.STORE_BACKEND == "supabase":
        sb = get_supabase()
        if not sb:
            raise RuntimeError("Supabase not configured: set SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY (or SUPABASE_ANON_KEY).")
        log.info("Using Supabase document store")
        return build_services(SupabaseDocumentStore(sb), SupabaseOperatorIdentity(sb))

    log.warning("Using in-memory document store; data is lost on restart")
    operator = settings.LOCAL_OPERATOR
    seed = {"admins": [{"email": operator}]} if operator else None
    return build_services(InMemoryDocumentStore(seed), StaticOperatorIdentity(operator))

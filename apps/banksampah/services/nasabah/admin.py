from __future__ import annotations

import logging
from typing import Any, Dict

from apps.banksampah.services.errors import DuplicateMemberCode, MemberNotFound, ValidationError
from apps.banksampah.services.nasabah.directory import MemberDirectory
from apps.banksampah.services.nasabah.resolver import MemberResolver
from apps.banksampah.services.store.base import BatchOp, DocumentStore, utcnow

log = logging.getLogger("banksampah.nasabah.admin")

MEMBERS = "nasabah"
LEDGER = "transaksi"
EDITABLE = ("nama", "alamat")


class MemberAdmin:
    """
    Member create/update/remove. Every write invalidates the directory.
    Balances are not editable here; they move only through postings.
    """

    def __init__(self, store: DocumentStore, directory: MemberDirectory, resolver: MemberResolver) -> None:
        self.store = store
        self.directory = directory
        self.resolver = resolver

    async def create_member(self, member_code: str, name: str, address: str = "", balance: int = 0) -> str:
        member_code = (member_code or "").strip()
        name = (name or "").strip()
        if not member_code or not name:
            raise ValidationError("ID Nasabah dan nama harus diisi")
        if int(balance) < 0:
            raise ValidationError("Saldo awal tidak boleh negatif")

        if await self.resolver.resolve_by_code(member_code) is not None:
            raise DuplicateMemberCode(member_code)

        now = utcnow()
        keys = await self.store.atomic_batch([
            BatchOp.create(MEMBERS, {
                "id_nasabah": member_code,
                "nama": name,
                "alamat": (address or "").strip(),
                "saldo": int(balance),
                "created_at": now,
                "updated_at": now,
            })
        ])
        self.directory.invalidate()
        log.info("Created member %s", member_code)
        return keys[0]

    async def update_member(self, key: str, changes: Dict[str, Any]) -> None:
        patch = {k: v for k, v in (changes or {}).items() if k in EDITABLE}
        if "nama" in patch and not str(patch["nama"] or "").strip():
            raise ValidationError("Nama nasabah harus diisi")
        if not patch:
            return

        patch["updated_at"] = utcnow()
        await self.store.atomic_batch([BatchOp.update(MEMBERS, key, patch)])
        self.directory.invalidate()

    async def remove_member(self, key: str) -> int:
        """
        Delete the member and every ledger entry under its code in one batch.
        Returns the number of ledger entries purged.
        """
        member = await self.resolver.resolve_by_id(key)
        if member is None:
            raise MemberNotFound()

        entries = await self.store.query_equals(LEDGER, "id_nasabah", member.member_code)
        ops = [BatchOp.delete(LEDGER, row["id"]) for row in entries]
        ops.append(BatchOp.delete(MEMBERS, member.id))

        await self.store.atomic_batch(ops)
        self.directory.invalidate()
        log.info("Removed member %s with %d ledger entries", member.member_code, len(entries))
        return len(entries)

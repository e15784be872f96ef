"""
Transaction Poster
==================

Writes deposits (setor) and withdrawals (tarik).

Rules:
1. The ledger entry insert and the member balance update go out as ONE
   atomic batch. Either both are visible or neither is.
2. The member's balance is re-read from the store right before the new
   balance is computed, never taken from the caller's (possibly stale) copy.
3. Withdrawals re-run the balance guard against that fresh balance.
4. A successful post invalidates the member directory cache.
5. A failed post raises and leaves the caller's lines untouched.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Callable, Optional, Sequence

from apps.banksampah.services.errors import EmptyTransaction, MemberNotFound, NoMemberSelected, ValidationError
from apps.banksampah.services.models import MAX_RUPIAH, SYSTEM_OPERATOR, LedgerEntry, Member, TransactionLine
from apps.banksampah.services.nasabah.directory import MemberDirectory
from apps.banksampah.services.nasabah.resolver import MemberResolver
from apps.banksampah.services.store.base import BatchOp, DocumentStore, utcnow
from apps.banksampah.services.transaksi.balance_guard import check_withdrawal, parse_amount

log = logging.getLogger("banksampah.transaksi.poster")

MEMBERS = "nasabah"
LEDGER = "transaksi"


def _operator(operator_id: Optional[str]) -> str:
    return (operator_id or "").strip() or SYSTEM_OPERATOR


def _whole_rupiah(value: Decimal) -> int:
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class TransactionPoster:
    def __init__(
        self,
        store: DocumentStore,
        directory: MemberDirectory,
        resolver: Optional[MemberResolver] = None,
        *,
        clock: Callable[[], Any] = utcnow,
    ) -> None:
        self.store = store
        self.directory = directory
        self.resolver = resolver or MemberResolver(store)
        self.clock = clock

    # -----------------------------
    # Deposit
    # -----------------------------
    async def post_deposit(
        self,
        member: Optional[Member],
        lines: Sequence[TransactionLine],
        operator_id: Optional[str] = None,
    ) -> LedgerEntry:
        if member is None:
            raise NoMemberSelected()
        if not lines:
            raise EmptyTransaction()

        total_weight = sum((x.weight_kg for x in lines), Decimal("0"))
        subtotal = sum((x.subtotal for x in lines), Decimal("0"))
        if subtotal > MAX_RUPIAH:
            raise ValidationError("Nilai transaksi terlalu besar")
        total_amount = _whole_rupiah(subtotal)

        fresh = await self._fresh(member)
        now = self.clock()
        entry = LedgerEntry(
            member_code=fresh.member_code,
            member_name=fresh.name,
            timestamp=now,
            kind="setor",
            total_amount=total_amount,
            total_weight_kg=total_weight,
            items=tuple(x.to_item() for x in lines),
            processed_by=_operator(operator_id),
            created_at=now,
        )
        return await self._commit(entry, fresh, fresh.balance + total_amount)

    # -----------------------------
    # Withdrawal
    # -----------------------------
    async def post_withdrawal(
        self,
        member: Optional[Member],
        amount: Any,
        operator_id: Optional[str] = None,
    ) -> LedgerEntry:
        check_withdrawal(member, amount)
        value = parse_amount(amount)

        fresh = await self._fresh(member)
        check_withdrawal(fresh, value)

        now = self.clock()
        entry = LedgerEntry(
            member_code=fresh.member_code,
            member_name=fresh.name,
            timestamp=now,
            kind="tarik",
            total_amount=-value,
            total_weight_kg=Decimal("0"),
            items=(),
            processed_by=_operator(operator_id),
            created_at=now,
        )
        return await self._commit(entry, fresh, fresh.balance - value)

    # -----------------------------
    # Internals
    # -----------------------------
    async def _fresh(self, member: Member) -> Member:
        fresh = await self.resolver.resolve_by_code(member.member_code)
        if fresh is None:
            raise MemberNotFound()
        return fresh

    async def _commit(self, entry: LedgerEntry, member: Member, new_balance: int) -> LedgerEntry:
        ops = [
            BatchOp.create(LEDGER, entry.to_record()),
            BatchOp.update(MEMBERS, member.id, {"saldo": int(new_balance), "updated_at": entry.timestamp}),
        ]
        # PersistenceError propagates; nothing to undo
        keys = await self.store.atomic_batch(ops)
        self.directory.invalidate()

        log.info(
            "Posted %s %s for %s: %d -> %d (by %s)",
            entry.kind,
            entry.total_amount,
            member.member_code,
            member.balance,
            new_balance,
            entry.processed_by,
        )
        return replace(entry, id=keys[0] if keys else None)

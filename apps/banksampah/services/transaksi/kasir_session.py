from __future__ import annotations

import logging
from typing import Any, Callable, Optional, Tuple

from apps.banksampah.services.errors import NoMemberSelected
from apps.banksampah.services.models import LedgerEntry, Member, TransactionLine, WasteType
from apps.banksampah.services.nasabah.resolver import MemberResolver
from apps.banksampah.services.qr_scan import Decoder, FrameSource, QrScanSession
from apps.banksampah.services.transaksi.accumulator import LineAccumulator
from apps.banksampah.services.transaksi.poster import TransactionPoster

log = logging.getLogger("banksampah.transaksi.kasir")


class KasirSession:
    """
    One cashier screen: selected member + open deposit lines.

    Typed and scanned member codes go through check_member() alike.
    commit() resets the session on success and keeps the lines on failure so
    the operator can retry without re-entering weights.
    """

    def __init__(self, resolver: MemberResolver, poster: TransactionPoster) -> None:
        self.resolver = resolver
        self.poster = poster
        self.accumulator = LineAccumulator()
        self.member: Optional[Member] = None

    @property
    def lines(self) -> Tuple[TransactionLine, ...]:
        return self.accumulator.lines

    async def check_member(self, code: Optional[str]) -> Optional[Member]:
        member = await self.resolver.resolve_by_code(code)
        if member is None:
            log.info("Member code %r not registered", code)
        self.select_member(member)
        return member

    def scanner(
        self,
        read_frame: FrameSource,
        decode: Decoder,
        release: Optional[Callable[[], Any]] = None,
        interval_seconds: Optional[float] = None,
    ) -> QrScanSession:
        """QR scan session whose token goes through check_member() like typed input."""
        return QrScanSession(
            read_frame,
            decode,
            self.check_member,
            release=release,
            interval_seconds=interval_seconds,
        )

    def select_member(self, member: Optional[Member]) -> None:
        self.accumulator.select_member(member)
        self.member = member

    def add_line(self, waste_type: WasteType, weight: Any) -> TransactionLine:
        if self.member is None:
            raise NoMemberSelected()
        return self.accumulator.add_line(waste_type, weight)

    def remove_line(self, waste_type_id: str) -> None:
        self.accumulator.remove_line(waste_type_id)

    async def commit(self, operator_id: Optional[str] = None) -> LedgerEntry:
        entry = await self.poster.post_deposit(self.member, self.accumulator.lines, operator_id)
        self.select_member(None)
        return entry

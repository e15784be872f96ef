from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

_MONTHS = ("Jan", "Feb", "Mar", "Apr", "Mei", "Jun", "Jul", "Agu", "Sep", "Okt", "Nov", "Des")

# Western Indonesia Time, UTC+7 all year
WIB = timezone(timedelta(hours=7), "WIB")


def format_rupiah(amount: Any) -> str:
    """format_rupiah(14500) -> 'Rp 14.500' (no decimals, dot thousands)."""
    value = int(round(float(amount)))
    sign = "-" if value < 0 else ""
    grouped = f"{abs(value):,}".replace(",", ".")
    return f"{sign}Rp {grouped}"


def format_date(dt: datetime) -> str:
    """Operator-facing date in WIB; timestamps without an offset are UTC."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    dt = dt.astimezone(WIB)
    return f"{dt.day:02d} {_MONTHS[dt.month - 1]} {dt.year} {dt.hour:02d}:{dt.minute:02d}"

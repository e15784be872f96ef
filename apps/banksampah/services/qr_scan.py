"""
QR Scan Session
===============

Polls camera frames, decodes them, and delivers the first member code found.

- One token per session, delivered exactly once through on_scan.
- The loop stops and the camera is released as soon as a code is found or
  the session is cancelled.
- Per-frame decode misses and decoder errors are expected noise: they are
  logged at debug level and the loop continues.

The token is not trusted: callers feed it through the same member check as
typed input (KasirSession.check_member).
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, Optional

from apps.banksampah.utils.settings import settings

log = logging.getLogger("banksampah.qr_scan")

FrameSource = Callable[[], Awaitable[Optional[Any]]]
Decoder = Callable[[Any], Optional[str]]
ScanCallback = Callable[[str], Any]


class QrScanSession:
    def __init__(
        self,
        read_frame: FrameSource,
        decode: Decoder,
        on_scan: ScanCallback,
        *,
        release: Optional[Callable[[], Any]] = None,
        interval_seconds: Optional[float] = None,
    ) -> None:
        self.read_frame = read_frame
        self.decode = decode
        self.on_scan = on_scan
        self.release = release
        self.interval_seconds = (
            interval_seconds if interval_seconds is not None else settings.QR_SCAN_INTERVAL_MS / 1000.0
        )

        self._task: Optional[asyncio.Task] = None
        self._released = False
        self._delivered = False

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> asyncio.Task:
        if self._task is None:
            self._task = asyncio.create_task(self.run())
        return self._task

    def cancel(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        else:
            self._release_camera()

    async def run(self) -> Optional[str]:
        try:
            while True:
                token = await self._poll_once()
                if token:
                    self._release_camera()
                    await self._deliver(token)
                    return token
                await asyncio.sleep(self.interval_seconds)
        finally:
            self._release_camera()

    async def _poll_once(self) -> Optional[str]:
        frame = await self.read_frame()
        if frame is None:
            return None
        try:
            token = self.decode(frame)
        except Exception as e:
            log.debug("QR decode miss: %s", e)
            return None
        token = (token or "").strip()
        return token or None

    async def _deliver(self, token: str) -> None:
        if self._delivered:
            return
        self._delivered = True
        log.info("QR code scanned")
        result = self.on_scan(token)
        if inspect.isawaitable(result):
            await result

    def _release_camera(self) -> None:
        if self._released:
            return
        self._released = True
        if self.release is not None:
            self.release()

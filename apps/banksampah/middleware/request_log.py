import logging
import time
from typing import Any, Dict

from fastapi import FastAPI, Request

log = logging.getLogger("banksampah.requests")

SENSITIVE_HEADERS = {
    "authorization",
    "cookie",
    "apikey",
    "x-api-key",
    "x-supabase-key",
}


def _mask_headers(headers: Dict[str, str]) -> Dict[str, str]:
    return {k: ("***masked***" if k.lower() in SENSITIVE_HEADERS else v) for k, v in headers.items()}


def install_request_logging(app: FastAPI) -> None:
    @app.middleware("http")
    async def _log_request(request: Request, call_next):
        start = time.time()
        response = await call_next(request)

        entry: Dict[str, Any] = {
            "method": request.method,
            "path": request.url.path,
            "status_code": response.status_code,
            "duration_ms": int((time.time() - start) * 1000),
            "client": request.client.host if request.client else None,
        }
        if log.isEnabledFor(logging.DEBUG):
            entry["headers"] = _mask_headers(dict(request.headers))

        log.info(entry)
        return response

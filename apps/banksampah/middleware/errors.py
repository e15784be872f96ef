import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError

from apps.banksampah.services.errors import RETRY_MESSAGE, BankSampahError, StoreUnavailable, PersistenceError
from apps.banksampah.utils.envelope import error

log = logging.getLogger("banksampah.errors")


def install_error_handlers(app: FastAPI) -> None:
    """
    Stable envelopes, no stack leaks.
    Validation errors keep their operator message; everything else gets the
    generic retry message and the cause goes to the log.
    """

    @app.exception_handler(BankSampahError)
    async def _domain_error(request: Request, exc: BankSampahError):
        if isinstance(exc, (StoreUnavailable, PersistenceError)):
            log.error("%s %s failed: %r (cause: %r)", request.method, request.url.path, exc, exc.__cause__)
        else:
            log.warning("%s %s rejected: %s", request.method, request.url.path, exc.message)
        return error(exc.message, exc.code, exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def _request_error(request: Request, exc: RequestValidationError):
        return error("Data yang dikirim tidak valid", "request_invalid", 422)

    @app.exception_handler(Exception)
    async def _unhandled(request: Request, exc: Exception):
        log.exception("Unhandled error on %s %s", request.method, request.url.path)
        return error(RETRY_MESSAGE, "internal_error", 500)

# apps/banksampah/main.py
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from apps.banksampah.middleware.errors import install_error_handlers
from apps.banksampah.middleware.request_log import install_request_logging

from apps.banksampah.routes.health import router as health_router
from apps.banksampah.routes.nasabah import router as nasabah_router
from apps.banksampah.routes.jenis_sampah import router as jenis_sampah_router
from apps.banksampah.routes.transaksi import router as transaksi_router

from apps.banksampah.utils.settings import settings

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL, logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
log = logging.getLogger("banksampah.main")

app = FastAPI(
    title="Bank Sampah",
    version=settings.BANKSAMPAH_VERSION,
    description="Cashier and ledger API for a community waste bank",
)

# -------------------------------------------------------------------
# Error handling (stable envelopes, no stack leaks) + request log
# -------------------------------------------------------------------
install_error_handlers(app)
install_request_logging(app)

# -------------------------------------------------------------------
# CORS (operator web client)
# -------------------------------------------------------------------
if settings.CORS_ALLOW_ORIGINS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ALLOW_ORIGINS,
        allow_credentials=False,
        allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

# -------------------------------------------------------------------
# Routers
# -------------------------------------------------------------------
app.include_router(health_router)
app.include_router(nasabah_router)
app.include_router(jenis_sampah_router)
app.include_router(transaksi_router)


@app.get("/")
async def root():
    return {
        "status": "Bank Sampah Online",
        "store": settings.STORE_BACKEND,
        "routes": [
            "/health",
            "/nasabah",
            "/jenis-sampah",
            "/transaksi",
        ],
    }


@app.on_event("startup")
async def startup_event():
    log.info("Bank Sampah starting (store=%s)", settings.STORE_BACKEND)

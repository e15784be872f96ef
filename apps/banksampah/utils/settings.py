import os
from typing import List

from dotenv import load_dotenv

# local runs keep credentials in .env; real environment variables win
load_dotenv()


def _env_list(name: str) -> List[str]:
    raw = os.getenv(name, "") or ""
    return [x.strip() for x in raw.split(",") if x.strip()]


def _int_env(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except Exception:
        return default


class Settings:
    """
    Runtime configuration, read from the environment once at import.
    """

    def __init__(self) -> None:
        self.BANKSAMPAH_VERSION = os.getenv("BANKSAMPAH_VERSION", "1.0.0")
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

        self.SUPABASE_URL = (os.getenv("SUPABASE_URL") or "").strip()
        self.SUPABASE_KEY = (
            os.getenv("SUPABASE_SERVICE_ROLE_KEY") or os.getenv("SUPABASE_ANON_KEY") or ""
        ).strip()

        # "supabase" or "memory"; memory is the fallback when credentials are missing
        default_store = "supabase" if (self.SUPABASE_URL and self.SUPABASE_KEY) else "memory"
        self.STORE_BACKEND = os.getenv("BANKSAMPAH_STORE", default_store).lower()

        self.CORS_ALLOW_ORIGINS = _env_list("CORS_ALLOW_ORIGINS")
        self.QR_SCAN_INTERVAL_MS = _int_env("QR_SCAN_INTERVAL_MS", 100)

        # memory backend only: every request runs as this registered operator
        self.LOCAL_OPERATOR = (os.getenv("BANKSAMPAH_LOCAL_OPERATOR") or "").strip().lower() or None


settings = Settings()

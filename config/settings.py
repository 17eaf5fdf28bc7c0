"""Load settings from environment (.env at the repo root is read first)."""
import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(Path(__file__).resolve().parents[1] / ".env")


def _str(key: str, default: str = "") -> str:
    return os.environ.get(key, default).strip()


def _int(key: str, default: int = 0) -> int:
    try:
        return int(os.environ.get(key, str(default)))
    except ValueError:
        return default


def _float(key: str, default: float = 0.0) -> float:
    try:
        return float(os.environ.get(key, str(default)))
    except ValueError:
        return default


def _bool(key: str, default: bool = False) -> bool:
    return _str(key, "true" if default else "false").lower() in ("true", "1", "yes")


def _list(key: str, default: str = "") -> list[str]:
    return [item.strip() for item in _str(key, default).split(",") if item.strip()]


class Settings:
    # MongoDB
    MONGODB_URI: str = _str("MONGODB_URI", "mongodb://localhost:27017")
    MONGODB_DB: str = _str("MONGODB_DB", "cf_stats")

    # HTTP
    PORT: int = _int("PORT", 5000)
    # Frontend origins allowed to call the API (comma separated)
    ALLOWED_ORIGINS: list[str] = _list("ALLOWED_ORIGINS", "http://localhost:5173")

    # Logging
    LOG_LEVEL: str = _str("LOG_LEVEL", "INFO")

    # Codeforces API
    CF_API_BASE: str = _str("CF_API_BASE", "https://codeforces.com/api")
    CF_MIN_INTERVAL: float = _float("CF_MIN_INTERVAL", 2.0)
    CF_MAX_RETRIES: int = _int("CF_MAX_RETRIES", 3)
    CF_RETRY_DELAY: float = _float("CF_RETRY_DELAY", 2.0)
    CF_TIMEOUT: int = _int("CF_TIMEOUT", 15)

    # Contest snapshot refresh
    CONTESTS_PER_DIVISION: int = _int("CONTESTS_PER_DIVISION", 50)
    REFRESH_HOUR: int = _int("REFRESH_HOUR", 3)
    REFRESH_MINUTE: int = _int("REFRESH_MINUTE", 0)
    REFRESH_WORKERS: int = _int("REFRESH_WORKERS", 4)
    REFRESH_ON_STARTUP: bool = _bool("REFRESH_ON_STARTUP", False)

    # Set to true when a separate run_scheduler.py process owns the refresh job
    DISABLE_SCHEDULER: bool = _bool("DISABLE_SCHEDULER", False)


settings = Settings()

# MongoDB Atlas often fails with TLSV1_ALERT_INTERNAL_ERROR unless SSL uses a
# known CA bundle. Set these before any connection so the ssl module uses certifi.
if "mongodb+srv" in settings.MONGODB_URI:
    import certifi

    _ca = certifi.where()
    os.environ.setdefault("SSL_CERT_FILE", _ca)
    os.environ.setdefault("REQUESTS_CA_BUNDLE", _ca)

import os

from dotenv import load_dotenv

load_dotenv()


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


def _api_key(name: str) -> str:
    value = os.getenv(name, "").strip()
    # Values copied from .env.example are not real credentials.
    if not value or "your-api-key" in value or value.startswith("<"):
        return ""
    return value


GEMINI_API_KEY = _api_key("GEMINI_API_KEY")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.0-flash")
ADVISORY_ENABLED = _flag("ADVISORY_ENABLED", "true")
ADVISORY_TIMEOUT_SECONDS = float(os.getenv("ADVISORY_TIMEOUT_SECONDS", "8"))
IMAGE_FALLBACK_ENABLED = _flag("IMAGE_FALLBACK_ENABLED", "true")

LOG_LEVEL = os.getenv("LOG_LEVEL", "info").lower()
LOG_FORMAT = os.getenv("LOG_FORMAT", "console").lower()

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "8080"))
CORS_ORIGINS = [origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()]

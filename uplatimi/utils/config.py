"""Load and validate environment variables. Uses python-dotenv.

This module is intentionally thin and side-effect free except for loading `.env`.
Callers should use the accessor functions below rather than reading `os.environ`
directly, to keep environment handling consistent.
"""

from pathlib import Path

from dotenv import load_dotenv
import os

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off")


def _project_root() -> Path:
    """Resolve project root (the directory holding app.py)."""
    return Path(__file__).resolve().parent.parent.parent


def load_config() -> None:
    """
    Load .env from project root. Idempotent; safe to call multiple times.
    Uses override=True to ensure .env values take precedence over existing env vars.
    """
    root = _project_root()
    env_path = root / ".env"
    load_dotenv(env_path, override=True)


def get_optional(key: str, default: str = "") -> str:
    """Get optional env var; return default if missing or empty."""
    load_config()
    val = os.getenv(key, "").strip()
    return val if val else default


def get_optional_int(key: str, default: int) -> int:
    """Get optional env var as int; return default if missing or invalid."""
    load_config()
    raw = os.getenv(key, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def get_optional_bool(key: str, default: bool = False) -> bool:
    """Get optional env var as bool (1/true/yes/on); return default if missing or unrecognised."""
    load_config()
    raw = os.getenv(key, "").strip().lower()
    if raw in _TRUE_VALUES:
        return True
    if raw in _FALSE_VALUES:
        return False
    return default


# --- Public config accessors ---

def shortener_url() -> str:
    """Optional: YOURLS API endpoint used to shorten share links."""
    return get_optional("UPLATIMI_SHORTENER_URL", "https://uplatimi.online/na/yourls-api.php")


def shortener_timeout() -> int:
    """Optional: timeout in seconds for the shortening request. Default 15."""
    return get_optional_int("UPLATIMI_SHORTENER_TIMEOUT", 15)


def app_origin() -> str:
    """Optional: public origin the share links point at (no trailing slash)."""
    return get_optional("UPLATIMI_ORIGIN", "https://uplatimi.online").rstrip("/")


def storage_dir() -> Path:
    """Optional: directory holding the durable local record. Default data/storage/."""
    val = get_optional("UPLATIMI_STORAGE_DIR", "")
    if val:
        return Path(val)
    return _project_root() / "data" / "storage"


def discard_stale_links() -> bool:
    """
    Optional: drop shortening results for a superseded request or an edited record.
    Default false (last response wins).
    """
    return get_optional_bool("UPLATIMI_DISCARD_STALE_LINKS", False)


def log_level() -> str:
    """Optional: logging level name. Default INFO."""
    return get_optional("UPLATIMI_LOG_LEVEL", "INFO").upper()


def slip_currency() -> str:
    """Optional: currency code written on the HUB3 slip. Default EUR."""
    return get_optional("UPLATIMI_CURRENCY", "EUR").upper()


def project_root() -> Path:
    """Project root directory."""
    return _project_root()

"""Configuration management for Fire Notes core."""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def get_env(key: str, default: str | None = None) -> str | None:
    """Get environment variable with optional default."""
    return os.getenv(key, default)


def get_env_int(key: str, default: int) -> int:
    """Get environment variable as integer."""
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def get_env_float(key: str, default: float) -> float:
    """Get environment variable as float."""
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def get_env_bool(key: str, default: bool = False) -> bool:
    """Get environment variable as boolean."""
    value = os.getenv(key, "").lower()
    if value in ("true", "1", "yes"):
        return True
    if value in ("false", "0", "no"):
        return False
    return default


APP_NAME = get_env("FIRENOTES_APP_NAME", "Fire Notes") or "Fire Notes"

# Data directory (defaults to ~/.firenotes)
FIRENOTES_DATA_DIR = Path(
    get_env("FIRENOTES_DATA_DIR", os.path.expanduser("~/.firenotes"))
    or os.path.expanduser("~/.firenotes")
)

# Ensure data directory exists
FIRENOTES_DATA_DIR.mkdir(parents=True, exist_ok=True)

# Local session storage (bearer token + serialized user)
SESSION_FILE = FIRENOTES_DATA_DIR / "session.json"

# Scoped storage for exported files
EXPORT_DIR = Path(
    get_env("FIRENOTES_EXPORT_DIR", str(FIRENOTES_DATA_DIR / "exports"))
    or str(FIRENOTES_DATA_DIR / "exports")
)

# REST API
API_BASE_URL = (
    get_env("FIRENOTES_API_URL", "http://localhost:3001/api")
    or "http://localhost:3001/api"
).rstrip("/")
API_TIMEOUT_SECONDS = get_env_float("FIRENOTES_API_TIMEOUT", 10.0)

# Autosave quiescence window
AUTOSAVE_DEBOUNCE_SECONDS = get_env_float("FIRENOTES_AUTOSAVE_DEBOUNCE", 1.0)

# Logging
LOG_LEVEL = get_env("LOG_LEVEL", "INFO") or "INFO"


def setup_logging() -> logging.Logger:
    """Configure and return logger."""
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=getattr(logging, LOG_LEVEL.upper(), logging.INFO),
    )
    # httpx logs every request at INFO; our own hooks cover that at DEBUG
    logging.getLogger("httpx").setLevel(logging.WARNING)
    return logging.getLogger(__name__)


def validate_core_environment() -> tuple[bool, str]:
    """
    Validate configuration required for talking to the notes API.

    Returns:
        (is_valid, message) - If not valid, message explains what's wrong.
    """
    if not API_BASE_URL.startswith(("http://", "https://")):
        return (
            False,
            f"Invalid FIRENOTES_API_URL '{API_BASE_URL}' - must start with http:// or https://",
        )

    if API_TIMEOUT_SECONDS <= 0:
        return False, "FIRENOTES_API_TIMEOUT must be a positive number of seconds"

    if AUTOSAVE_DEBOUNCE_SECONDS < 0:
        return False, "FIRENOTES_AUTOSAVE_DEBOUNCE cannot be negative"

    return True, ""

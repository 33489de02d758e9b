"""Paths, endpoints and default settings."""

import os
from pathlib import Path

from platformdirs import user_data_dir

APP_NAME = "linklion"
VERSION = "0.1.0"

DATA_DIR = Path(os.getenv("LINKLION_DATA_DIR") or user_data_dir(APP_NAME))
SECRETS_DIR = DATA_DIR / "secrets"
LOG_DIR = DATA_DIR / "logs"
LOG_FILE = LOG_DIR / "server.log"
try:
    LOG_RETENTION_DAYS = max(1, int(os.getenv("LINKLION_LOG_RETENTION_DAYS", "14")))
except ValueError:
    LOG_RETENTION_DAYS = 14

# Platform endpoints
BASE_URL = "https://www.linkedin.com"
API_URL = f"{BASE_URL}/voyager/api"
COOKIE_NAME = "li_at"
COOKIE_DOMAIN = ".linkedin.com"

# Transport (seconds)
try:
    HTTP_TIMEOUT = max(1.0, float(os.getenv("LINKLION_HTTP_TIMEOUT", "30")))
except ValueError:
    HTTP_TIMEOUT = 30.0

# Job search bounds
DEFAULT_JOB_LIMIT = 25
MAX_JOB_LIMIT = 100

# Vision fallback
VISION_FALLBACK_ENABLED = os.getenv("LINKLION_VISION_FALLBACK", "1").strip().lower() not in {"0", "false", "no", "off"}
VISION_MODEL = os.getenv("LINKLION_VISION_MODEL", "claude-sonnet-4-5")
try:
    VISION_MAX_TOKENS = max(256, int(os.getenv("LINKLION_VISION_MAX_TOKENS", "2048")))
except ValueError:
    VISION_MAX_TOKENS = 2048
CAPTURE_VIEWPORT = {"width": 1280, "height": 2000}
CAPTURE_TIMEOUT_MS = 45_000
# Vision API image bounds: longest side in px, and raw bytes whose base64 form stays under 5 MB.
CAPTURE_MAX_HEIGHT = 6000
CAPTURE_MAX_BYTES = 3_700_000
CAPTURE_JPEG_QUALITIES = (80, 60, 40)

# Server
HOST = "127.0.0.1"
PORT = 8000


def ensure_dirs() -> None:
    """Create required directories on first run."""
    for d in (DATA_DIR, SECRETS_DIR, LOG_DIR):
        d.mkdir(parents=True, exist_ok=True)

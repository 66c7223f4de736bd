"""
Configuration constants for Instagram activity cleanup.
"""
import os
from pathlib import Path

# Base directory (project root)
BASE_DIR = Path(__file__).parent.parent

# Speed (concurrency fan-out per batch)
DEFAULT_SPEED = 5
MIN_SPEED = 1
MAX_SPEED = 200

# Delay tiers: (speed strictly above, delay seconds), checked in order
BATCH_DELAY_TIERS = ((50, 0.2), (0, 1.0))
PAGE_DELAY_TIERS = ((50, 0.5), (0, 2.0))

# Progress reporting
MAX_JOB_LOGS = 50
ESTIMATE_LOOKAHEAD = 200  # Added to the first page size when more pages exist
LOG_EVERY_N = 10  # Throttled logging interval at high speed
LIKE_VERBOSE_BELOW_SPEED = 50
COMMENT_VERBOSE_BELOW_SPEED = 10

# Instagram web API
INSTAGRAM_BASE_URL = "https://www.instagram.com"
INSTAGRAM_DOMAINS = ["instagram.com", ".instagram.com"]
INSTAGRAM_APP_ID = os.getenv("INSTAGRAM_APP_ID", "936619743392459")
USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
REQUEST_TIMEOUT_MS = int(os.getenv("REQUEST_TIMEOUT_MS", "30000"))

# Settings keys
COOKIES_SETTING_KEY = "instagram_cookies"

# Paths (relative to BASE_DIR)
STORE_PATH = BASE_DIR / "data" / "jobs.json"
LOG_DIR = BASE_DIR / "data" / "logs"

# Environment Variables (with defaults)
IGCLEANUP_STORE_PATH = os.getenv("IGCLEANUP_STORE_PATH", str(STORE_PATH))
IGCLEANUP_HOST = os.getenv("IGCLEANUP_HOST", "127.0.0.1")
IGCLEANUP_PORT = int(os.getenv("IGCLEANUP_PORT", "5000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Ensure data directories exist
LOG_DIR.mkdir(parents=True, exist_ok=True)
STORE_PATH.parent.mkdir(parents=True, exist_ok=True)

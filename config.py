"""
ScrollHarvest Configuration
Loads settings from environment variables and defines constants.
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Base directory (where this script lives)
BASE_DIR = Path(__file__).parent.resolve()

# Marketplace target
BASE_URL = os.getenv("SCRAPE_BASE_URL", "https://www.facebook.com")
DEFAULT_LOCATION = os.getenv("MARKETPLACE_LOCATION", "calgary")

# Selectors
ITEM_SELECTOR = 'a[href*="/marketplace/item/"]'
CONTAINER_SELECTOR = 'div[role="main"]'

# Scroll engine defaults
DESIRED_ITEM_COUNT = int(os.getenv("DESIRED_ITEM_COUNT", "30"))
MAX_SCROLL_ROUNDS = int(os.getenv("MAX_SCROLL_ROUNDS", "50"))
SCROLL_DELAY_MS = int(os.getenv("SCROLL_DELAY_MS", "800"))
STALL_ROUNDS = int(os.getenv("STALL_ROUNDS", "3"))
ARROW_DOWN_PRESSES = int(os.getenv("ARROW_DOWN_PRESSES", "40"))

# Desired counts per extraction mode when the caller gives none
PROGRAMMATIC_ITEM_COUNT = 60
LLM_ITEM_COUNT = 40

# Timing (milliseconds)
NAVIGATION_TIMEOUT_MS = 120000
WAIT_SELECTOR_TIMEOUT_MS = 20000
FINAL_SETTLE_MS = 2000

# Model-assisted extraction
GOOGLE_API_KEY = os.getenv("GOOGLE_API_KEY") or os.getenv("GEMINI_API_KEY", "")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.5-pro")
COMPACT_CONTEXT_MAX_ITEMS = 80
DEFAULT_INSTRUCTION = (
    'Extract marketplace listings as JSON with the shape { "listings": '
    '[{ "name": string|null, "url": string|null, "price": string|null, '
    '"image_url": string|null }] }.'
)

# Optional login (leave empty to rely on the saved browser session)
LOGIN_EMAIL = os.getenv("LOGIN_EMAIL", "")
LOGIN_PASSWORD = os.getenv("LOGIN_PASSWORD", "")

# File paths
LOG_FILE = BASE_DIR / os.getenv("LOG_FILE", "scrollharvest.log")
BROWSER_DATA_DIR = BASE_DIR / os.getenv("BROWSER_DATA_DIR", "browser_data")

# Browser settings
HEADLESS = os.getenv("HEADLESS", "true").lower() == "true"

# User agent for the browser and plain HTTP fetches
USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/125.0.0.0 Safari/537.36"
)

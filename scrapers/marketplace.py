"""
ScrollHarvest Marketplace Scraper
Playwright-based infinite-scroll harvester with persistent authentication.
"""

import logging
import time
from dataclasses import dataclass
from typing import Optional, Union
from urllib.parse import urlencode, quote

from playwright.sync_api import sync_playwright, TimeoutError as PlaywrightTimeout
from playwright_stealth import Stealth

from .base import BaseScraper
from .login import login_with_credentials
from scrolling import ScrollOptions, ScrollOutcome, ScrollSession
from config import (
    BASE_URL,
    DEFAULT_LOCATION,
    BROWSER_DATA_DIR,
    HEADLESS,
    USER_AGENT,
    NAVIGATION_TIMEOUT_MS,
    WAIT_SELECTOR_TIMEOUT_MS,
    FINAL_SETTLE_MS,
)

logger = logging.getLogger(__name__)

MAX_RADIUS = 300


@dataclass
class HarvestResult:
    """Markup chosen for extraction plus how the scroll session ended."""
    html: str
    source: str
    outcome: ScrollOutcome


def build_search_url(
    base_url: str = BASE_URL,
    query: Optional[str] = None,
    days_since_listed: int = 1,
    location: Optional[str] = None,
    location_id: Optional[Union[int, str]] = None,
    category: Optional[str] = None,
    exact: bool = False,
    sort_by: Optional[str] = None,
    radius: Optional[int] = None,
    min_price: Optional[int] = None,
    max_price: Optional[int] = None,
) -> str:
    """
    Build a Marketplace listing URL.

    A numeric location id wins over a location slug; a category path wins
    over the search path. Out-of-range radius and negative prices are left out.

    Raises:
        ValueError: Neither query nor category given, or days_since_listed < 1
    """
    query_text = (query or "").strip()
    category_text = (category or "").strip()
    if not query_text and not category_text:
        raise ValueError("Provide either query or category")
    if days_since_listed is None or int(days_since_listed) <= 0:
        raise ValueError("days_since_listed must be a positive integer")

    location_segment = (location or "").strip() or DEFAULT_LOCATION
    if isinstance(location_id, int) and location_id > 0:
        location_segment = str(location_id)
    elif isinstance(location_id, str) and location_id.strip():
        location_segment = location_id.strip()

    category_path = f"/{quote(category_text)}" if category_text else "/search"
    path = f"/marketplace/{quote(location_segment)}{category_path}"

    params = {"daysSinceListed": int(days_since_listed)}
    if query_text:
        params["query"] = query_text
    if exact:
        params["exact"] = "true"
    if sort_by and sort_by.strip():
        params["sortBy"] = sort_by.strip()
    if radius is not None and 0 < int(radius) <= MAX_RADIUS:
        params["radius"] = int(radius)
    if min_price is not None and int(min_price) >= 0:
        params["minPrice"] = int(min_price)
    if max_price is not None and int(max_price) >= 0:
        params["maxPrice"] = int(max_price)

    return f"{base_url.rstrip('/')}{path}?{urlencode(params)}"


class MarketplaceScraper(BaseScraper):
    """Scroll-and-harvest scraper for infinite-scroll marketplace pages."""

    def __init__(self, playwright_instance=None, headless: bool = HEADLESS, debug: bool = False):
        """
        Initialize the scraper.

        Args:
            playwright_instance: Optional shared Playwright instance to avoid conflicts
            headless: Whether to run browser in headless mode
            debug: Visible, slowed-down browser with page events logged
        """
        super().__init__("marketplace")
        self._owns_playwright = playwright_instance is None
        self.playwright = playwright_instance
        self.context = None
        self._initialized = False
        self.debug = debug
        self._headless = headless and not debug

    def _initialize_browser(self):
        """Initialize Playwright with persistent context (saved cookies keep the login)."""
        if self._initialized:
            return

        logger.info(f"Initializing marketplace browser (headless={self._headless})...")

        if self.playwright is None:
            self.playwright = sync_playwright().start()
            self._owns_playwright = True

        BROWSER_DATA_DIR.mkdir(parents=True, exist_ok=True)

        self.context = self.playwright.chromium.launch_persistent_context(
            str(BROWSER_DATA_DIR),
            headless=self._headless,
            slow_mo=50 if self.debug else 0,
            viewport={"width": 1920, "height": 1080},
            user_agent=USER_AGENT,
            args=[
                "--disable-blink-features=AutomationControlled",
                "--disable-dev-shm-usage",
                "--disable-notifications",
                "--no-sandbox",
            ],
        )

        self._initialized = True
        logger.info("Browser initialized")

    def _open_page(self):
        """New tab with stealth applied (and page events logged in debug mode)."""
        page = self.context.new_page()

        stealth = Stealth()
        stealth.apply_stealth_sync(page)

        if self.debug:
            page.on("console", self._log_console)
            page.on("requestfailed", self._log_request_failed)
            page.on("response", self._log_response)
        return page

    def _log_console(self, msg):
        logger.debug(f"[page:{msg.type}] {msg.text}")

    def _log_request_failed(self, request):
        logger.warning(f"[request failed] {request.method} {request.url} {request.failure}")

    def _log_response(self, response):
        if response.status >= 400:
            logger.warning(f"[response] {response.status} {response.url}")

    def _close_page(self, page):
        try:
            page.close()
        except Exception as e:
            logger.error(f"Error closing page: {e}")

    def _wait_for(self, page, selector: str):
        """Bounded wait for a selector; absence is tolerated."""
        try:
            page.wait_for_selector(selector, timeout=WAIT_SELECTOR_TIMEOUT_MS)
        except PlaywrightTimeout:
            logger.warning(f"Selector not found after {WAIT_SELECTOR_TIMEOUT_MS}ms: {selector}")

    def get_html(
        self,
        url: str,
        options: Optional[ScrollOptions] = None,
        wait_selector: Optional[str] = None,
        email: Optional[str] = None,
        password: Optional[str] = None,
    ) -> HarvestResult:
        """
        Load a listing page, scroll it and return the markup to extract from.

        Navigation failures propagate; the page is closed on every exit path.

        Args:
            url: Listing page URL
            options: Scroll tunables (defaults from config)
            wait_selector: Optional selector to wait for before scrolling
            email: Optional login email (used only together with password)
            password: Optional login password

        Returns:
            HarvestResult with html, its source ('synthetic', 'container', 'page')
            and the scroll outcome
        """
        options = options or ScrollOptions()

        self._initialize_browser()
        page = self._open_page()
        try:
            logger.info(f"Loading {url}")
            page.goto(url, wait_until="domcontentloaded", timeout=NAVIGATION_TIMEOUT_MS)

            if email and email.strip() and password:
                login_with_credentials(page, email, password)

            if wait_selector:
                self._wait_for(page, wait_selector)
            self._wait_for(page, options.container_selector)

            session = ScrollSession(page, options)
            outcome = session.run()

            time.sleep(FINAL_SETTLE_MS / 1000)

            html, source = session.snapshot_html()
            logger.info(f"Captured {len(html)} chars of markup from {source}")
            if self.debug:
                self._save_debug_html(html)
            return HarvestResult(html=html, source=source, outcome=outcome)
        finally:
            self._close_page(page)

    def _save_debug_html(self, html: str, filename: str = "debug_marketplace.html"):
        """Save harvested HTML for debugging."""
        try:
            with open(filename, "w", encoding="utf-8") as f:
                f.write(html)
            logger.debug(f"Saved debug HTML to {filename}")
        except Exception as e:
            logger.error(f"Failed to save debug HTML: {e}")

    def close(self):
        """Close browser and clean up."""
        try:
            if self.context:
                self.context.close()
                self.context = None
            if self._owns_playwright and self.playwright:
                self.playwright.stop()
                self.playwright = None
            self._initialized = False
            logger.info("Marketplace browser closed")
        except Exception as e:
            logger.error(f"Error closing browser: {e}")

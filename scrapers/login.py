"""
ScrollHarvest Login Helper
Best-effort credential login on the current page.
"""

import logging
import random
import time

from playwright.sync_api import TimeoutError as PlaywrightTimeout

logger = logging.getLogger(__name__)

EMAIL_SELECTOR = 'input[name="email"]'
PASSWORD_SELECTOR = 'input[name="pass"]'
SUBMIT_SELECTORS = [
    'button[name="login"]',
    'button[type="submit"]',
    'input[type="submit"]',
]

FORM_WAIT_MS = 20000
SUBMIT_WAIT_MS = 30000


def _type_like_human(page, selector: str, text: str, min_delay_ms: int = 60, max_delay_ms: int = 140):
    """Clear a field and type into it one character at a time with jitter."""
    field = page.locator(selector).first
    field.click()
    field.fill("")
    for ch in str(text):
        page.keyboard.type(ch)
        time.sleep(random.uniform(min_delay_ms, max_delay_ms) / 1000)


def _submit(page) -> bool:
    try:
        page.focus(PASSWORD_SELECTOR)
        page.keyboard.press("Enter")
        return True
    except Exception as e:
        logger.debug(f"Enter on password field failed: {e}")

    for selector in SUBMIT_SELECTORS:
        try:
            button = page.locator(selector).first
            if button.is_visible():
                button.click()
                return True
        except Exception:
            continue
    return False


def login_with_credentials(page, email: str, password: str) -> bool:
    """
    Fill and submit an email/password form if the page shows one.

    Never raises: a failed login leaves the page as it is and scraping
    continues with whatever session the browser already has.

    Returns:
        True if the form was found and submitted
    """
    try:
        try:
            page.wait_for_selector(PASSWORD_SELECTOR, timeout=FORM_WAIT_MS)
        except PlaywrightTimeout:
            logger.info("No login form found, continuing without login")
            return False

        if not page.query_selector(EMAIL_SELECTOR):
            logger.info("Login form has no email field, skipping login")
            return False

        _type_like_human(page, EMAIL_SELECTOR, email.strip())
        _type_like_human(page, PASSWORD_SELECTOR, password)

        if not _submit(page):
            logger.warning("Could not submit login form")
            return False

        try:
            page.wait_for_load_state("networkidle", timeout=SUBMIT_WAIT_MS)
        except PlaywrightTimeout:
            logger.debug("Network did not settle after login, continuing")

        logger.info("Login form submitted")
        return True

    except Exception as e:
        logger.warning(f"Login attempt failed: {e}")
        return False

"""
ScrollHarvest Fetcher
Loads already-rendered markup for offline extraction (file or plain HTTP GET).
"""

import time
import logging
from pathlib import Path

import requests

from config import USER_AGENT

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 30


def fetch_html(url: str, max_retries: int = 3) -> str:
    """
    GET a page without rendering it.

    Args:
        url: Page URL
        max_retries: Number of attempts on network errors, 429 and 5xx responses

    Returns:
        Response body

    Raises:
        requests.RequestException: All attempts failed or a 4xx was returned
    """
    last_error = None

    for attempt in range(max_retries):
        try:
            response = requests.get(url, headers={"User-Agent": USER_AGENT}, timeout=REQUEST_TIMEOUT)

            if response.status_code == 429:
                header = response.headers.get("Retry-After", "")
                retry_after = int(header) if header.isdigit() else 5
                logger.warning(f"Rate limited, waiting {retry_after}s")
                time.sleep(retry_after)
                last_error = requests.HTTPError(f"429 for {url}", response=response)
                continue
            if response.status_code >= 500:
                logger.error(f"Server error {response.status_code} for {url}")
                last_error = requests.HTTPError(f"{response.status_code} for {url}", response=response)
                time.sleep(1)
                continue

            response.raise_for_status()
            return response.text

        except requests.HTTPError:
            raise
        except requests.RequestException as e:
            logger.error(f"Failed to fetch {url} (attempt {attempt + 1}): {e}")
            last_error = e
            time.sleep(1)

    raise last_error


def load_html(source: str) -> str:
    """Read markup from an http(s) URL or a local file path."""
    if source.startswith("http://") or source.startswith("https://"):
        return fetch_html(source)
    return Path(source).read_text(encoding="utf-8")

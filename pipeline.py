"""
ScrollHarvest Pipeline
Scroll a listing page, then hand its markup to the chosen extraction backend.
"""

import json
import logging
from dataclasses import replace
from typing import Callable, Optional

from config import BASE_URL, DEFAULT_INSTRUCTION, PROGRAMMATIC_ITEM_COUNT, LLM_ITEM_COUNT
from extractor import extract_listings, listings_payload
from llm_extractor import extract_with_llm
from scrapers import MarketplaceScraper
from scrolling import ScrollOptions

logger = logging.getLogger(__name__)

MODES = ("llm", "programmatic")


def run_scrape(
    url: str,
    mode: str = "llm",
    instruction: str = DEFAULT_INSTRUCTION,
    options: Optional[ScrollOptions] = None,
    desired_item_count: Optional[int] = None,
    base_url: str = BASE_URL,
    wait_selector: Optional[str] = None,
    email: Optional[str] = None,
    password: Optional[str] = None,
    debug: bool = False,
    scraper_factory: Callable = MarketplaceScraper,
) -> dict:
    """
    Run one scrape end to end.

    Args:
        url: Listing page URL
        mode: 'programmatic' (rule-based) or 'llm' (model-assisted)
        instruction: Task text for the model-assisted backend
        options: Scroll tunables; target count is overridden by desired_item_count
        desired_item_count: Items to aim for (defaults depend on mode)
        base_url: Origin for absolutizing hrefs in rule-based mode
        wait_selector: Optional selector to wait for before scrolling
        email: Optional login email
        password: Optional login password
        debug: Visible browser and verbose page logging
        scraper_factory: Callable building the scraper (takes debug=)

    Returns:
        Dict with html_length, source, rounds, stop_reason and listings
    """
    if mode not in MODES:
        raise ValueError(f"mode must be one of {MODES}")

    if desired_item_count is None or desired_item_count <= 0:
        desired_item_count = PROGRAMMATIC_ITEM_COUNT if mode == "programmatic" else LLM_ITEM_COUNT
    options = replace(options or ScrollOptions(), target_count=desired_item_count)

    with scraper_factory(debug=debug) as scraper:
        result = scraper.get_html(
            url,
            options,
            wait_selector=wait_selector,
            email=email,
            password=password,
        )

    if mode == "programmatic":
        payload = listings_payload(extract_listings(
            result.html, base_url=base_url, item_selector=options.item_selector,
        ))
    else:
        payload = json.loads(extract_with_llm(
            result.html, url, instruction, item_selector=options.item_selector,
        ))

    listings = payload.get("listings", [])
    logger.info(f"Extracted {len(listings)} listings ({mode})")

    stop_reason = result.outcome.stop_reason
    return {
        "html_length": len(result.html),
        "source": result.source,
        "rounds": result.outcome.rounds,
        "stop_reason": stop_reason.value if stop_reason else None,
        "listings": listings,
    }

"""
ScrollHarvest Markup Extractor
Turns harvested or fetched anchor markup into normalized listing candidates.
"""

import re
import logging
from typing import Iterable, List, Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup

from models import CandidateRecord
from config import ITEM_SELECTOR, COMPACT_CONTEXT_MAX_ITEMS

logger = logging.getLogger(__name__)

# "$150.00", "CA$ 1,200", "Free"
PRICE_PATTERN = re.compile(r"((?:CA\$|\$)\s?[\d,.]+(?:\.\d{2})?|\bFree\b)", re.IGNORECASE)

# Trailing " in Calgary, AB" style location suffix on image alt text
LOCATION_SUFFIX_PATTERN = re.compile(r"\s+in\s+[^,]+,\s*[A-Z]{2,}\s*$", re.IGNORECASE)

WHITESPACE_PATTERN = re.compile(r"\s+")


def normalize_price(text: Optional[str]) -> Optional[str]:
    """Return the first currency amount or 'Free' token in text, else None."""
    if not text:
        return None
    match = PRICE_PATTERN.search(text)
    return match.group(1).strip() if match else None


def clean_title_from_alt(alt_text: Optional[str]) -> Optional[str]:
    """Strip a trailing ' in <City>, <REGION>' suffix from image alt text."""
    if not alt_text:
        return None
    cleaned = LOCATION_SUFFIX_PATTERN.sub("", alt_text).strip()
    return cleaned or alt_text


def resolve_url(href: Optional[str], base_url: Optional[str] = None) -> Optional[str]:
    """Make a relative href absolute when a base URL is available."""
    if not href:
        return None
    if href.startswith("http"):
        return href
    if base_url:
        return urljoin(base_url, href)
    return href


def _collapse_text(anchor) -> str:
    return WHITESPACE_PATTERN.sub(" ", anchor.get_text(" ")).strip()


def _iter_anchor_fields(html: str, base_url: Optional[str], item_selector: str):
    """Yield the raw per-anchor fields shared by records and compact candidates."""
    soup = BeautifulSoup(html or "", "html.parser")

    for anchor in soup.select(item_selector):
        img = anchor.find("img")
        image_url = (img.get("src") if img else None) or None
        alt_text = (img.get("alt") if img else None) or None
        text = _collapse_text(anchor)

        yield {
            "url": resolve_url(anchor.get("href"), base_url),
            "text": text,
            "image_url": image_url,
            "alt": alt_text,
            "name": clean_title_from_alt(alt_text),
            "price": normalize_price(text),
        }


def extract_candidates(
    html: str,
    base_url: Optional[str] = None,
    item_selector: str = ITEM_SELECTOR,
) -> List[CandidateRecord]:
    """
    Build one CandidateRecord per item anchor, in document order.

    Anchors that resolve no fields still produce an all-null record; nothing
    is dropped before deduplication.
    """
    return [
        CandidateRecord(
            name=fields["name"],
            url=fields["url"],
            price=fields["price"],
            image_url=fields["image_url"],
        )
        for fields in _iter_anchor_fields(html, base_url, item_selector)
    ]


def dedupe_records(records: Iterable[CandidateRecord]) -> List[CandidateRecord]:
    """Drop repeated records, keeping first-seen order."""
    seen = set()
    deduped = []
    for record in records:
        key = record.dedup_key()
        if key in seen:
            continue
        seen.add(key)
        deduped.append(record)
    return deduped


def extract_listings(
    html: str,
    base_url: Optional[str] = None,
    max_items: Optional[int] = None,
    item_selector: str = ITEM_SELECTOR,
) -> List[CandidateRecord]:
    """
    Rule-based extraction: candidates, deduplicated, optionally truncated.

    Args:
        html: Markup holding item anchors (synthetic container, container or page)
        base_url: Origin used to absolutize relative hrefs
        max_items: Upper bound on returned records (None for no bound)
        item_selector: CSS selector matching item anchors

    Returns:
        Deduplicated CandidateRecord list in first-seen order
    """
    records = dedupe_records(extract_candidates(html, base_url, item_selector))
    if max_items is not None:
        records = records[:max_items]
    logger.debug(f"Extracted {len(records)} unique listings")
    return records


def listings_payload(records: Iterable[CandidateRecord]) -> dict:
    """Shape records as the JSON document returned to callers."""
    return {"listings": [record.to_dict() for record in records]}


def build_compact_context(
    html: str,
    base_url: Optional[str] = None,
    max_items: int = COMPACT_CONTEXT_MAX_ITEMS,
    item_selector: str = ITEM_SELECTOR,
) -> List[dict]:
    """Bounded, field-reduced candidates for a downstream structuring step."""
    seen = set()
    candidates = []

    for fields in _iter_anchor_fields(html, base_url, item_selector):
        key = fields["url"] or (fields["name"], fields["image_url"])
        if key in seen:
            continue
        seen.add(key)
        candidates.append({
            "href": fields["url"],
            "text": fields["text"],
            "image": fields["image_url"],
            "alt": fields["alt"],
            "name": fields["name"],
            "price_text": fields["price"],
        })
        if len(candidates) >= max_items:
            break

    return candidates

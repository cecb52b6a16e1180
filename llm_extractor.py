"""
ScrollHarvest Model-Assisted Extraction
Sends the compact candidate context to Gemini and returns structured JSON.
"""

import json
import logging
from typing import List, Optional
from urllib.parse import urlparse

from google import genai
from google.genai import types

from extractor import build_compact_context
from config import GOOGLE_API_KEY, GEMINI_MODEL, COMPACT_CONTEXT_MAX_ITEMS, ITEM_SELECTOR

logger = logging.getLogger(__name__)

LISTING_FIELDS = ["name", "url", "price", "image_url"]

LISTINGS_SCHEMA = types.Schema(
    type=types.Type.OBJECT,
    properties={
        "listings": types.Schema(
            type=types.Type.ARRAY,
            items=types.Schema(
                type=types.Type.OBJECT,
                properties={
                    field: types.Schema(type=types.Type.STRING, nullable=True)
                    for field in LISTING_FIELDS
                },
                required=LISTING_FIELDS,
                property_ordering=LISTING_FIELDS,
            ),
        ),
    },
    required=["listings"],
    property_ordering=["listings"],
)


class MissingCredentialsError(RuntimeError):
    """No API key available for model-assisted extraction."""


def origin_of(url: str) -> Optional[str]:
    """scheme://host[:port] of a URL, or None if it has no host."""
    parsed = urlparse(url or "")
    if not parsed.scheme or not parsed.netloc:
        return None
    return f"{parsed.scheme}://{parsed.netloc}"


def build_prompt(instruction: str, compact: List[dict]) -> str:
    return (
        f"Task:\n{instruction}\n\n"
        "You are given pre-extracted listing candidates (compact context). "
        "Use them to produce the final structured JSON.\n"
        "Only use the fields provided; do not hallucinate.\n\n"
        f"CompactContext(JSON):\n{json.dumps(compact)}"
    )


def extract_with_llm(
    html: str,
    target_url: str,
    instruction: str,
    api_key: Optional[str] = None,
    model: Optional[str] = None,
    max_items: int = COMPACT_CONTEXT_MAX_ITEMS,
    item_selector: str = ITEM_SELECTOR,
) -> str:
    """
    Structure listings from harvested markup with Gemini.

    Args:
        html: Markup returned by the scroll session
        target_url: Page the markup came from (its origin absolutizes hrefs)
        instruction: Natural-language extraction task
        api_key: Overrides GOOGLE_API_KEY / GEMINI_API_KEY
        model: Overrides GEMINI_MODEL
        max_items: Bound on candidates sent to the model
        item_selector: CSS selector matching item anchors

    Returns:
        Response text (JSON matching LISTINGS_SCHEMA)

    Raises:
        MissingCredentialsError: No API key configured
    """
    api_key = api_key or GOOGLE_API_KEY
    if not api_key:
        raise MissingCredentialsError(
            "Missing GOOGLE_API_KEY or GEMINI_API_KEY environment variable"
        )

    compact = build_compact_context(
        html, base_url=origin_of(target_url), max_items=max_items, item_selector=item_selector,
    )
    logger.info(f"Sending {len(compact)} candidates to {model or GEMINI_MODEL}")

    client = genai.Client(api_key=api_key)
    response = client.models.generate_content(
        model=model or GEMINI_MODEL,
        contents=build_prompt(instruction, compact),
        config=types.GenerateContentConfig(
            response_mime_type="application/json",
            response_schema=LISTINGS_SCHEMA,
            temperature=0.2,
        ),
    )
    return response.text

"""
ScrollHarvest - Infinite-Scroll Listing Harvester
Command-line entry point.
"""

import sys
import json
import logging
import argparse

from config import (
    LOG_FILE,
    BASE_URL,
    ITEM_SELECTOR,
    CONTAINER_SELECTOR,
    MAX_SCROLL_ROUNDS,
    SCROLL_DELAY_MS,
    STALL_ROUNDS,
    ARROW_DOWN_PRESSES,
    COMPACT_CONTEXT_MAX_ITEMS,
    LOGIN_EMAIL,
    LOGIN_PASSWORD,
)
from extractor import build_compact_context, extract_listings, listings_payload
from fetcher import load_html
from llm_extractor import MissingCredentialsError
from pipeline import run_scrape
from scrapers import build_search_url
from scrolling import ScrollOptions

logger = logging.getLogger("ScrollHarvest")


def setup_logging(debug: bool = False):
    """Log to the log file and stderr (stdout carries the JSON)."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.FileHandler(LOG_FILE),
            logging.StreamHandler(sys.stderr),
        ],
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="ScrollHarvest - Infinite-Scroll Listing Harvester")
    subparsers = parser.add_subparsers(dest="command", required=True)

    scrape = subparsers.add_parser("scrape", help="Scroll a listing page and extract listings")
    scrape.add_argument("url", nargs="?", help="Listing page URL (omit to build one from search options)")
    scrape.add_argument("--mode", choices=["llm", "programmatic"], default="llm")
    scrape.add_argument("--query", help="Search text")
    scrape.add_argument("--category", help="Category slug (used instead of search)")
    scrape.add_argument("--days", type=int, default=1, help="Days since listed")
    scrape.add_argument("--location", help="Location slug")
    scrape.add_argument("--location-id", help="Numeric location id (wins over --location)")
    scrape.add_argument("--radius", type=int, help="Search radius (1-300)")
    scrape.add_argument("--min-price", type=int)
    scrape.add_argument("--max-price", type=int)
    scrape.add_argument("--exact", action="store_true", help="Exact query match")
    scrape.add_argument("--sort-by", help="Sort order, e.g. creation_date_descend")
    scrape.add_argument("--desired-count", type=int, help="Items to aim for")
    scrape.add_argument("--max-rounds", type=int, default=MAX_SCROLL_ROUNDS)
    scrape.add_argument("--delay-ms", type=int, default=SCROLL_DELAY_MS, help="Settle delay per round")
    scrape.add_argument("--stall-rounds", type=int, default=STALL_ROUNDS)
    scrape.add_argument("--arrow-presses", type=int, default=ARROW_DOWN_PRESSES)
    scrape.add_argument("--item-selector", default=ITEM_SELECTOR)
    scrape.add_argument("--container", default=CONTAINER_SELECTOR, help="Feed container hint")
    scrape.add_argument("--wait-selector", help="Selector to wait for before scrolling")
    scrape.add_argument("--no-direct-scroll", action="store_true")
    scrape.add_argument("--no-wheel", action="store_true")
    scrape.add_argument("--no-keyboard", action="store_true")
    scrape.add_argument("--dismiss-overlays", action="store_true", help="Close modal overlays each round")
    scrape.add_argument("--base-url", default=BASE_URL)
    scrape.add_argument("--email", default=LOGIN_EMAIL)
    scrape.add_argument("--password", default=LOGIN_PASSWORD)
    scrape.add_argument("--debug", action="store_true", help="Visible browser, verbose logging")
    scrape.add_argument("--output", help="Write JSON here instead of stdout")

    extract = subparsers.add_parser("extract", help="Extract listings from saved or fetched HTML")
    extract.add_argument("source", help="HTML file path or http(s) URL")
    extract.add_argument("--base-url", default=BASE_URL)
    extract.add_argument("--item-selector", default=ITEM_SELECTOR)
    extract.add_argument("--max-items", type=int)
    extract.add_argument("--compact", action="store_true", help="Emit the compact candidate context")
    extract.add_argument("--debug", action="store_true")
    extract.add_argument("--output", help="Write JSON here instead of stdout")

    return parser


def options_from_args(args):
    """ScrollOptions from parsed scrape arguments."""
    return ScrollOptions(
        item_selector=args.item_selector,
        max_rounds=args.max_rounds,
        delay_ms=args.delay_ms,
        stall_rounds=args.stall_rounds,
        container_selector=args.container,
        direct_scroll=not args.no_direct_scroll,
        wheel=not args.no_wheel,
        keyboard=not args.no_keyboard,
        dismiss_overlays=args.dismiss_overlays,
        arrow_down_presses=args.arrow_presses,
    )


def target_url_from_args(args) -> str:
    if args.url:
        return args.url

    location_id = args.location_id
    if location_id and location_id.isdigit():
        location_id = int(location_id)
    return build_search_url(
        base_url=args.base_url,
        query=args.query,
        days_since_listed=args.days,
        location=args.location,
        location_id=location_id,
        category=args.category,
        exact=args.exact,
        sort_by=args.sort_by,
        radius=args.radius,
        min_price=args.min_price,
        max_price=args.max_price,
    )


def run_scrape_command(args) -> dict:
    url = target_url_from_args(args)
    logger.info(f"Scraping {url} ({args.mode})")
    return run_scrape(
        url,
        mode=args.mode,
        options=options_from_args(args),
        desired_item_count=args.desired_count,
        base_url=args.base_url,
        wait_selector=args.wait_selector,
        email=args.email or None,
        password=args.password or None,
        debug=args.debug,
    )


def run_extract_command(args):
    html = load_html(args.source)
    if args.compact:
        return build_compact_context(
            html,
            base_url=args.base_url,
            max_items=args.max_items or COMPACT_CONTEXT_MAX_ITEMS,
            item_selector=args.item_selector,
        )
    records = extract_listings(
        html,
        base_url=args.base_url,
        max_items=args.max_items,
        item_selector=args.item_selector,
    )
    return listings_payload(records)


def write_output(payload, output_path=None):
    text = json.dumps(payload, indent=2, ensure_ascii=False)
    if output_path:
        with open(output_path, "w", encoding="utf-8") as f:
            f.write(text)
        logger.info(f"Wrote results to {output_path}")
    else:
        print(text)


def main(argv=None) -> int:
    """Entry point with argument parsing."""
    args = build_parser().parse_args(argv)
    setup_logging(debug=args.debug)

    try:
        if args.command == "scrape":
            payload = run_scrape_command(args)
        else:
            payload = run_extract_command(args)
    except (ValueError, MissingCredentialsError) as e:
        logger.error(str(e))
        return 2
    except KeyboardInterrupt:
        logger.info("Keyboard interrupt received")
        return 130
    except Exception as e:
        logger.error(f"Unexpected error: {e}", exc_info=True)
        return 1

    write_output(payload, args.output)
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""
ScrollHarvest Scroll-Root Selector
Finds the element whose scroll position drives the listing feed.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

logger = logging.getLogger(__name__)

SCROLLABLE_OVERFLOW = ("auto", "scroll", "overlay")

# Spans at or below this are rounding noise, not real scroll containers
MIN_SCROLL_SPAN = 4

# Structural selectors that commonly host feeds
FEED_SELECTORS = [
    '[role="feed"]',
    '[data-pagelet="MainFeed"]',
    "[aria-label]",
    "main",
    "section",
    # Every div goes through getComputedStyle once per session; slow on very large pages
    "div",
]

# Hint element first, structural candidates next, document scroller always last
COLLECT_CANDIDATES_JS = """
([hint, selectors]) => {
  const docEl = document.scrollingElement || document.documentElement || document.body;
  const seen = new Set([docEl]);
  const nodes = [];
  const add = (n) => {
    if (n && !seen.has(n)) {
      seen.add(n);
      nodes.push(n);
    }
  };
  try { add(document.querySelector(hint)); } catch (e) {}
  for (const sel of selectors) {
    for (const n of document.querySelectorAll(sel)) add(n);
  }
  nodes.push(docEl);
  return nodes;
}
"""

DESCRIBE_CANDIDATES_JS = """
(nodes) => nodes.map((el) => {
  let overflowY = "";
  try { overflowY = getComputedStyle(el).overflowY; } catch (e) {}
  const classes = Array.from(el.classList || []).slice(0, 3).join(".");
  return {
    overflow_y: overflowY,
    scroll_height: el.scrollHeight || 0,
    client_height: el.clientHeight || 0,
    label: `${el.tagName.toLowerCase()}#${el.id || ""}.${classes}`,
  };
})
"""

DOCUMENT_ROOT_JS = "() => document.scrollingElement || document.documentElement || document.body"


@dataclass(frozen=True)
class NodeMetrics:
    """Snapshot of the numbers that decide whether a node scrolls."""
    overflow_y: str
    scroll_height: int
    client_height: int
    label: str = ""

    @property
    def scroll_span(self) -> int:
        return self.scroll_height - self.client_height

    def is_scrollable(self) -> bool:
        return self.overflow_y in SCROLLABLE_OVERFLOW and self.scroll_span > MIN_SCROLL_SPAN


def pick_scroll_root(metrics: Sequence[NodeMetrics]) -> Optional[int]:
    """
    Choose the most scrollable candidate.

    Args:
        metrics: Candidate node metrics, in candidate order

    Returns:
        Index of the scrollable node with the largest span (earliest on ties),
        or None when no candidate is scrollable
    """
    best = None
    best_span = 0
    for index, node in enumerate(metrics):
        if not node.is_scrollable():
            continue
        if node.scroll_span > best_span:
            best = index
            best_span = node.scroll_span
    return best


def document_root(page):
    """Handle to the document's own scrolling element."""
    return page.evaluate_handle(DOCUMENT_ROOT_JS).as_element()


def select_root(page, hint_selector: str):
    """
    Pick the scroll root for a session.

    Args:
        page: Playwright page positioned at the listing view
        hint_selector: CSS selector of the expected feed container

    Returns:
        ElementHandle of the chosen root (owned by the page)
    """
    candidates = page.evaluate_handle(COLLECT_CANDIDATES_JS, [hint_selector, FEED_SELECTORS])
    try:
        metrics: List[NodeMetrics] = [
            NodeMetrics(**item) for item in candidates.evaluate(DESCRIBE_CANDIDATES_JS)
        ]
        if not metrics:
            return document_root(page)

        index = pick_scroll_root(metrics)
        if index is None:
            logger.debug("No scrollable candidate found, using document scroll root")
            index = len(metrics) - 1

        chosen = metrics[index]
        logger.info(f"Selected scroll root: {chosen.label} (span={chosen.scroll_span}px)")
        return candidates.evaluate_handle("(nodes, i) => nodes[i]", index).as_element()
    finally:
        candidates.dispose()

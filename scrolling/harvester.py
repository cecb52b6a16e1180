"""
ScrollHarvest Incremental Anchor Harvester
Keeps every item anchor seen during a session, even after the page evicts it.
"""

import logging
from typing import Dict, Iterable, List, NamedTuple

logger = logging.getLogger(__name__)

SNAPSHOT_ANCHORS_JS = """
(anchors) => anchors.map((a) => {
  const img = a.querySelector("img");
  return {
    href: a.getAttribute("href") || "",
    image: (img && img.getAttribute("src")) || "",
    html: a.outerHTML,
  };
})
"""

SYNTHETIC_CONTAINER = '<div id="synthetic-container">{}</div>'


class ItemKey(NamedTuple):
    """Anchor identity across rounds: link target plus first image source."""
    href: str
    image_src: str


class AnchorHarvester:
    """Session-scoped accumulator of item anchor markup (first seen wins)."""

    def __init__(self, item_selector: str):
        self.item_selector = item_selector
        self._seen: Dict[ItemKey, str] = {}

    @property
    def count(self) -> int:
        return len(self._seen)

    def snapshots(self) -> List[str]:
        """Stored markup in first-seen order."""
        return list(self._seen.values())

    def merge(self, anchors: Iterable[dict]) -> int:
        """
        Add anchors whose key is new; existing keys keep their first markup.

        Args:
            anchors: Dicts with 'href', 'image' and 'html' entries

        Returns:
            Accumulated number of distinct anchors
        """
        added = 0
        for anchor in anchors:
            key = ItemKey(anchor.get("href") or "", anchor.get("image") or "")
            if key in self._seen:
                continue
            self._seen[key] = anchor.get("html") or ""
            added += 1

        if added:
            logger.debug(f"Harvested {added} new anchors ({len(self._seen)} total)")
        return len(self._seen)

    def harvest(self, page) -> int:
        """Scan the live page for item anchors and merge them."""
        anchors = page.eval_on_selector_all(self.item_selector, SNAPSHOT_ANCHORS_JS)
        return self.merge(anchors)

    def synthetic_html(self) -> str:
        """Wrap every stored anchor in one container for re-parsing."""
        return SYNTHETIC_CONTAINER.format("".join(self._seen.values()))

"""
ScrollHarvest Scroll Session
One scroll-and-harvest pass over a loaded listing page.
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from config import (
    ITEM_SELECTOR,
    CONTAINER_SELECTOR,
    DESIRED_ITEM_COUNT,
    MAX_SCROLL_ROUNDS,
    SCROLL_DELAY_MS,
    STALL_ROUNDS,
    ARROW_DOWN_PRESSES,
)
from .harvester import AnchorHarvester
from .root import select_root, document_root
from .stimulus import StimulusDriver, build_strategies
from .termination import TerminationPolicy, StopReason

logger = logging.getLogger(__name__)

DOCUMENT_HEIGHT_JS = """
() => {
  const el = document.scrollingElement || document.documentElement || document.body;
  return el ? el.scrollHeight : 0;
}
"""


@dataclass
class ScrollOptions:
    """Tunables for one scroll session."""
    item_selector: str = ITEM_SELECTOR
    target_count: int = DESIRED_ITEM_COUNT
    max_rounds: int = MAX_SCROLL_ROUNDS
    delay_ms: int = SCROLL_DELAY_MS
    stall_rounds: int = STALL_ROUNDS
    container_selector: str = CONTAINER_SELECTOR
    direct_scroll: bool = True
    wheel: bool = True
    keyboard: bool = True
    dismiss_overlays: bool = False
    arrow_down_presses: int = ARROW_DOWN_PRESSES
    key_delay_ms: int = 10
    wheel_delta: int = 1200
    wheel_delay_ms: int = 50


@dataclass
class ScrollOutcome:
    """Summary of a finished session."""
    rounds: int
    item_count: int
    stop_reason: Optional[StopReason]
    extent: int


class ScrollSession:
    """
    Drives one page through stimulus rounds until the termination policy says stop.

    The session owns the seen-item map (through its harvester) and the round
    counters; the scroll root handle belongs to the page.
    """

    def __init__(
        self,
        page,
        options: Optional[ScrollOptions] = None,
        driver: Optional[StimulusDriver] = None,
        harvester: Optional[AnchorHarvester] = None,
        root_selector: Callable = select_root,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.page = page
        self.options = options or ScrollOptions()
        self.harvester = harvester or AnchorHarvester(self.options.item_selector)
        self.driver = driver or StimulusDriver(
            build_strategies(self.options, sleep=sleep),
            settle_ms=self.options.delay_ms,
            sleep=sleep,
        )
        self.policy = TerminationPolicy(
            target_count=self.options.target_count,
            max_rounds=self.options.max_rounds,
            stall_rounds=self.options.stall_rounds,
        )
        self._root_selector = root_selector
        self.root = None

    @property
    def round_index(self) -> int:
        return self.policy.rounds_completed

    @property
    def last_extent(self) -> int:
        return self.policy.last_extent

    @property
    def stall_count(self) -> int:
        return self.policy.stall_count

    def _choose_root(self):
        try:
            self.root = self._root_selector(self.page, self.options.container_selector)
        except Exception as e:
            logger.warning(f"Scroll root selection failed, using document root: {e}")
            try:
                self.root = document_root(self.page)
            except Exception as e:
                logger.debug(f"Document root unavailable, scrolling the window: {e}")
                self.root = None

    def _measure_extent(self) -> Optional[int]:
        if self.root is not None:
            try:
                return int(self.root.evaluate("(el) => el.scrollHeight"))
            except Exception as e:
                logger.debug(f"Could not read root extent: {e}")
        try:
            return int(self.page.evaluate(DOCUMENT_HEIGHT_JS))
        except Exception as e:
            logger.debug(f"Could not read document extent: {e}")
            return None

    def _count_items(self) -> Optional[int]:
        """Accumulated count, else the visible anchor count, else None."""
        try:
            return self.harvester.harvest(self.page)
        except Exception as e:
            logger.debug(f"Harvest failed this round: {e}")
        try:
            return self.page.locator(self.options.item_selector).count()
        except Exception as e:
            logger.debug(f"Visible count failed this round: {e}")
            return None

    def run(self) -> ScrollOutcome:
        """Select the root once, then loop stimulate -> harvest -> check."""
        self._choose_root()
        self.policy.begin(self._measure_extent() or 0)

        count = None
        while not self.policy.done:
            round_index = self.policy.rounds_completed
            self.driver.stimulate(self.page, self.root, round_index)
            count = self._count_items()
            extent = self._measure_extent()
            logger.debug(
                f"Round {round_index}: items={count} extent={self.policy.last_extent}->{extent}"
            )
            self.policy.observe(count, extent)

        reason = self.policy.stop_reason
        logger.info(
            f"Scrolling stopped after {self.policy.rounds_completed} rounds "
            f"({reason.value if reason else 'unknown'}), {self.harvester.count} anchors harvested"
        )
        return ScrollOutcome(
            rounds=self.policy.rounds_completed,
            item_count=self.harvester.count or (count or 0),
            stop_reason=reason,
            extent=self.policy.last_extent,
        )

    def snapshot_html(self) -> Tuple[str, str]:
        """
        Markup for extraction, in preference order.

        Returns:
            (html, source) where source is 'synthetic', 'container' or 'page'
        """
        if self.harvester.count:
            return self.harvester.synthetic_html(), "synthetic"

        try:
            container_html = self.page.eval_on_selector(
                self.options.container_selector, "(el) => el.outerHTML"
            )
            if container_html:
                return container_html, "container"
        except Exception as e:
            logger.debug(f"Container snapshot unavailable: {e}")

        return self.page.content(), "page"

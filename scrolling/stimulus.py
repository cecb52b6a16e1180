"""
ScrollHarvest Stimulus Driver
Pushes the feed forward with several independent input channels per round.

Lazy loaders listen to different input classes, so every enabled channel
fires every round and a failure in one never blocks the others.
"""

import logging
import time
from typing import Callable, List, Sequence

logger = logging.getLogger(__name__)

# Minimum step in px and fraction of the viewport scrolled per round
MIN_SCROLL_STEP = 200
VIEWPORT_FRACTION = 0.9

SCROLL_STEP_JS = """
(el, [minStep, fraction]) => {
  const increment = Math.max(minStep, Math.floor(window.innerHeight * fraction));
  const maxTop = Math.max(0, el.scrollHeight - el.clientHeight);
  el.scrollTop = Math.min(el.scrollTop + increment, maxTop);
  el.dispatchEvent(new Event("scroll", { bubbles: true }));
  try {
    el.lastElementChild && el.lastElementChild.scrollIntoView({ block: "end" });
  } catch (e) {}
  window.dispatchEvent(new Event("scroll"));
  if (el !== document.scrollingElement) window.scrollBy(0, increment);
}
"""

WINDOW_SCROLL_JS = """
([minStep, fraction]) => {
  window.scrollBy(0, Math.max(minStep, Math.floor(window.innerHeight * fraction)));
  window.dispatchEvent(new Event("scroll"));
}
"""

# Close buttons of login / promo overlays
OVERLAY_CLOSE_SELECTORS = [
    '[aria-label="Close"]',
    'div[role="dialog"] div[role="button"]:has(svg)',
    'div[role="dialog"] [role="button"]:first-child',
]


class DirectScrollStrategy:
    """Move the root's scroll offset and fire scroll events on root and window."""

    name = "direct_scroll"

    def __init__(self, min_step: int = MIN_SCROLL_STEP, fraction: float = VIEWPORT_FRACTION):
        self.min_step = min_step
        self.fraction = fraction

    def __call__(self, page, root, round_index: int):
        if root is None:
            page.evaluate(WINDOW_SCROLL_JS, [self.min_step, self.fraction])
            return
        root.evaluate(SCROLL_STEP_JS, [self.min_step, self.fraction])


class WheelStrategy:
    """Synthetic pointer move plus a large downward wheel delta."""

    name = "wheel"

    def __init__(self, delta_y: int = 1200, position=(200, 200), delay_ms: int = 50,
                 sleep: Callable[[float], None] = time.sleep):
        self.delta_y = delta_y
        self.position = position
        self.delay_ms = delay_ms
        self.sleep = sleep

    def __call__(self, page, root, round_index: int):
        x, y = self.position
        page.mouse.move(x, y)
        if self.delay_ms:
            self.sleep(self.delay_ms / 1000)
        page.mouse.wheel(0, self.delta_y)


class KeyboardStrategy:
    """Focus the feed and press ArrowDown repeatedly, End every third round."""

    name = "keyboard"

    def __init__(self, presses: int = 40, delay_ms: int = 10, end_every: int = 3,
                 sleep: Callable[[float], None] = time.sleep):
        self.presses = presses
        self.delay_ms = delay_ms
        self.end_every = end_every
        self.sleep = sleep

    def _focus(self, page, root):
        try:
            root.focus()
        except Exception:
            page.focus("body")

    def __call__(self, page, root, round_index: int):
        self._focus(page, root)
        for _ in range(self.presses):
            page.keyboard.press("ArrowDown")
            if self.delay_ms:
                self.sleep(self.delay_ms / 1000)
        if self.end_every and round_index % self.end_every == 0:
            page.keyboard.press("End")


class OverlayDismissStrategy:
    """Close a visible modal overlay, falling back to Escape."""

    name = "overlay_dismiss"

    def __init__(self, selectors: Sequence[str] = OVERLAY_CLOSE_SELECTORS):
        self.selectors = list(selectors)

    def __call__(self, page, root, round_index: int):
        for selector in self.selectors:
            try:
                close_btn = page.locator(selector).first
                if close_btn.is_visible():
                    close_btn.click()
                    logger.debug(f"Dismissed overlay via {selector}")
                    return
            except Exception:
                continue

        page.keyboard.press("Escape")


class StimulusDriver:
    """Runs an ordered list of stimulus strategies, isolating their failures."""

    def __init__(self, strategies: List, settle_ms: int = 800,
                 sleep: Callable[[float], None] = time.sleep):
        """
        Args:
            strategies: Callables taking (page, root, round_index), each with a `name`
            settle_ms: Wait after all channels fired, for async loaders to insert nodes
            sleep: Sleep function (seconds)
        """
        self.strategies = list(strategies)
        self.settle_ms = settle_ms
        self.sleep = sleep

    def stimulate(self, page, root, round_index: int) -> List[str]:
        """
        Apply every strategy once.

        Returns:
            Names of the channels that failed this round
        """
        failed = []
        for strategy in self.strategies:
            name = getattr(strategy, "name", type(strategy).__name__)
            try:
                strategy(page, root, round_index)
            except Exception as e:
                logger.debug(f"Round {round_index}: {name} channel failed: {e}")
                failed.append(name)

        if self.settle_ms:
            self.sleep(self.settle_ms / 1000)
        return failed


def build_strategies(options, sleep: Callable[[float], None] = time.sleep) -> List:
    """Enabled strategies for a ScrollOptions, in firing order."""
    strategies = []
    if options.dismiss_overlays:
        strategies.append(OverlayDismissStrategy())
    if options.direct_scroll:
        strategies.append(DirectScrollStrategy())
    if options.wheel:
        strategies.append(WheelStrategy(
            delta_y=options.wheel_delta,
            delay_ms=options.wheel_delay_ms,
            sleep=sleep,
        ))
    if options.keyboard:
        strategies.append(KeyboardStrategy(
            presses=options.arrow_down_presses,
            delay_ms=options.key_delay_ms,
            sleep=sleep,
        ))
    return strategies

"""
Shared fakes standing in for a Playwright page.

The fakes model just enough of a rendered page for the scroll engine:
a list of item anchors (which tests may grow or evict), a scroll height,
input devices that record what they receive, and locators.
"""

from __future__ import annotations

import pytest
from playwright.sync_api import TimeoutError as PlaywrightTimeout


class FakeMouse:
    def __init__(self, events: list) -> None:
        self.events = events

    def move(self, x, y) -> None:
        self.events.append(("move", x, y))

    def wheel(self, delta_x, delta_y) -> None:
        self.events.append(("wheel", delta_x, delta_y))


class FakeKeyboard:
    def __init__(self, events: list) -> None:
        self.events = events

    def press(self, key) -> None:
        self.events.append(("press", key))

    def type(self, text) -> None:
        self.events.append(("type", text))


class FakeRoot:
    """Element handle for the scroll root; its scrollHeight is the page height."""

    def __init__(self, page, focusable: bool = True) -> None:
        self.page = page
        self.focusable = focusable
        self.evaluated = []

    def evaluate(self, expression, arg=None):
        self.evaluated.append((expression, arg))
        if self.page.fail_extent:
            raise RuntimeError("Element is not attached to the DOM")
        return self.page.height

    def focus(self) -> None:
        if not self.focusable:
            raise RuntimeError("Element is not focusable")
        self.page.events.append(("focus", "root"))


class FakeHandle:
    def __init__(self, element) -> None:
        self.element = element

    def as_element(self):
        return self.element


class FakeLocator:
    def __init__(self, page, selector: str) -> None:
        self.page = page
        self.selector = selector

    @property
    def first(self):
        return self

    def count(self) -> int:
        if self.page.fail_count:
            raise RuntimeError("Target closed")
        return len(self.page.anchors)

    def is_visible(self) -> bool:
        return self.selector in self.page.visible_selectors

    def click(self) -> None:
        self.page.events.append(("click", self.selector))


class FakePage:
    def __init__(self, anchors=None, height: int = 1000, container_html=None,
                 content: str = "<html><body></body></html>") -> None:
        self.anchors = list(anchors or [])
        self.height = height
        self.container_html = container_html
        self._content = content
        self.events = []
        self.mouse = FakeMouse(self.events)
        self.keyboard = FakeKeyboard(self.events)
        self.visible_selectors = set()
        self.missing_selectors = set()
        self.goto_error = None
        self.fail_harvest = False
        self.fail_count = False
        self.fail_extent = False
        self.visited = []
        self.closed = False

    def add_anchor(self, href: str, image: str = "", html=None, grow: int = 100) -> None:
        self.anchors.append({
            "href": href,
            "image": image,
            "html": html or f'<a href="{href}"><img src="{image}"/></a>',
        })
        self.height += grow

    # Playwright page surface used by the engine

    def goto(self, url, **kwargs) -> None:
        if self.goto_error:
            raise self.goto_error
        self.visited.append(url)

    def wait_for_selector(self, selector, timeout=None) -> None:
        if selector in self.missing_selectors:
            raise PlaywrightTimeout(f"Timeout {timeout}ms exceeded waiting for {selector}")

    def eval_on_selector_all(self, selector, expression, arg=None):
        if self.fail_harvest:
            raise RuntimeError("Execution context was destroyed")
        return [dict(anchor) for anchor in self.anchors]

    def eval_on_selector(self, selector, expression, arg=None):
        if self.container_html is None:
            raise RuntimeError(f"Failed to find element matching selector {selector}")
        return self.container_html

    def evaluate(self, expression, arg=None):
        self.events.append(("evaluate", arg))
        return self.height

    def evaluate_handle(self, expression, arg=None):
        return FakeHandle(FakeRoot(self))

    def locator(self, selector):
        return FakeLocator(self, selector)

    def focus(self, selector) -> None:
        self.events.append(("focus", selector))

    def query_selector(self, selector):
        return None if selector in self.missing_selectors else object()

    def content(self) -> str:
        return self._content

    def close(self) -> None:
        self.closed = True


@pytest.fixture()
def fake_page() -> FakePage:
    return FakePage()


@pytest.fixture()
def no_sleep():
    """Sleep stand-in that records requested delays."""
    calls = []

    def sleep(seconds):
        calls.append(seconds)

    sleep.calls = calls
    return sleep

"""
tests/test_stimulus.py

Stimulus channels and the driver's per-channel failure isolation.
"""

from __future__ import annotations

from scrolling import ScrollOptions, StimulusDriver, build_strategies
from scrolling.stimulus import (
    DirectScrollStrategy,
    KeyboardStrategy,
    OverlayDismissStrategy,
    WheelStrategy,
)
from conftest import FakePage, FakeRoot


class Recorder:
    def __init__(self, name, log, fail=False):
        self.name = name
        self.log = log
        self.fail = fail

    def __call__(self, page, root, round_index):
        self.log.append((self.name, round_index))
        if self.fail:
            raise RuntimeError("Node is detached from document")


class TestStimulusDriver:
    def test_runs_every_strategy_in_order(self, fake_page, no_sleep) -> None:
        log = []
        driver = StimulusDriver([Recorder("a", log), Recorder("b", log)], settle_ms=0, sleep=no_sleep)
        assert driver.stimulate(fake_page, None, 4) == []
        assert log == [("a", 4), ("b", 4)]

    def test_failing_channel_does_not_block_others(self, fake_page, no_sleep) -> None:
        log = []
        driver = StimulusDriver(
            [Recorder("a", log, fail=True), Recorder("b", log), Recorder("c", log, fail=True)],
            settle_ms=0,
            sleep=no_sleep,
        )
        assert driver.stimulate(fake_page, None, 0) == ["a", "c"]
        assert [name for name, _ in log] == ["a", "b", "c"]

    def test_settle_delay_after_channels(self, fake_page, no_sleep) -> None:
        driver = StimulusDriver([], settle_ms=800, sleep=no_sleep)
        driver.stimulate(fake_page, None, 0)
        assert no_sleep.calls == [0.8]


class TestDirectScroll:
    def test_scrolls_root_with_step_parameters(self) -> None:
        page = FakePage()
        root = FakeRoot(page)
        DirectScrollStrategy()(page, root, 0)
        [(expression, arg)] = root.evaluated
        assert arg == [200, 0.9]
        assert "dispatchEvent" in expression
        assert "window.scrollBy" in expression

    def test_without_root_scrolls_window(self) -> None:
        page = FakePage()
        DirectScrollStrategy(min_step=300, fraction=0.5)(page, None, 0)
        assert page.events == [("evaluate", [300, 0.5])]


class TestWheel:
    def test_moves_pointer_then_wheels(self, no_sleep) -> None:
        page = FakePage()
        WheelStrategy(sleep=no_sleep)(page, None, 0)
        assert page.events == [("move", 200, 200), ("wheel", 0, 1200)]
        assert no_sleep.calls == [0.05]


class TestKeyboard:
    def test_arrow_presses_and_end_on_every_third_round(self, no_sleep) -> None:
        page = FakePage()
        root = FakeRoot(page)
        strategy = KeyboardStrategy(presses=3, delay_ms=10, sleep=no_sleep)

        ends = []
        for round_index in range(7):
            page.events.clear()
            strategy(page, root, round_index)
            arrows = [e for e in page.events if e == ("press", "ArrowDown")]
            assert len(arrows) == 3
            if ("press", "End") in page.events:
                ends.append(round_index)

        assert ends == [0, 3, 6]
        assert no_sleep.calls == [0.01] * 21

    def test_focuses_root(self, no_sleep) -> None:
        page = FakePage()
        KeyboardStrategy(presses=1, sleep=no_sleep)(page, FakeRoot(page), 1)
        assert page.events[0] == ("focus", "root")

    def test_falls_back_to_body_focus(self, no_sleep) -> None:
        page = FakePage()
        KeyboardStrategy(presses=1, sleep=no_sleep)(page, FakeRoot(page, focusable=False), 1)
        assert page.events[0] == ("focus", "body")

    def test_no_root_focuses_body(self, no_sleep) -> None:
        page = FakePage()
        KeyboardStrategy(presses=0, sleep=no_sleep)(page, None, 1)
        assert page.events == [("focus", "body")]


class TestOverlayDismiss:
    def test_clicks_visible_close_button(self) -> None:
        page = FakePage()
        page.visible_selectors.add('[aria-label="Close"]')
        OverlayDismissStrategy()(page, None, 0)
        assert page.events == [("click", '[aria-label="Close"]')]

    def test_presses_escape_when_nothing_visible(self) -> None:
        page = FakePage()
        OverlayDismissStrategy()(page, None, 0)
        assert page.events == [("press", "Escape")]


class TestBuildStrategies:
    def test_default_channels(self) -> None:
        names = [s.name for s in build_strategies(ScrollOptions())]
        assert names == ["direct_scroll", "wheel", "keyboard"]

    def test_toggles(self) -> None:
        options = ScrollOptions(dismiss_overlays=True, keyboard=False, wheel=False)
        names = [s.name for s in build_strategies(options)]
        assert names == ["overlay_dismiss", "direct_scroll"]

    def test_keyboard_tunables_passed_through(self) -> None:
        options = ScrollOptions(direct_scroll=False, wheel=False, arrow_down_presses=7, key_delay_ms=25)
        [keyboard] = build_strategies(options)
        assert keyboard.presses == 7
        assert keyboard.delay_ms == 25

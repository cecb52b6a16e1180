"""
tests/test_termination.py

TerminationPolicy state machine: target, stall and round bounds.
"""

from __future__ import annotations

import pytest

from scrolling import PolicyState, StopReason, TerminationPolicy


def policy(**kwargs) -> TerminationPolicy:
    p = TerminationPolicy(**kwargs)
    p.begin(1000)
    return p


class TestTargetCount:
    def test_stops_when_target_reached(self) -> None:
        p = policy(target_count=3)
        assert p.observe(2, 1100) is PolicyState.RUNNING
        assert p.observe(3, 1200) is PolicyState.DONE
        assert p.stop_reason is StopReason.TARGET_REACHED
        assert p.rounds_completed == 2

    def test_target_checked_before_stall(self) -> None:
        p = policy(target_count=1, stall_rounds=1)
        p.observe(1, 1000)
        assert p.stop_reason is StopReason.TARGET_REACHED

    def test_unknown_count_never_reaches_target(self) -> None:
        p = policy(target_count=0, stall_rounds=5)
        assert p.observe(None, 1100) is PolicyState.RUNNING


class TestStall:
    def test_stops_after_consecutive_stall_rounds(self) -> None:
        p = policy(target_count=100, stall_rounds=3)
        assert p.observe(0, 1000) is PolicyState.RUNNING
        assert p.observe(0, 1000) is PolicyState.RUNNING
        assert p.observe(0, 1000) is PolicyState.DONE
        assert p.stop_reason is StopReason.STALLED
        assert p.stall_count == 3

    def test_growth_resets_stall_counter(self) -> None:
        p = policy(target_count=100, stall_rounds=3)
        p.observe(0, 1000)
        p.observe(0, 1000)
        p.observe(0, 1500)
        assert p.stall_count == 0
        assert p.last_extent == 1500
        p.observe(0, 1500)
        p.observe(0, 1500)
        assert not p.done

    def test_shrinking_extent_counts_as_stall(self) -> None:
        p = policy(target_count=100, stall_rounds=1)
        p.observe(0, 900)
        assert p.stop_reason is StopReason.STALLED

    def test_unreadable_extent_counts_as_stall(self) -> None:
        p = policy(target_count=100, stall_rounds=2)
        p.observe(0, None)
        assert p.stall_count == 1
        assert p.last_extent == 1000

    def test_stall_rounds_must_be_positive(self) -> None:
        with pytest.raises(ValueError):
            TerminationPolicy(stall_rounds=0)


class TestRoundBound:
    def test_stops_at_max_rounds(self) -> None:
        p = policy(target_count=10_000, max_rounds=50)
        extent = 1000
        while not p.done:
            extent += 10
            p.observe(0, extent)
        assert p.rounds_completed == 50
        assert p.stop_reason is StopReason.MAX_ROUNDS

    def test_zero_max_rounds_done_before_first_round(self) -> None:
        p = policy(max_rounds=0)
        assert p.done
        assert p.stop_reason is StopReason.MAX_ROUNDS


class TestTerminalState:
    def test_done_is_not_reentered(self) -> None:
        p = policy(target_count=1)
        p.observe(1, 1100)
        assert p.observe(0, 5000) is PolicyState.DONE
        assert p.rounds_completed == 1
        assert p.stop_reason is StopReason.TARGET_REACHED
        assert p.last_extent == 1000

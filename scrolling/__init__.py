"""ScrollHarvest Scroll Engine Package"""

from .harvester import AnchorHarvester, ItemKey
from .root import NodeMetrics, pick_scroll_root, select_root
from .session import ScrollOptions, ScrollOutcome, ScrollSession
from .stimulus import StimulusDriver, build_strategies
from .termination import PolicyState, StopReason, TerminationPolicy

__all__ = [
    "AnchorHarvester",
    "ItemKey",
    "NodeMetrics",
    "pick_scroll_root",
    "select_root",
    "ScrollOptions",
    "ScrollOutcome",
    "ScrollSession",
    "StimulusDriver",
    "build_strategies",
    "PolicyState",
    "StopReason",
    "TerminationPolicy",
]

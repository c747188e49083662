"""Route search tunables."""

from dataclasses import dataclass
from enum import Enum


class SearchMode(str, Enum):
    """How much of the search the top-level route query runs eagerly."""

    DIRECT_ONLY = "direct"  # same-train / connected search on demand only
    WITH_SAME_TRAIN = "same-train"
    FULL = "full"  # direct + same-train + multi-train connections


@dataclass(frozen=True)
class SearchOptions:
    """Tunables of the route search engine."""

    mode: SearchMode = SearchMode.DIRECT_ONLY
    max_connections: int = 1
    min_transfer_minutes: int = 45
    max_transfer_minutes: int = 8 * 60
    transfer_overhead_minutes: int = 45
    hub_fanout_limit: int = 8
    max_partial_chains: int = 20
    # None keeps every route; a number caps the ranked output (policy, not correctness)
    result_limit: int | None = None

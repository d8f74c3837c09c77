"""
Duplicate filter for search states.

Only states sitting on the first position of a block are remembered. Inside a
block control flow is linear, so interior positions cannot be reached twice
without passing the block entry first.
"""

from typing import Hashable, Set, Tuple

from calldist.analysis.graph import ProgramGraph
from calldist.analysis.state import SearchState


class DuplicateFilter:
    """Remembers (block entry position, call stack) pairs already enqueued."""

    def __init__(self, graph: ProgramGraph):
        self.graph = graph
        self._seen: Set[Tuple[Hashable, Tuple[Hashable, ...]]] = set()

    def _key(self, state: SearchState):
        return (state.position, state.stack.calls)

    def was_seen(self, state: SearchState) -> bool:
        if not self.graph.is_block_entry(state.position):
            return False
        return self._key(state) in self._seen

    def mark_seen(self, state: SearchState) -> None:
        if self.graph.is_block_entry(state.position):
            self._seen.add(self._key(state))

    def __len__(self) -> int:
        return len(self._seen)

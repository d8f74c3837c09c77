"""
Search frontier.

A binary heap ordered by distance. Equal distances leave in insertion order,
which keeps the search breadth-first and deterministic.
"""

import heapq
import itertools
from typing import List, Optional, Tuple

from calldist.analysis.state import SearchState


class Frontier:
    """
    Bounded min-distance priority queue of :class:`SearchState`.

    A push is dropped once the frontier holds more than ``max_length``
    entries. That may hide the true minimum on graphs with very large fan-out;
    it is an accepted approximation.
    """

    def __init__(self, max_length: int):
        self.max_length = max_length
        self.peak_size = 0
        self._heap: List[Tuple[int, int, SearchState]] = []
        self._sequence = itertools.count()

    def push(self, state: SearchState) -> bool:
        """
        Insert ``state`` unless the frontier is over capacity.

        Returns:
            True if the state was admitted
        """
        if len(self._heap) > self.max_length:
            return False
        heapq.heappush(self._heap, (state.distance, next(self._sequence), state))
        self.peak_size = max(self.peak_size, len(self._heap))
        return True

    def pop(self) -> SearchState:
        return heapq.heappop(self._heap)[2]

    def peek(self) -> SearchState:
        return self._heap[0][2]

    @property
    def min_distance(self) -> Optional[int]:
        return self._heap[0][0] if self._heap else None

    def __len__(self) -> int:
        return len(self._heap)

    def __bool__(self) -> bool:
        return bool(self._heap)

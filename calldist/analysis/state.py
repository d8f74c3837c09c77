"""Search state: where the traversal is, how far it came, and its call context."""

from dataclasses import dataclass
from typing import Optional

from calldist.analysis.graph import Position
from calldist.analysis.stack import EMPTY_STACK, CallStack


@dataclass(frozen=True)
class SearchState:
    position: Position
    distance: int = 0
    stack: CallStack = EMPTY_STACK

    def advance(
        self, position: Position, cost: int, stack: Optional[CallStack] = None
    ) -> "SearchState":
        """Child state at ``position``, ``cost`` further from the start."""
        return SearchState(
            position=position,
            distance=self.distance + cost,
            stack=self.stack if stack is None else stack,
        )

"""
Bounded, call-stack-sensitive breadth-first search.

The searcher measures how many (weighted) instructions lie between a start
position and a target position. Calls push the call site on the state's
stack and returns resume right after the call site on top of it, so a
function only ever returns to the caller that actually entered it.
"""

import enum
from dataclasses import dataclass
from typing import Iterable, Optional

from calldist.analysis.config import SearchConfig
from calldist.analysis.dedup import DuplicateFilter
from calldist.analysis.errors import GraphInvariantError, SearchError
from calldist.analysis.frontier import Frontier
from calldist.analysis.graph import Position, PositionKind, ProgramGraph
from calldist.analysis.guard import would_introduce_recursion
from calldist.analysis.stack import CallStack, StackEntry
from calldist.analysis.state import SearchState
from calldist.logger import get_logger

logger = get_logger("calldist.analysis.searcher")

UNREACHABLE = None


class StopReason(enum.Enum):
    FOUND = "found"
    EXHAUSTED = "exhausted"
    DISTANCE_BOUND = "distance_bound"
    ITERATION_BOUND = "iteration_bound"


@dataclass(frozen=True)
class SearchResult:
    """Outcome of one search together with its pruning counters."""

    distance: Optional[int]
    stop_reason: StopReason
    iterations: int
    recursion_pruned: int = 0
    duplicates_dropped: int = 0
    queue_dropped: int = 0
    peak_frontier: int = 0

    @property
    def reachable(self) -> bool:
        return self.distance is not UNREACHABLE

    def stats(self) -> dict:
        return {
            "iterations": self.iterations,
            "recursion_pruned": self.recursion_pruned,
            "duplicates_dropped": self.duplicates_dropped,
            "queue_dropped": self.queue_dropped,
            "peak_frontier": self.peak_frontier,
        }


class BFSearcher:
    """
    Single-use search for the minimal distance from ``start`` to ``target``.

    Args:
        graph: Program graph adapter
        start: Position the search starts at
        target: Position whose distance is wanted
        initial_stack: Call positions already active at ``start``, outermost
            first. Lets a search start inside a known call nest.
        config: Search bounds and step cost
    """

    def __init__(
        self,
        graph: ProgramGraph,
        start: Position,
        target: Position,
        initial_stack: Optional[Iterable[Position]] = None,
        config: Optional[SearchConfig] = None,
    ):
        self.graph = graph
        self.target = target
        self.config = config or SearchConfig()

        self.frontier = Frontier(self.config.max_queue_length)
        self.duplicate_filter = DuplicateFilter(graph)
        self.iteration_counter = 0
        self.recursion_pruned = 0
        self.duplicates_dropped = 0
        self.queue_dropped = 0
        self._result: Optional[SearchResult] = None

        calls = list(initial_stack or ())
        graph.check_position(start)
        for call in calls:
            graph.check_position(call)
            if graph.kind_of(call) is not PositionKind.CALL:
                raise GraphInvariantError(
                    f"initial stack entry {call!r} is not a call position"
                )

        self.start = SearchState(start, 0, CallStack.from_calls(calls))
        self._add_to_search_queue(self.start)

    def is_target(self, state: SearchState) -> bool:
        return state.position == self.target

    def search_for_minimal_distance(self) -> Optional[int]:
        """
        Run the search.

        Returns:
            The minimal distance, or ``UNREACHABLE`` (None) if the target was
            not found within the configured bounds
        """
        return self.run().distance

    def run(self) -> SearchResult:
        if self._result is not None:
            raise SearchError("a BFSearcher instance can only run once")

        logger.debug(
            f"Searching from {self.start.position!r} to {self.target!r} "
            f"(stack depth {len(self.start.stack)})"
        )

        distance = UNREACHABLE
        while True:
            if not self.frontier:
                reason = StopReason.EXHAUSTED
                break
            if self.frontier.min_distance >= self.config.max_distance:
                reason = StopReason.DISTANCE_BOUND
                break
            if self.iteration_counter >= self.config.max_iterations:
                reason = StopReason.ITERATION_BOUND
                break

            head = self.frontier.peek()
            if self.is_target(head):
                distance = head.distance
                reason = StopReason.FOUND
                break

            self.do_single_search_iteration()
            self.iteration_counter += 1

        self._result = SearchResult(
            distance=distance,
            stop_reason=reason,
            iterations=self.iteration_counter,
            recursion_pruned=self.recursion_pruned,
            duplicates_dropped=self.duplicates_dropped,
            queue_dropped=self.queue_dropped,
            peak_frontier=self.frontier.peak_size,
        )
        logger.debug(
            f"Search finished: {reason.value}, distance={distance}, "
            f"iterations={self.iteration_counter}"
        )
        return self._result

    def do_single_search_iteration(self) -> None:
        """Pop the nearest state and enqueue its successors."""
        curr = self.frontier.pop()
        graph = self.graph
        kind = graph.kind_of(curr.position)

        if kind is PositionKind.CALL:
            callee = graph.callee_of(curr.position)
            if graph.is_defined_call(callee):
                entry = StackEntry(curr.position)
                if would_introduce_recursion(graph, curr.stack, entry):
                    self.recursion_pruned += 1
                    return
                self._enqueue(
                    curr,
                    graph.first_position_of(callee.entry_block),
                    curr.stack.push(entry),
                )
            else:
                # 外部调用、内建函数：当作普通指令跳过
                self._enqueue(curr, self._next_position(curr.position), curr.stack)

        elif kind is PositionKind.RETURN:
            if curr.stack:
                go_back_to, caller_stack = curr.stack.pop()
                self._enqueue(curr, self._resume_position(go_back_to), caller_stack)

        elif kind is PositionKind.TERMINATOR:
            for successor in graph.successors_of(graph.block_of(curr.position)):
                self._enqueue(curr, graph.first_position_of(successor), curr.stack)

        elif kind is PositionKind.OTHER:
            self._enqueue(curr, self._next_position(curr.position), curr.stack)

        else:
            raise GraphInvariantError(
                f"position {curr.position!r} has no valid kind (got {kind!r})"
            )

    def _next_position(self, position: Position) -> Position:
        following = self.graph.next_position(position)
        if following is None:
            raise GraphInvariantError(
                f"position {position!r} has no sequential successor in its block"
            )
        return following

    def _resume_position(self, entry: StackEntry) -> Position:
        resume = entry.resume_position(self.graph)
        if resume is None:
            raise GraphInvariantError(
                f"call {entry.call!r} has no position to return to"
            )
        return resume

    def _enqueue(self, parent: SearchState, position: Position, stack: CallStack) -> None:
        cost = self.config.cost_of(parent.position)
        self._add_to_search_queue(parent.advance(position, cost, stack))

    def _add_to_search_queue(self, state: SearchState) -> None:
        if self.duplicate_filter.was_seen(state):
            self.duplicates_dropped += 1
            return
        # 每个新进入的基本块都校验一次；块内位置由 next_position 保证
        if self.graph.is_block_entry(state.position):
            self.graph.check_position(state.position)
        if not self.frontier.push(state):
            self.queue_dropped += 1
            return
        self.duplicate_filter.mark_seen(state)

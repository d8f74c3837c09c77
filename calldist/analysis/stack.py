"""
Call stack model for context-sensitive search.

A :class:`CallStack` is an immutable value. Pushing or popping returns a new
stack, so states produced from the same parent never share mutable storage.
"""

from dataclasses import dataclass
from typing import Iterable, Iterator, Optional, Tuple

from calldist.analysis.errors import SearchError
from calldist.analysis.graph import Position, ProgramGraph


@dataclass(frozen=True)
class StackEntry:
    """A pending return: execution resumes right after ``call``."""

    call: Position

    def resume_position(self, graph: ProgramGraph) -> Position:
        return graph.next_position(self.call)


class CallStack:
    """Persistent last-in-first-out sequence of :class:`StackEntry`."""

    __slots__ = ("_entries",)

    def __init__(self, entries: Iterable[StackEntry] = ()):
        # bottom (outermost caller) first
        self._entries: Tuple[StackEntry, ...] = tuple(entries)

    @classmethod
    def from_calls(cls, calls: Iterable[Position]) -> "CallStack":
        """Build a stack from call positions, outermost caller first."""
        return cls(StackEntry(call) for call in calls)

    @property
    def top(self) -> Optional[StackEntry]:
        return self._entries[-1] if self._entries else None

    @property
    def calls(self) -> Tuple[Position, ...]:
        return tuple(entry.call for entry in self._entries)

    def push(self, entry: StackEntry) -> "CallStack":
        return CallStack(self._entries + (entry,))

    def pop(self) -> Tuple[StackEntry, "CallStack"]:
        """
        Remove the top entry.

        Returns:
            The removed entry and the remaining stack.
        """
        if not self._entries:
            raise SearchError("cannot pop from an empty call stack")
        return self._entries[-1], CallStack(self._entries[:-1])

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)

    def __iter__(self) -> Iterator[StackEntry]:
        return iter(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CallStack):
            return NotImplemented
        return self._entries == other._entries

    def __hash__(self) -> int:
        return hash(self._entries)

    def __repr__(self) -> str:
        return f"CallStack({list(self.calls)!r})"


EMPTY_STACK = CallStack()

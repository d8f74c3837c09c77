"""
Program graph interface consumed by the search engine.

The searcher never looks inside a concrete program representation. Every
question it asks about instructions, blocks and functions goes through a
:class:`ProgramGraph` adapter.
"""

import abc
import enum
from dataclasses import dataclass
from typing import Any, Hashable, Optional, Sequence

from calldist.analysis.errors import GraphInvariantError

Position = Hashable
Block = Hashable


class PositionKind(enum.Enum):
    """Kind of a position, as far as the search is concerned."""

    CALL = "call"
    RETURN = "return"
    TERMINATOR = "terminator"
    OTHER = "other"


@dataclass(frozen=True)
class Callee:
    """
    Resolved target of a call position.

    ``function`` is None for external or unresolved calls. ``entry_block`` is
    None when the function has no body available.
    """

    function: Any = None
    entry_block: Optional[Block] = None

    @property
    def is_external(self) -> bool:
        return self.function is None or self.entry_block is None


EXTERNAL = Callee()


class ProgramGraph(abc.ABC):
    """Abstract capability that supplies control flow to the search engine."""

    @abc.abstractmethod
    def block_of(self, position: Position) -> Block:
        """Return the block that contains ``position``."""

    @abc.abstractmethod
    def positions_of(self, block: Block) -> Sequence[Position]:
        """Return the positions of ``block`` in execution order."""

    @abc.abstractmethod
    def first_position_of(self, block: Block) -> Position:
        """Return the entry position of ``block``."""

    @abc.abstractmethod
    def next_position(self, position: Position) -> Position:
        """
        Return the sequential successor of ``position`` in its block.

        Raises:
            GraphInvariantError: if ``position`` is the last one of its block.
        """

    @abc.abstractmethod
    def successors_of(self, block: Block) -> Sequence[Block]:
        """Return the control-flow successors of ``block``'s terminator."""

    @abc.abstractmethod
    def kind_of(self, position: Position) -> PositionKind:
        """Classify ``position``."""

    @abc.abstractmethod
    def callee_of(self, call_position: Position) -> Callee:
        """Resolve the function called at ``call_position``."""

    @abc.abstractmethod
    def is_intrinsic(self, function: Any) -> bool:
        """Return True if calls to ``function`` are never stepped into."""

    def is_block_entry(self, position: Position) -> bool:
        return self.first_position_of(self.block_of(position)) == position

    def block_contains(self, block: Block, position: Position) -> bool:
        return any(candidate == position for candidate in self.positions_of(block))

    def check_position(self, position: Position) -> None:
        """
        Verify that ``position`` is part of its own block.

        The searcher runs this on the start position, on every initial stack
        entry and on each block-entry position it admits. Interior positions
        are not checked again.

        Raises:
            GraphInvariantError: if the parent block does not list the position.
        """
        block = self.block_of(position)
        if not self.block_contains(block, position):
            raise GraphInvariantError(
                f"position {position!r} is not part of its own block {block!r}"
            )

    def is_defined_call(self, callee: Callee) -> bool:
        """A call the search steps into: resolved, with a body, not intrinsic."""
        return not callee.is_external and not self.is_intrinsic(callee.function)

"""
:class:`ProgramGraph` adapter over the in-memory :class:`Module`.
"""

from typing import Sequence

from calldist.analysis.errors import GraphInvariantError
from calldist.analysis.graph import EXTERNAL, Callee, PositionKind, ProgramGraph
from calldist.program.model import BasicBlock, Function, Instruction, Module


class ModuleGraph(ProgramGraph):
    """Answers the search engine's control-flow questions for a Module."""

    def __init__(self, module: Module):
        self.module = module

    def block_of(self, position: Instruction) -> BasicBlock:
        if position.block is None:
            raise GraphInvariantError(f"{position!r} does not belong to any block")
        return position.block

    def positions_of(self, block: BasicBlock) -> Sequence[Instruction]:
        return block.instructions

    def first_position_of(self, block: BasicBlock) -> Instruction:
        if not block.instructions:
            raise GraphInvariantError(f"{block!r} has no instructions")
        return block.instructions[0]

    def next_position(self, position: Instruction) -> Instruction:
        block = self.block_of(position)
        following = position.index + 1
        if following >= len(block.instructions):
            raise GraphInvariantError(
                f"{position!r} is the last instruction of {block!r} "
                f"and has no sequential successor"
            )
        return block.instructions[following]

    def successors_of(self, block: BasicBlock) -> Sequence[BasicBlock]:
        return block.successors

    def kind_of(self, position: Instruction) -> PositionKind:
        return position.kind

    def callee_of(self, call_position: Instruction) -> Callee:
        if call_position.callee is None:
            return EXTERNAL
        function = self.module.get_function(call_position.callee)
        if function is None:
            return EXTERNAL
        return Callee(function=function, entry_block=function.entry_block)

    def is_intrinsic(self, function: Function) -> bool:
        return function.intrinsic

    def is_block_entry(self, position: Instruction) -> bool:
        return position.index == 0 and position.block is not None

    def block_contains(self, block: BasicBlock, position: Instruction) -> bool:
        index = position.index
        return 0 <= index < len(block.instructions) and block.instructions[index] is position
